"""
client.py - Core umod.org client (initialization / request layer / entry points)

Provides the UMod class that is the primary entrypoint for library users.
This module focuses on plain HTTP handling (one GET per call, no retries),
turning responses into typed records, and the documented search surface.

Usage example:
    from umodpy.client import UMod
    from umodpy.options import categories, tags
    um = UMod()
    page = um.search("heli", categories("rust"), tags("fun"))
    for plugin in page:
        print(plugin.title, plugin.latest_release_version)
    page2 = page.next_page()
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import *
from urllib.parse import urljoin

import requests

from .dataTypes import SORTFIELD, UMODAPIURLS
from .download import download_plugin
from .exceptions import InvalidResponseError, NetworkError, map_http_status
from .options import (
    SearchOption,
    build_params,
    build_query_string,
    categories,
    page,
    query,
    sort_ascending,
    sort_descending,
)
from .types_models import GAME, PLUGIN, SEARCHRESPONSE
from .utils import DEFAULT_USER_AGENT, session_factory

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0

_default_client_lock = threading.Lock()
_default_client: Optional["UMod"] = None


class UMod:
    """
    HTTP client for the umod.org plugin directory.

    Responsibilities:
      - Hold the transport (a requests.Session or anything with a compatible `get`).
      - Issue exactly one GET per call and map failures to library exceptions.
      - Decode games and search pages into typed records.

    Parameters
    ----------
    base_url : Optional[str]
        Plugin search endpoint (defaults to UMODAPIURLS.SEARCH).
    games_url : Optional[str]
        Game catalog document (defaults to UMODAPIURLS.GAMES).
    timeout : float
        Per-request timeout in seconds, applied to every call unless overridden.
    session : Optional[requests.Session]
        Transport to use. Tests pass a fake here. Defaults to `session_factory()`.
    user_agent : str
        User-Agent for the default session.

    Examples
    --------
    >>> um = UMod(timeout=10)
    >>> rust = next(g for g in um.get_games() if g.slug == "rust")
    >>> rust.search("heli").total
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        games_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.base_url: str = base_url or UMODAPIURLS.SEARCH
        self.games_url: str = games_url or UMODAPIURLS.GAMES
        self.timeout = float(timeout)
        self.session = session if session is not None else session_factory(user_agent)

    # Configuration helpers
    def set_base_url(self, base_url: str):
        """
        Change the plugin search endpoint.

        Parameters
        ----------
        base_url : str
            New search URL (e.g., "https://umod.org/plugins/search.json")
        """
        if not isinstance(base_url, str) or not base_url.startswith("http"):
            raise ValueError("base_url must be an http/https URL")
        self.base_url = base_url

    def set_timeout(self, timeout: float):
        """Change the default per-request timeout (seconds)."""
        timeout = float(timeout)
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = timeout

    # Request layer
    def _request(self, url: str, *, timeout: Optional[float] = None) -> Any:
        """
        GET `url` and return the decoded JSON body.

        Raises
        ------
        NetworkError : transport failure (connection, DNS, TLS, timeout). Never retried.
        HTTPStatusError : status >= 400, `.code` carries the status.
        InvalidResponseError : body is not JSON.
        """
        timeout = float(timeout) if timeout is not None else self.timeout
        logger.debug("GET %s (timeout=%.1fs)", url, timeout)
        try:
            resp = self.session.get(url, timeout=timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"Connection error for {url}: {exc}") from exc

        if resp.status_code >= 400:
            content_text = resp.text[:1000] if resp.text else ""
            logger.debug("GET %s failed with status %s", url, resp.status_code)
            raise map_http_status(
                resp.status_code,
                f"non ok http status code {resp.status_code}: {content_text}",
                resp,
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise InvalidResponseError(f"Invalid JSON payload from {url}: {exc}", resp.status_code, resp) from exc

    def _search_url(self, params: Dict[str, str]) -> str:
        qs = build_query_string(params)
        return f"{self.base_url}?{qs}" if qs else self.base_url

    def _get_search(self, url: str, *, timeout: Optional[float] = None) -> SEARCHRESPONSE:
        payload = self._request(url, timeout=timeout)
        if not isinstance(payload, dict):
            raise InvalidResponseError(
                f"Expected a search page object from {url}, got {type(payload).__name__}"
            )
        result = SEARCHRESPONSE.from_dict(payload, client=self)
        logger.debug(
            "search page %d/%d: %d plugins (total %d)",
            result.current_page, result.last_page, len(result.data), result.total,
        )
        return result

    # Entry points
    def get_games(self, *, timeout: Optional[float] = None) -> List[GAME]:
        """
        Retrieve every game published on umod.org.

        The catalog is a single static document, there is no pagination.

        Returns
        -------
        List[GAME]

        Example
        -------
        >>> for g in um.get_games():
        ...     print(g.slug, g.plugin_count)
        """
        payload = self._request(self.games_url, timeout=timeout)
        if not isinstance(payload, list):
            raise InvalidResponseError(
                f"Expected a list of games from {self.games_url}, got {type(payload).__name__}"
            )
        bad = [item for item in payload if not isinstance(item, dict)]
        if bad:
            raise InvalidResponseError(
                f"Expected game objects from {self.games_url}, got {len(bad)} other value(s): {bad[0]!r:.200}"
            )
        return [GAME.from_dict(item, client=self) for item in payload]

    def search(self, title: str, *options: SearchOption, timeout: Optional[float] = None) -> SEARCHRESPONSE:
        """
        Search plugins by free text, refined by `options`.

        Parameters
        ----------
        title : str
            Free text query; "" matches everything.
        *options : SearchOption
            page(), sort_ascending()/sort_descending(), categories(), tags(), ...
            Applied after the title, in order; the last option setting a field wins.
        timeout : Optional[float]
            Overrides the client timeout for this call.

        Returns
        -------
        SEARCHRESPONSE
            First requested page; navigate with next_page()/prev_page().
        """
        url = self._search_url(build_params(query(title), *options))
        return self._get_search(url, timeout=timeout)

    def latest(self, *options: SearchOption, timeout: Optional[float] = None) -> SEARCHRESPONSE:
        """Most recently released plugins first, starting at page 1."""
        return self.search("", sort_descending(SORTFIELD.LATEST_RELEASE_AT), page(1), *options, timeout=timeout)

    def oldest(self, *options: SearchOption, timeout: Optional[float] = None) -> SEARCHRESPONSE:
        """Least recently released plugins first, starting at page 1."""
        return self.search("", sort_ascending(SORTFIELD.LATEST_RELEASE_AT), page(1), *options, timeout=timeout)

    def search_game(
        self,
        game: Union[GAME, str],
        title: str,
        *options: SearchOption,
        timeout: Optional[float] = None,
    ) -> SEARCHRESPONSE:
        """Shortcut for search(title, *options, categories(game.slug))."""
        slug = game.slug if isinstance(game, GAME) else str(game)
        return self.search(title, *options, categories(slug), timeout=timeout)

    def get_page(self, url: str, *, timeout: Optional[float] = None) -> SEARCHRESPONSE:
        """
        Fetch a search page by URL, verbatim.

        Used by SEARCHRESPONSE navigation; the stored page URLs already carry
        every filter. Relative URLs are resolved against `base_url`.
        """
        if not url:
            raise ValueError("url must not be empty")
        return self._get_search(urljoin(self.base_url, url), timeout=timeout)

    def download(
        self,
        plugin: PLUGIN,
        dest: Union[str, Path],
        *,
        verify: bool = True,
        progress: bool = False,
        timeout: Optional[float] = None,
    ) -> Path:
        """
        Download the plugin's source file. See `download.download_plugin`.

        Returns
        -------
        Path
            Final path of the downloaded file.
        """
        return download_plugin(
            plugin,
            dest,
            session=self.session,
            timeout=float(timeout) if timeout is not None else self.timeout,
            verify=verify,
            progress=progress,
        )

    def close(self):
        """Close the underlying session, if it supports closing."""
        closer = getattr(self.session, "close", None)
        if callable(closer):
            closer()

    def __enter__(self) -> "UMod":
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __repr__(self) -> str:
        return f"<UMod base_url={self.base_url!r} timeout={self.timeout}>"


def create_client(**kwargs) -> UMod:
    """
    Convenience factory to create a configured UMod client.

    Parameters
    ----------
    kwargs : forwarded to the UMod constructor (base_url, games_url, timeout, session, user_agent).

    Returns
    -------
    UMod
    """
    return UMod(**kwargs)


def get_default_client() -> UMod:
    """Return the process-wide client used by module-level helpers, creating it on first use."""
    global _default_client
    with _default_client_lock:
        if _default_client is None:
            _default_client = UMod()
        return _default_client


def set_default_client(client: Optional[UMod]) -> None:
    """Replace the process-wide client (None resets it to a fresh default on next use)."""
    global _default_client
    with _default_client_lock:
        _default_client = client


# Module-level shortcuts bound to the default client
def search(title: str, *options: SearchOption, timeout: Optional[float] = None) -> SEARCHRESPONSE:
    return get_default_client().search(title, *options, timeout=timeout)


def latest(*options: SearchOption, timeout: Optional[float] = None) -> SEARCHRESPONSE:
    return get_default_client().latest(*options, timeout=timeout)


def oldest(*options: SearchOption, timeout: Optional[float] = None) -> SEARCHRESPONSE:
    return get_default_client().oldest(*options, timeout=timeout)


def games(*, timeout: Optional[float] = None) -> List[GAME]:
    return get_default_client().get_games(timeout=timeout)
