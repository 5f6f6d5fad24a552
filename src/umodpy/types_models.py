"""
types_models.py

Typed dataclasses for the objects returned by the umod.org API.

Purpose
-------
- Provide typed, documented containers for games, plugins and search pages.
- Supply `from_dict()` factories to convert raw API JSON into typed objects.
- Keep original raw payload available in `.data` for forward-compatibility.

Notes
-----
- Absent or null fields decode to zero values ("" / 0 / [] / empty record),
  timestamps decode to None. A list or object field that is present with
  the wrong JSON type raises InvalidResponseError; scalars are coerced.
- Records returned by a client remember it, so `GAME.search()` and the
  `SEARCHRESPONSE` page navigation reuse the same session.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, List, Dict, Any, Iterator, Union, TYPE_CHECKING
import logging

from .dataTypes import CATEGORY
from .exceptions import InvalidResponseError, NoSuchPageError
from .options import SearchOption
from .utils import parse_datetime, parse_version

if TYPE_CHECKING:
    from .client import UMod

logger = logging.getLogger(__name__)


def _str(d: Dict[str, Any], key: str) -> str:
    value = d.get(key)
    return "" if value is None else str(value)


def _int(d: Dict[str, Any], key: str) -> int:
    try:
        return int(d.get(key) or 0)
    except (TypeError, ValueError):
        return 0


def _dicts(d: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    value = d.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise InvalidResponseError(f"expected a list of objects for {key!r}, got {value!r:.200}")
    return value


def _dict(d: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = d.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidResponseError(f"expected an object for {key!r}, got {value!r:.200}")
    return value


def _client_of(obj: Any) -> "UMod":
    client = getattr(obj, "_client", None)
    if client is None:
        from .client import get_default_client
        client = get_default_client()
    return client


# Game catalog
@dataclass
class GAMECHANNEL:
    """Chat channel a game is bound to (Discord bot integration)."""
    channel_id: str = ""
    bot_name: str = ""
    bot_slug: str = ""
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "GAMECHANNEL":
        d = d or {}
        return cls(
            channel_id=_str(d, "channel_id"),
            bot_name=_str(d, "bot_name"),
            bot_slug=_str(d, "bot_slug"),
            data=d,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class STEAMBRANCH:
    """A Steam branch of the game's dedicated server."""
    name: str = ""
    pwdrequired: int = 0
    timeupdated: str = ""
    buildid: int = 0
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "STEAMBRANCH":
        d = d or {}
        return cls(
            name=_str(d, "name"),
            pwdrequired=_int(d, "pwdrequired"),
            timeupdated=_str(d, "timeupdated"),
            buildid=_int(d, "buildid"),
            data=d,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GAME:
    """
    Represents a game published on umod.org (e.g. Rust).

    The `slug` doubles as a search category; `GAME.search()` is a shortcut
    for `search(title, *options, categories(slug))`.

    Fields that umod.org sends with inconsistent types (`public_branch_description`,
    `files_install`, `files_update`, `skip_update`) are kept as raw JSON values.
    """
    name: str = ""
    slug: str = ""
    description: str = ""
    aliases: str = ""
    game_url: str = ""
    snapshot_url: str = ""
    icon_url: str = ""
    repository: str = ""
    server_appid: str = ""
    client_appid: str = ""
    buildable: int = 0
    umod_buildable: int = 0
    installation_paths: str = ""
    target_framework: str = ""
    target_sdk: str = ""
    public_branch_name: str = ""
    public_branch_description: Any = None
    preprocessor_symbol: str = ""
    steam_authenticated: int = 0
    files_install: Any = None
    files_update: Any = None
    skip_install: str = ""
    skip_update: Any = None
    whitelist: str = ""
    blacklist: str = ""
    update_check_frequency: str = ""
    download_url: str = ""
    url: str = ""
    plugin_count: int = 0
    extension_count: int = 0
    product_count: int = 0
    latest_release_version: str = ""
    latest_release_version_formatted: str = ""
    latest_release_version_checksum: str = ""
    latest_release_at: str = ""
    latest_release_at_atom: Optional[datetime] = None
    watchers: int = 0
    watchers_shortened: str = ""
    channels: List[GAMECHANNEL] = field(default_factory=list)
    steam_branches: List[STEAMBRANCH] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]], client: Optional["UMod"] = None) -> "GAME":
        d = d or {}
        game = cls(
            name=_str(d, "name"),
            slug=_str(d, "slug"),
            description=_str(d, "description"),
            aliases=_str(d, "aliases"),
            game_url=_str(d, "game_url"),
            snapshot_url=_str(d, "snapshot_url"),
            icon_url=_str(d, "icon_url"),
            repository=_str(d, "repository"),
            server_appid=_str(d, "server_appid"),
            client_appid=_str(d, "client_appid"),
            buildable=_int(d, "buildable"),
            umod_buildable=_int(d, "umod_buildable"),
            installation_paths=_str(d, "installation_paths"),
            target_framework=_str(d, "target_framework"),
            target_sdk=_str(d, "target_sdk"),
            public_branch_name=_str(d, "public_branch_name"),
            public_branch_description=d.get("public_branch_description"),
            preprocessor_symbol=_str(d, "preprocessor_symbol"),
            steam_authenticated=_int(d, "steam_authenticated"),
            files_install=d.get("files_install"),
            files_update=d.get("files_update"),
            skip_install=_str(d, "skip_install"),
            skip_update=d.get("skip_update"),
            whitelist=_str(d, "whitelist"),
            blacklist=_str(d, "blacklist"),
            update_check_frequency=_str(d, "update_check_frequency"),
            download_url=_str(d, "download_url"),
            url=_str(d, "url"),
            plugin_count=_int(d, "plugin_count"),
            extension_count=_int(d, "extension_count"),
            product_count=_int(d, "product_count"),
            latest_release_version=_str(d, "latest_release_version"),
            latest_release_version_formatted=_str(d, "latest_release_version_formatted"),
            latest_release_version_checksum=_str(d, "latest_release_version_checksum"),
            latest_release_at=_str(d, "latest_release_at"),
            latest_release_at_atom=parse_datetime(d.get("latest_release_at_atom")),
            watchers=_int(d, "watchers"),
            watchers_shortened=_str(d, "watchers_shortened"),
            channels=[GAMECHANNEL.from_dict(c) for c in _dicts(d, "channels")],
            steam_branches=[STEAMBRANCH.from_dict(b) for b in _dicts(d, "steam_branches")],
            data=d,
        )
        game._client = client
        return game

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def category(self) -> Optional[CATEGORY]:
        """The CATEGORY member matching this game's slug, if any."""
        try:
            return CATEGORY(self.slug)
        except ValueError:
            return None

    def search(self, title: str, *options: SearchOption, timeout: Optional[float] = None) -> "SEARCHRESPONSE":
        """Search plugins supporting this game. See `UMod.search_game`."""
        return _client_of(self).search_game(self, title, *options, timeout=timeout)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<GAME slug={self.slug!r} name={self.name!r} plugins={self.plugin_count}>"


# Plugins
@dataclass
class PLUGINGAME:
    """One entry of a plugin's game compatibility list."""
    icon_url: str = ""
    name: str = ""
    url: str = ""
    slug: str = ""
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "PLUGINGAME":
        d = d or {}
        return cls(
            icon_url=_str(d, "icon_url"),
            name=_str(d, "name"),
            url=_str(d, "url"),
            slug=_str(d, "slug"),
            data=d,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PLUGINSTATUS:
    """
    Status indicator shown next to a plugin (e.g. "Up to date", "Broken").

    `class_` is the JSON `class` key (a CSS class on the website).
    """
    icon: str = ""
    text: str = ""
    message: str = ""
    value: int = 0
    class_: str = ""
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "PLUGINSTATUS":
        d = d or {}
        return cls(
            icon=_str(d, "icon"),
            text=_str(d, "text"),
            message=_str(d, "message"),
            value=_int(d, "value"),
            class_=_str(d, "class"),
            data=d,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PLUGIN:
    """
    A plugin as returned by the search endpoint.

    Contains amongst other things a direct link to the plugin's source
    (`download_url`), the checksum of that file, the latest release date and
    the latest release version.

    Attributes (selection)
    ----------------------
    title : str
        Display title, also what `str(plugin)` returns.
    slug / author_id : str
        Together identify the plugin.
    tags_all : str
        Comma separated tags; see `tags`.
    games_detail : List[PLUGINGAME]
        Games the plugin supports.
    status_detail : PLUGINSTATUS
        Status indicator.
    latest_release_at_atom : Optional[datetime]
        Parsed release timestamp, None when absent.
    data : Dict[str,Any]
        Raw JSON.
    """
    title: str = ""
    name: str = ""
    slug: str = ""
    author: str = ""
    author_id: str = ""
    author_icon_url: str = ""
    description: str = ""
    category_tags: str = ""
    tags_all: str = ""
    distribution: str = ""
    url: str = ""
    json_url: str = ""
    icon_url: str = ""
    donate_url: str = ""
    download_url: str = ""
    created_at: str = ""
    created_at_atom: Optional[datetime] = None
    updated_at: str = ""
    updated_at_atom: Optional[datetime] = None
    published_at: str = ""
    latest_release_at: str = ""
    latest_release_at_atom: Optional[datetime] = None
    latest_release_version: str = ""
    latest_release_version_formatted: str = ""
    latest_release_version_checksum: str = ""
    downloads: int = 0
    downloads_shortened: str = ""
    watchers: int = 0
    watchers_shortened: str = ""
    games_detail: List[PLUGINGAME] = field(default_factory=list)
    status_detail: PLUGINSTATUS = field(default_factory=PLUGINSTATUS)
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "PLUGIN":
        d = d or {}
        return cls(
            title=_str(d, "title"),
            name=_str(d, "name"),
            slug=_str(d, "slug"),
            author=_str(d, "author"),
            author_id=_str(d, "author_id"),
            author_icon_url=_str(d, "author_icon_url"),
            description=_str(d, "description"),
            category_tags=_str(d, "category_tags"),
            tags_all=_str(d, "tags_all"),
            distribution=_str(d, "distribution"),
            url=_str(d, "url"),
            json_url=_str(d, "json_url"),
            icon_url=_str(d, "icon_url"),
            donate_url=_str(d, "donate_url"),
            download_url=_str(d, "download_url"),
            created_at=_str(d, "created_at"),
            created_at_atom=parse_datetime(d.get("created_at_atom")),
            updated_at=_str(d, "updated_at"),
            updated_at_atom=parse_datetime(d.get("updated_at_atom")),
            published_at=_str(d, "published_at"),
            latest_release_at=_str(d, "latest_release_at"),
            latest_release_at_atom=parse_datetime(d.get("latest_release_at_atom")),
            latest_release_version=_str(d, "latest_release_version"),
            latest_release_version_formatted=_str(d, "latest_release_version_formatted"),
            latest_release_version_checksum=_str(d, "latest_release_version_checksum"),
            downloads=_int(d, "downloads"),
            downloads_shortened=_str(d, "downloads_shortened"),
            watchers=_int(d, "watchers"),
            watchers_shortened=_str(d, "watchers_shortened"),
            games_detail=[PLUGINGAME.from_dict(g) for g in _dicts(d, "games_detail")],
            status_detail=PLUGINSTATUS.from_dict(_dict(d, "status_detail")),
            data=d,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def tags(self) -> List[str]:
        """`tags_all` split into individual tags."""
        return [t.strip() for t in self.tags_all.split(",") if t.strip()]

    def supports(self, game: Union["GAME", CATEGORY, str]) -> bool:
        """True if `game` (a GAME, CATEGORY or slug) is in `games_detail`."""
        slug = game.slug if isinstance(game, GAME) else str(game)
        return any(g.slug == slug for g in self.games_detail)

    def is_newer_than(self, installed_version: str) -> bool:
        """
        Compare the latest published release against `installed_version`.

        Raises packaging.version.InvalidVersion if either side is not a version.
        """
        return parse_version(self.latest_release_version) > parse_version(str(installed_version))

    def __str__(self) -> str:
        return self.title

    def __repr__(self) -> str:
        return f"<PLUGIN slug={self.slug!r} author={self.author!r} version={self.latest_release_version!r}>"


# Search pages
@dataclass
class SEARCHRESPONSE:
    """
    One page of plugin search results plus pagination metadata.

    The page URLs are authoritative: an empty URL means the page does not
    exist and navigating to it raises NoSuchPageError without a request.
    `from_` is the JSON `from` key.
    """
    current_page: int = 0
    data: List[PLUGIN] = field(default_factory=list)
    first_page_url: str = ""
    from_: int = 0
    last_page: int = 0
    last_page_url: str = ""
    next_page_url: str = ""
    path: str = ""
    per_page: int = 0
    prev_page_url: str = ""
    to: int = 0
    total: int = 0
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]], client: Optional["UMod"] = None) -> "SEARCHRESPONSE":
        d = d or {}
        resp = cls(
            current_page=_int(d, "current_page"),
            data=[PLUGIN.from_dict(p) for p in _dicts(d, "data")],
            first_page_url=_str(d, "first_page_url"),
            from_=_int(d, "from"),
            last_page=_int(d, "last_page"),
            last_page_url=_str(d, "last_page_url"),
            next_page_url=_str(d, "next_page_url"),
            path=_str(d, "path"),
            per_page=_int(d, "per_page"),
            prev_page_url=_str(d, "prev_page_url"),
            to=_int(d, "to"),
            total=_int(d, "total"),
            raw=d,
        )
        resp._client = client
        return resp

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def plugins(self) -> List[PLUGIN]:
        return self.data

    @property
    def has_next(self) -> bool:
        return bool(self.next_page_url)

    @property
    def has_prev(self) -> bool:
        return bool(self.prev_page_url)

    def _follow(self, url: str, which: str, timeout: Optional[float]) -> "SEARCHRESPONSE":
        if not url:
            raise NoSuchPageError(f"no {which} page")
        logger.debug("following %s page from page %d: %s", which, self.current_page, url)
        return _client_of(self).get_page(url, timeout=timeout)

    def next_page(self, timeout: Optional[float] = None) -> "SEARCHRESPONSE":
        return self._follow(self.next_page_url, "next", timeout)

    def prev_page(self, timeout: Optional[float] = None) -> "SEARCHRESPONSE":
        return self._follow(self.prev_page_url, "previous", timeout)

    def goto_first_page(self, timeout: Optional[float] = None) -> "SEARCHRESPONSE":
        return self._follow(self.first_page_url, "first", timeout)

    def goto_last_page(self, timeout: Optional[float] = None) -> "SEARCHRESPONSE":
        return self._follow(self.last_page_url, "last", timeout)

    def iter_pages(self, timeout: Optional[float] = None) -> Iterator["SEARCHRESPONSE"]:
        """Yield this page, then every following page until `next_page_url` is empty."""
        page = self
        yield page
        while page.has_next:
            page = page.next_page(timeout=timeout)
            yield page

    def __iter__(self) -> Iterator[PLUGIN]:
        return iter(self.data)

    def __repr__(self) -> str:
        return (
            f"<SEARCHRESPONSE page={self.current_page}/{self.last_page} "
            f"results={len(self.data)} total={self.total}>"
        )


__all__ = [
    "GAMECHANNEL", "STEAMBRANCH", "GAME",
    "PLUGINGAME", "PLUGINSTATUS", "PLUGIN",
    "SEARCHRESPONSE",
]
