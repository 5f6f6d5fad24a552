"""Shared fixtures: a canned-response session standing in for requests.Session."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple, Union

import pytest

from umodpy import UMod
from umodpy.dataTypes import CATEGORY

SEARCH = "https://umod.org/plugins/search.json"
GAMES = "https://assets.umod.org/games.json"

HELI_URL = f"{SEARCH}?query=heli"


# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------


class FakeResponse:
    def __init__(self, status_code: int, body: Union[str, bytes], headers: Optional[Dict[str, str]] = None):
        self.status_code = status_code
        self.content = body.encode("utf-8") if isinstance(body, str) else body
        self.headers = headers or {}
        self.closed = False

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.text)

    def iter_content(self, chunk_size: int = 1):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """URL -> (status, body, headers) table; unknown URLs answer 404."""

    def __init__(self):
        self.responses: Dict[str, Tuple[int, Union[str, bytes], Dict[str, str]]] = {}
        self.calls: List[Dict[str, Any]] = []
        self.error: Optional[Exception] = None
        self.status_code: Optional[int] = None

    def add_json(self, url: str, payload: Any, status: int = 200) -> None:
        self.responses[url] = (status, json.dumps(payload), {"Content-Type": "application/json"})

    def add_raw(self, url: str, body: Union[str, bytes], status: int = 200,
                headers: Optional[Dict[str, str]] = None) -> None:
        self.responses[url] = (status, body, headers or {})

    def get(self, url: str, timeout: Optional[float] = None, stream: bool = False, **kwargs) -> FakeResponse:
        self.calls.append({"url": url, "timeout": timeout, "stream": stream})
        if self.error is not None:
            raise self.error
        if url not in self.responses:
            return FakeResponse(404, "not found")
        status, body, headers = self.responses[url]
        if self.status_code is not None:
            status = self.status_code
        return FakeResponse(status, body, dict(headers))

    @property
    def urls(self) -> List[str]:
        return [c["url"] for c in self.calls]


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------


def game_detail(slug: str) -> Dict[str, Any]:
    return {
        "icon_url": f"https://assets.umod.org/images/icons/game/{slug}.png",
        "name": slug.replace("-", " ").title(),
        "url": f"https://umod.org/games/{slug}",
        "slug": slug,
    }


def make_plugin(slug: str, *, games=("rust",), tags_all: str = "fun, voting",
                version: str = "1.2.3", checksum: str = "") -> Dict[str, Any]:
    name = "".join(part.title() for part in slug.split("-"))
    return {
        "latest_release_at_atom": "2023-05-01T12:00:00+00:00",
        "latest_release_at": "1 year ago",
        "latest_release_version_formatted": f"v{version}",
        "category_tags": tags_all,
        "description": f"{name} plugin",
        "created_at": "2 years ago",
        "created_at_atom": "2022-01-10T08:30:00+00:00",
        "watchers": 12,
        "author_icon_url": "https://assets.umod.org/user/author.png",
        "title": name,
        "distribution": "free",
        "updated_at_atom": "2023-05-02T09:00:00+00:00",
        "updated_at": "1 year ago",
        "downloads": 3456,
        "json_url": f"https://umod.org/plugins/{slug}.json",
        "watchers_shortened": "12",
        "donate_url": "",
        "download_url": f"https://umod.org/plugins/{name}.cs",
        "published_at": "2 years ago",
        "slug": slug,
        "icon_url": "",
        "latest_release_version_checksum": checksum,
        "latest_release_version": version,
        "author": "someone",
        "games_detail": [game_detail(g) for g in games],
        "downloads_shortened": "3.5K",
        "url": f"https://umod.org/plugins/{slug}",
        "status_detail": {"icon": "check", "text": "Up to date", "message": "", "value": 1, "class": "success"},
        "tags_all": tags_all,
        "name": name,
        "author_id": "42",
    }


def make_page(url_base: str, current: int, last: int, per_page: int, total: int,
              plugins: List[Dict[str, Any]]) -> Dict[str, Any]:
    def link(n: int) -> str:
        sep = "&" if "?" in url_base else "?"
        return f"{url_base}{sep}page={n}"

    start = (current - 1) * per_page + 1
    return {
        "current_page": current,
        "data": plugins,
        "first_page_url": link(1),
        "from": start if plugins else None,
        "last_page": last,
        "last_page_url": link(last),
        "next_page_url": link(current + 1) if current < last else None,
        "path": SEARCH,
        "per_page": per_page,
        "prev_page_url": link(current - 1) if current > 1 else None,
        "to": start + len(plugins) - 1 if plugins else None,
        "total": total,
    }


def make_game(slug: str, name: str) -> Dict[str, Any]:
    return {
        "name": name,
        "slug": slug,
        "description": f"{name} game",
        "aliases": "",
        "game_url": "",
        "snapshot_url": "",
        "icon_url": "",
        "repository": "umod/rust",
        "server_appid": "258550",
        "client_appid": "252490",
        "buildable": 1,
        "umod_buildable": 1,
        "installation_paths": "",
        "target_framework": "net48",
        "target_sdk": "",
        "public_branch_name": "public",
        "public_branch_description": None,
        "preprocessor_symbol": "RUST",
        "steam_authenticated": 1,
        "files_install": None,
        "files_update": ["RustDedicated_Data/Managed/*"],
        "skip_install": "",
        "skip_update": None,
        "whitelist": "",
        "blacklist": "",
        "update_check_frequency": "60",
        "download_url": f"https://umod.org/games/{slug}/download",
        "url": f"https://umod.org/games/{slug}",
        "plugin_count": 1800,
        "extension_count": 10,
        "product_count": 0,
        "latest_release_version": "2.0.6000",
        "latest_release_version_formatted": "2.0.6000",
        "latest_release_version_checksum": "0123456789abcdef0123456789abcdef",
        "latest_release_at": "2 days ago",
        "latest_release_at_atom": "2024-03-01T10:00:00+00:00",
        "watchers": 99,
        "watchers_shortened": "99",
        "channels": [{"channel_id": "1234", "bot_name": "uMod", "bot_slug": "umod"}],
        "steam_branches": [
            {"name": "public", "pwdrequired": 0, "timeupdated": "1700000000", "buildid": 12345},
            {"name": "staging", "pwdrequired": 0, "timeupdated": "1700000500", "buildid": 12346},
        ],
    }


HELI_PLUGINS = [
    [make_plugin("heli-control"), make_plugin("heli-refuel")],
    [make_plugin("heli-vote"), make_plugin("heli-sams")],
    [make_plugin("heli-signals")],
]


def _register_defaults(session: FakeSession) -> None:
    for n, plugins in enumerate(HELI_PLUGINS, start=1):
        payload = make_page(HELI_URL, n, 3, 2, 5, plugins)
        session.add_json(f"{HELI_URL}&page={n}", payload)
        if n == 1:
            session.add_json(HELI_URL, payload)

    tagged = f"{SEARCH}?query=heli&tags[0]=fun&tags[1]=voting"
    session.add_json(tagged, make_page(tagged, 1, 1, 20, 1, [make_plugin("heli-vote")]))

    for c in CATEGORY:
        url = f"{SEARCH}?query=&categories[0]={c.value}"
        plugins = [make_plugin(f"{c.value}-tool", games=(c.value,)), make_plugin(f"{c.value}-util", games=(c.value, "universal"))]
        session.add_json(url, make_page(url, 1, 1, 20, 2, plugins))

    latest = f"{SEARCH}?query=&page=1&sort=latest_release_at&sortdir=desc"
    oldest = f"{SEARCH}?query=&page=1&sort=latest_release_at&sortdir=asc"
    session.add_json(latest, make_page(latest, 1, 1, 20, 1, [make_plugin("newest-thing")]))
    session.add_json(oldest, make_page(oldest, 1, 1, 20, 1, [make_plugin("ancient-thing")]))

    session.add_json(GAMES, [make_game("rust", "Rust"), make_game("hurtworld", "Hurtworld"), make_game("valheim", "Valheim")])


@pytest.fixture
def session() -> FakeSession:
    s = FakeSession()
    _register_defaults(s)
    return s


@pytest.fixture
def client(session: FakeSession) -> UMod:
    return UMod(session=session)
