"""Request execution, error mapping and the public entry points."""

from __future__ import annotations

import pytest
import requests

import umodpy
from umodpy import UMod
from umodpy.dataTypes import CATEGORY
from umodpy.exceptions import (
    HTTPStatusError,
    InvalidResponseError,
    NetworkError,
    NotFoundError,
    ServerError,
    UModError,
)
from umodpy.options import categories, page, tags

from .conftest import GAMES, HELI_URL, SEARCH


def test_search_decodes_first_page(client, session):
    resp = client.search("heli")
    assert session.urls == [HELI_URL]
    assert resp.current_page == 1
    assert resp.total == 5
    assert len(resp.data) == 2
    assert resp.data[0].latest_release_at_atom is not None
    assert resp.data[0].latest_release_at_atom.year == 2023
    assert str(resp.data[0]) == "HeliControl"


def test_default_timeout_is_five_seconds(client, session):
    client.search("heli")
    assert session.calls[0]["timeout"] == 5.0


def test_timeout_override_per_call(client, session):
    client.search("heli", timeout=1.5)
    assert session.calls[0]["timeout"] == 1.5


def test_latest_and_oldest(client, session):
    latest = client.latest()
    oldest = client.oldest()
    assert session.urls == [
        f"{SEARCH}?query=&page=1&sort=latest_release_at&sortdir=desc",
        f"{SEARCH}?query=&page=1&sort=latest_release_at&sortdir=asc",
    ]
    assert latest.data[0].slug == "newest-thing"
    assert oldest.data[0].slug == "ancient-thing"
    assert latest.data[0].latest_release_at_atom is not None


def test_games(client, session):
    games = client.get_games()
    assert session.urls == [GAMES]
    assert [g.slug for g in games] == ["rust", "hurtworld", "valheim"]
    rust = games[0]
    assert rust.latest_release_at_atom is not None
    assert rust.category is CATEGORY.RUST
    assert games[2].category is None
    assert rust.channels[0].bot_slug == "umod"
    assert [b.buildid for b in rust.steam_branches] == [12345, 12346]
    assert rust.files_update == ["RustDedicated_Data/Managed/*"]


def test_game_search_injects_category(client, session):
    rust = client.get_games()[0]
    url = f"{SEARCH}?query=&categories[0]=rust"
    resp = rust.search("")
    assert session.urls[-1] == url
    assert all(p.supports("rust") for p in resp.data)


def test_game_search_category_overrides_caller_categories(client, session):
    client.search_game("rust", "", categories("hurtworld"))
    assert session.urls[-1] == f"{SEARCH}?query=&categories[0]=rust"


@pytest.mark.parametrize("category", list(CATEGORY))
def test_category_filter(client, session, category):
    resp = client.search("", categories(category))
    assert session.urls[-1] == f"{SEARCH}?query=&categories[0]={category.value}"
    assert resp.data
    for plugin in resp.data:
        assert plugin.supports(category)
        assert category.value in [g.slug for g in plugin.games_detail]


def test_tag_filter(client, session):
    resp = client.search("heli", tags("fun", "voting"))
    assert session.urls[-1] == f"{SEARCH}?query=heli&tags[0]=fun&tags[1]=voting"
    for plugin in resp.data:
        assert "fun" in plugin.tags_all and "voting" in plugin.tags_all
        assert {"fun", "voting"} <= set(plugin.tags)


def test_transport_error_becomes_network_error(client, session):
    session.error = requests.ConnectionError("boom")
    with pytest.raises(NetworkError) as info:
        client.search("heli")
    assert isinstance(info.value.__cause__, requests.ConnectionError)
    assert len(session.calls) == 1


def test_timeout_is_a_network_error(client, session):
    session.error = requests.Timeout("slow")
    with pytest.raises(NetworkError):
        client.get_games()


def test_server_error_carries_status_code(client, session):
    session.status_code = 500
    with pytest.raises(ServerError) as info:
        client.search("heli")
    assert info.value.code == 500
    assert isinstance(info.value, HTTPStatusError)
    assert len(session.calls) == 1


def test_not_found(client):
    with pytest.raises(NotFoundError) as info:
        client.search("does-not-exist")
    assert info.value.code == 404


def test_other_status_codes_map_to_base_http_error(client, session):
    session.status_code = 418
    with pytest.raises(HTTPStatusError) as info:
        client.search("heli")
    assert type(info.value) is HTTPStatusError
    assert info.value.code == 418


def test_invalid_json(client, session):
    session.add_raw(f"{SEARCH}?query=test", "invalid json")
    with pytest.raises(InvalidResponseError):
        client.search("test")


def test_unexpected_json_shape(client, session):
    session.add_json(f"{SEARCH}?query=list", [1, 2, 3])
    with pytest.raises(InvalidResponseError):
        client.search("list")
    session.add_json(GAMES, {"games": []})
    with pytest.raises(InvalidResponseError):
        client.get_games()


def test_all_errors_share_base_class(client, session):
    session.error = requests.ConnectionError("boom")
    with pytest.raises(UModError):
        client.search("heli")


def test_get_page_resolves_relative_urls(client, session):
    resp = client.get_page("/plugins/search.json?query=heli&page=2")
    assert session.urls == [f"{HELI_URL}&page=2"]
    assert resp.current_page == 2


def test_set_base_url_validates():
    um = UMod(session=object())
    with pytest.raises(ValueError):
        um.set_base_url("ftp://example.com")
    um.set_base_url("https://mirror.example.com/search.json")
    assert um.base_url == "https://mirror.example.com/search.json"


def test_set_timeout_validates():
    um = UMod(session=object())
    with pytest.raises(ValueError):
        um.set_timeout(0)
    um.set_timeout(2)
    assert um.timeout == 2.0


def test_module_level_helpers_use_default_client(session):
    umodpy.set_default_client(UMod(session=session))
    try:
        assert umodpy.search("heli").total == 5
        assert umodpy.latest().data[0].slug == "newest-thing"
        assert umodpy.oldest(page(1)).data[0].slug == "ancient-thing"
        assert len(umodpy.games()) == 3
    finally:
        umodpy.set_default_client(None)


def test_create_client_forwards_kwargs(session):
    um = umodpy.create_client(session=session, timeout=9)
    assert um.session is session
    assert um.timeout == 9.0


def test_search_page_with_non_list_data_is_rejected(client, session):
    session.add_json(f"{SEARCH}?query=x", {"current_page": 1, "data": "oops", "total": 5})
    with pytest.raises(InvalidResponseError):
        client.search("x")


def test_search_page_with_non_object_plugins_is_rejected(client, session):
    session.add_json(f"{SEARCH}?query=x", {"current_page": 1, "data": [{"slug": "a"}, "b"], "total": 2})
    with pytest.raises(InvalidResponseError):
        client.search("x")


def test_games_with_non_object_entries_are_rejected(client, session):
    session.add_json(GAMES, [{"slug": "rust"}, "garbage", 42])
    with pytest.raises(InvalidResponseError):
        client.get_games()
