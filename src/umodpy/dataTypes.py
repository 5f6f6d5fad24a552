from __future__ import annotations
from enum import Enum


class CATEGORY(str, Enum):
    """
    Game slugs accepted by the plugin search `categories[]` filter.

    Any `GAME.slug` string works as a filter too; these are the ones umod.org
    lists on its search page.
    """
    UNIVERSAL = "universal"
    SEVEN_DAYS_TO_DIE = "7-days-to-die"
    HURTWORLD = "hurtworld"
    REIGN_OF_KINGS = "reign-of-kings"
    RUST = "rust"
    THE_FOREST = "the-forest"

    def __str__(self) -> str:
        return self.value


class SORTFIELD(str, Enum):
    """Known values for the `sort` query parameter."""
    LATEST_RELEASE_AT = "latest_release_at"
    TITLE = "title"
    DOWNLOADS = "downloads"
    WATCHERS = "watchers"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"

    def __str__(self) -> str:
        return self.value


class SORTDIR:
    """Values for the `sortdir` query parameter."""
    ASC = "asc"
    DESC = "desc"


class UMODAPIURLS:
    """
    Centralized container for the umod.org endpoints used by the client.

    Usage:
        >>> url = f"{UMODAPIURLS.SEARCH}?query=heli&page=2"

    Notes:
        - Both endpoints are plain GET + JSON, no authentication.
        - The search endpoint is a Laravel-style paginator: every page carries
          first/prev/next/last page URLs with the filters already applied.
    """

    SEARCH = "https://umod.org/plugins/search.json"
    """Paginated plugin search. Params: query, page, sort, sortdir, categories[i], tags[i]."""

    GAMES = "https://assets.umod.org/games.json"
    """Static catalog of every game published on umod.org."""

    QUERY = "query"
    PAGE = "page"
    SORT = "sort"
    SORTDIR = "sortdir"
    CATEGORIES = "categories"
    TAGS = "tags"


__all__ = ["CATEGORY", "SORTFIELD", "SORTDIR", "UMODAPIURLS"]
