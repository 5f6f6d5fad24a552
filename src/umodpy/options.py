"""
options.py - Search option builder.

A search is configured with any number of `SearchOption` records. Each record
only sets the fields it cares about; `merge_options()` applies them in call
order and later records overwrite earlier ones on the same field.

Usage example:
    >>> from umodpy.options import build_params, build_query_string, query, tags, sort_descending
    >>> params = build_params(query("heli"), tags("fun", "voting"), sort_descending("downloads"))
    >>> build_query_string(params)
    'query=heli&sort=downloads&sortdir=desc&tags[0]=fun&tags[1]=voting'
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Dict, Optional, Tuple, Union
from urllib.parse import quote_plus

from .dataTypes import CATEGORY, SORTDIR, SORTFIELD, UMODAPIURLS

CategoryLike = Union[CATEGORY, str]
SortFieldLike = Union[SORTFIELD, str]


@dataclass(frozen=True)
class SearchOption:
    """
    A partial set of search parameters. `None` means "not set".

    Attributes
    ----------
    query : Optional[str]
        Free text search term.
    page : Optional[int]
        1-based page number.
    sort : Optional[str]
        Sort field (see `SORTFIELD`).
    sortdir : Optional[str]
        "asc" or "desc"; always set together with `sort`.
    categories : Optional[Tuple[str, ...]]
        Game slugs to filter on.
    tags : Optional[Tuple[str, ...]]
        Tags every result must carry.
    """
    query: Optional[str] = None
    page: Optional[int] = None
    sort: Optional[str] = None
    sortdir: Optional[str] = None
    categories: Optional[Tuple[str, ...]] = None
    tags: Optional[Tuple[str, ...]] = None


def query(q: str) -> SearchOption:
    """Set the free text search term."""
    return SearchOption(query="" if q is None else str(q))


def page(n: int) -> SearchOption:
    """Set the 1-based page number."""
    n = int(n)
    if n < 1:
        raise ValueError(f"page must be >= 1, got {n}")
    return SearchOption(page=n)


def _sort(field: SortFieldLike, direction: str) -> SearchOption:
    name = str(field) if field is not None else ""
    if not name:
        raise ValueError("sort field must be a non-empty string")
    return SearchOption(sort=name, sortdir=direction)


def sort_ascending(field: SortFieldLike) -> SearchOption:
    """Sort results by `field`, smallest first."""
    return _sort(field, SORTDIR.ASC)


def sort_descending(field: SortFieldLike) -> SearchOption:
    """Sort results by `field`, largest first."""
    return _sort(field, SORTDIR.DESC)


def categories(*c: CategoryLike) -> SearchOption:
    """Restrict results to plugins supporting the given games."""
    return SearchOption(categories=tuple(str(x) for x in c))


def tags(*t: str) -> SearchOption:
    """Restrict results to plugins carrying all of the given tags."""
    return SearchOption(tags=tuple(str(x) for x in t))


def merge_options(*options: SearchOption) -> SearchOption:
    """
    Fold options into a single record, in order.

    A field set by a later option replaces the value from an earlier one.
    Unset fields (None) never overwrite anything.
    """
    merged: Dict[str, object] = {}
    for opt in options:
        if opt is None:
            continue
        if not isinstance(opt, SearchOption):
            raise TypeError(f"expected SearchOption, got {type(opt).__name__}")
        for f in fields(opt):
            value = getattr(opt, f.name)
            if value is not None:
                merged[f.name] = value
    return SearchOption(**merged)


def build_params(*options: SearchOption) -> Dict[str, str]:
    """
    Merge `options` and flatten them into an ordered parameter dict.

    Keys come out in the order query, page, sort, sortdir, categories[i], tags[i].
    List filters are indexed from 0 to produce the bracket array encoding
    the server expects.
    """
    opt = merge_options(*options)
    params: Dict[str, str] = {}
    if opt.query is not None:
        params[UMODAPIURLS.QUERY] = opt.query
    if opt.page is not None:
        params[UMODAPIURLS.PAGE] = str(opt.page)
    if opt.sort is not None:
        params[UMODAPIURLS.SORT] = opt.sort
        params[UMODAPIURLS.SORTDIR] = opt.sortdir or SORTDIR.DESC
    for i, c in enumerate(opt.categories or ()):
        params[f"{UMODAPIURLS.CATEGORIES}[{i}]"] = c
    for i, t in enumerate(opt.tags or ()):
        params[f"{UMODAPIURLS.TAGS}[{i}]"] = t
    return params


def build_query_string(params: Dict[str, str]) -> str:
    """Percent-encode `params`, leaving `[` and `]` in keys untouched. Values are fully encoded."""
    return "&".join(f"{quote_plus(str(k), safe='[]')}={quote_plus(str(v))}" for k, v in params.items())


__all__ = [
    "SearchOption",
    "query",
    "page",
    "sort_ascending",
    "sort_descending",
    "categories",
    "tags",
    "merge_options",
    "build_params",
    "build_query_string",
]
