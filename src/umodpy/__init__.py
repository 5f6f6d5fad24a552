"""
umodpy package initializer.

This file exposes the high-level public API for the package:
 - UMod (main client) and create_client (convenience factory)
 - search / latest / oldest / games, bound to a lazily created default client
 - the search option constructors (query, page, sort_*, categories, tags)
 - typed records (GAME, PLUGIN, SEARCHRESPONSE, ...) and enumerations
 - exceptions

Implementation notes:
 - Avoid heavy work at import time: no session is created until first use.
"""

__version__ = "0.1.0"

from .exceptions import *  # noqa: F401,F403
from .dataTypes import CATEGORY, SORTFIELD, SORTDIR, UMODAPIURLS
from .options import (
    SearchOption,
    query,
    page,
    sort_ascending,
    sort_descending,
    categories,
    tags,
    merge_options,
    build_params,
    build_query_string,
)
from .types_models import GAME, GAMECHANNEL, STEAMBRANCH, PLUGIN, PLUGINGAME, PLUGINSTATUS, SEARCHRESPONSE
from .client import (
    UMod,
    create_client,
    get_default_client,
    set_default_client,
    search,
    latest,
    oldest,
    games,
)
from .download import download_plugin
from . import exceptions

__all__ = [
    "__version__",
    "UMod", "create_client", "get_default_client", "set_default_client",
    "search", "latest", "oldest", "games", "download_plugin",
    "SearchOption", "query", "page", "sort_ascending", "sort_descending",
    "categories", "tags", "merge_options", "build_params", "build_query_string",
    "CATEGORY", "SORTFIELD", "SORTDIR", "UMODAPIURLS",
    "GAME", "GAMECHANNEL", "STEAMBRANCH", "PLUGIN", "PLUGINGAME", "PLUGINSTATUS", "SEARCHRESPONSE",
    "exceptions",
] + exceptions.__all__
