from __future__ import annotations

import hashlib
import logging
from datetime import datetime
from pathlib import Path
from typing import *

import dateutil.parser as _dateutil_parser
import requests
from packaging import version
from requests.adapters import HTTPAdapter

__all__ = [
    "DEFAULT_USER_AGENT",
    "logger_setup",
    "session_factory",
    "file_checksum",
    "checksum_algorithm",
    "parse_version",
    "parse_datetime",
]

DEFAULT_USER_AGENT = "umodpy/0.1 (+https://umod.org)"


def logger_setup(name: str,
                 level: int = logging.INFO,
                 *,
                 log_to_file: Optional[str] = None,
                 file_level: Optional[int] = None,
                 fmt: str = "%(asctime)s %(name)s %(levelname)s: %(message)s",
                 datefmt: str = "%Y-%m-%d %H:%M:%S") -> logging.Logger:
    """
    Create and return a configured logger for the library.

    Behavior:
        - Creates a logger with the given `name`.
        - Adds a console (StreamHandler) with the given `level`.
        - If `log_to_file` is provided, also adds a FileHandler.
          The file handler level defaults to `level` unless `file_level` is set.
        - Multiple calls with the same `name` will not duplicate handlers (idempotent).

    Parameters
    ----------
    name : str
        Logger name (usually "umodpy").
    level : int
        Logging level for console (e.g., logging.INFO).
    log_to_file : Optional[str]
        If provided, path of file to log to (created if missing).
    file_level : Optional[int]
        Logging level for file handler (defaults to `level` if None).
    fmt : str
        Log message format string.
    datefmt : str
        Date format used by formatter.

    Returns
    -------
    logging.Logger

    Example
    -------
    >>> logger = logger_setup("umodpy", level=logging.DEBUG)
    >>> logger.debug("ready")
    """
    logger = logging.getLogger(name)
    logger.setLevel(min(level, file_level if file_level is not None else level))

    if not getattr(logger, "_umod_setup_done", False):
        formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

        ch = logging.StreamHandler()
        ch.setLevel(level)
        ch.setFormatter(formatter)
        logger.addHandler(ch)

        if log_to_file:
            fh = logging.FileHandler(log_to_file, encoding="utf-8")
            fh.setLevel(file_level if file_level is not None else level)
            fh.setFormatter(formatter)
            logger.addHandler(fh)

        logger._umod_setup_done = True

    return logger


def session_factory(user_agent: Optional[str] = None,
                    *,
                    pool_maxsize: int = 10,
                    pool_connections: int = 10,
                    default_headers: Optional[Dict[str, str]] = None) -> requests.Session:
    """
    Create a configured requests.Session for the client.

    Features:
      - Sets default headers (Accept, User-Agent)
      - Installs an HTTPAdapter with connection pooling and retries disabled

    Parameters
    ----------
    user_agent : Optional[str]
        User-Agent string to set. If None, DEFAULT_USER_AGENT is used.
    pool_maxsize : int
        Max connection pool size for the adapter.
    pool_connections : int
        Pool connections count for the adapter.
    default_headers : Optional[Dict[str,str]]
        Additional headers to set on session.headers (merged with defaults).

    Returns
    -------
    requests.Session
    """
    session = requests.Session()

    headers = {
        "Accept": "application/json",
        "User-Agent": user_agent or DEFAULT_USER_AGENT,
    }
    if default_headers:
        headers.update(default_headers)
    session.headers.update(headers)

    adapter = HTTPAdapter(max_retries=0, pool_connections=pool_connections, pool_maxsize=pool_maxsize)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


_CHECKSUM_BY_LENGTH = {32: "md5", 40: "sha1", 64: "sha256"}


def checksum_algorithm(checksum: str) -> Optional[str]:
    """
    Guess the hash algorithm of a hex digest from its length.

    umod.org publishes MD5 digests; SHA1/SHA256 lengths are recognised as well.
    Returns None for anything else.
    """
    if not checksum:
        return None
    return _CHECKSUM_BY_LENGTH.get(len(checksum.strip()))


def file_checksum(path: Union[str, Path], algorithm: str = "md5", chunk_size: int = 8192) -> str:
    """
    Calculate the hex digest of a file.

    Parameters
    ----------
    path : str | Path
        Path to the file to be hashed.
    algorithm : str
        "md5", "sha1" or "sha256".
    chunk_size : int
        Read buffer size in bytes for iterative hashing.

    Raises
    ------
    ValueError
        If an unsupported algorithm is specified.
    FileNotFoundError
        If the specified file does not exist.
    """
    algorithm = algorithm.lower()
    if algorithm not in ("md5", "sha1", "sha256"):
        raise ValueError(f"Unsupported algorithm: {algorithm}")
    h = hashlib.new(algorithm)
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    with open(file_path, "rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            h.update(chunk)
    return h.hexdigest()


def parse_version(ver_str: str) -> version.Version:
    """
    Parse a plugin version string (e.g. '1.2.10') into a comparable Version.

    Raises
    ------
    packaging.version.InvalidVersion
        If the version string cannot be parsed.
    """
    return version.parse(ver_str)


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as sent by umod.org (the `*_atom` fields).

    Returns None for empty or unparseable values; that is the zero value for
    timestamps throughout the models.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return _dateutil_parser.isoparse(str(value))
    except (ValueError, OverflowError):
        try:
            return _dateutil_parser.parse(str(value))
        except (ValueError, OverflowError):
            return None
