"""
umodpy.download
---------------

Plugin source download helper used by `UMod.download`.

Features
- Streams into a ".part" temporary file next to the destination
- Atomic promotion of completed downloads
- Checksum verification against `latest_release_version_checksum`
- Optional tqdm progress bar

A single attempt is made; failures raise DownloadError.
"""

from __future__ import annotations

import os
import logging
from pathlib import Path
from typing import *
from urllib.parse import unquote, urlparse

import requests
from tqdm import tqdm

from .exceptions import DownloadError
from .types_models import PLUGIN
from .utils import checksum_algorithm, file_checksum

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def temp_part_path(dest: Path) -> Path:
    """Return the `.part` path used while `dest` is being written."""
    return dest.with_name(dest.name + ".part")


def _safe_remove(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass


def plugin_filename(plugin: PLUGIN) -> str:
    """
    File name for a plugin's source.

    Taken from the last segment of `download_url`, falling back to
    "<name>.cs" (umod plugins are C# sources).
    """
    if plugin.download_url:
        name = unquote(Path(urlparse(plugin.download_url).path).name)
        if name:
            return name
    base = plugin.name or plugin.slug or "plugin"
    return f"{base}.cs"


def resolve_target(plugin: PLUGIN, dest: Union[str, Path]) -> Path:
    """A directory `dest` gets the plugin file name appended; anything else is used as-is."""
    dest = Path(dest).expanduser()
    if dest.is_dir():
        return dest / plugin_filename(plugin)
    return dest


def download_plugin(
    plugin: PLUGIN,
    dest: Union[str, Path],
    *,
    session: Optional[requests.Session] = None,
    timeout: float = 30.0,
    verify: bool = True,
    progress: bool = False,
) -> Path:
    """
    Download `plugin.download_url` to `dest`.

    Parameters
    ----------
    plugin : PLUGIN
        Plugin record from a search.
    dest : str | Path
        Target file, or an existing directory to place the file in.
    session : Optional[requests.Session]
        Session to use; a plain requests.Session if omitted.
    timeout : float
        Socket timeout in seconds.
    verify : bool
        Check the file against `latest_release_version_checksum` when one is published.
    progress : bool
        Show a tqdm progress bar.

    Returns
    -------
    Path
        Final path of the downloaded file.

    Raises
    ------
    DownloadError
        Missing URL, transport failure, HTTP >= 400, I/O error or checksum mismatch.
        The partial file is removed in every case.
    """
    if not plugin.download_url:
        raise DownloadError(f"plugin {plugin.slug!r} has no download_url")

    target = resolve_target(plugin, dest)
    part = temp_part_path(target)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DownloadError(f"Cannot create {target.parent}: {exc}") from exc
    session = session or requests.Session()
    url = plugin.download_url

    logger.debug("downloading %s -> %s", url, target)
    try:
        resp = session.get(url, stream=True, timeout=timeout)
    except requests.RequestException as exc:
        raise DownloadError(f"Connection error for {url}: {exc}") from exc

    try:
        if resp.status_code >= 400:
            raise DownloadError(f"HTTP {resp.status_code} for {url}", resp.status_code, resp)

        total = None
        try:
            if resp.headers.get("Content-Length"):
                total = int(resp.headers.get("Content-Length"))
        except (TypeError, ValueError):
            total = None

        written = 0
        with open(part, "wb") as f, tqdm(
            total=total, unit="B", unit_scale=True, desc=target.name, ncols=80, disable=not progress
        ) as bar:
            for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                f.write(chunk)
                written += len(chunk)
                bar.update(len(chunk))
            f.flush()
            os.fsync(f.fileno())
    except DownloadError:
        _safe_remove(part)
        raise
    except (requests.RequestException, OSError) as exc:
        _safe_remove(part)
        raise DownloadError(f"Failed while downloading {url}: {exc}") from exc
    finally:
        closer = getattr(resp, "close", None)
        if callable(closer):
            closer()

    expected = plugin.latest_release_version_checksum.strip().lower()
    algorithm = checksum_algorithm(expected)
    if verify and algorithm:
        try:
            actual = file_checksum(part, algorithm)
        except OSError as exc:
            _safe_remove(part)
            raise DownloadError(f"Cannot read {part} for verification: {exc}") from exc
        if actual != expected:
            _safe_remove(part)
            raise DownloadError(f"{algorithm} mismatch for {target.name}: expected {expected}, got {actual}")
    elif verify and expected:
        logger.warning("unrecognised checksum format %r for %s, skipping verification", expected, plugin.slug)

    try:
        os.replace(part, target)
    except OSError as exc:
        _safe_remove(part)
        raise DownloadError(f"Cannot move {part.name} into place at {target}: {exc}") from exc
    logger.debug("downloaded %s (%d bytes)", target, written)
    return target


__all__ = ["download_plugin", "plugin_filename", "resolve_target", "temp_part_path"]
