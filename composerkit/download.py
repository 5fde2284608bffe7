"""Downloading files over HTTP(S), optionally through a proxy."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from http.client import HTTPException
from typing import Optional, Union
from urllib.error import HTTPError, URLError
from urllib.parse import urlsplit
from urllib.request import OpenerDirector, ProxyHandler, build_opener

DEFAULT_TIMEOUT_SECONDS = 60
_CHUNK_SIZE = 64 * 1024


class DownloadError(Exception):
    """Raised when a download cannot be completed."""


@dataclass
class DownloadConfig:
    """Options controlling a download."""

    use_proxy: bool = False
    proxy_url: str = ""
    timeout_seconds: int = 0

    @property
    def timeout(self) -> int:
        """Effective timeout in seconds; non-positive values mean the default."""
        if self.timeout_seconds > 0:
            return self.timeout_seconds
        return DEFAULT_TIMEOUT_SECONDS


def _build_opener(config: DownloadConfig) -> OpenerDirector:
    if config.use_proxy and config.proxy_url:
        try:
            scheme = urlsplit(config.proxy_url).scheme
        except ValueError as exc:
            raise DownloadError(f"download failed: invalid proxy URL: {exc}") from exc
        if not scheme:
            raise DownloadError(
                f"download failed: invalid proxy URL: missing scheme in {config.proxy_url!r}"
            )
        proxy = ProxyHandler({"http": config.proxy_url, "https": config.proxy_url})
        return build_opener(proxy)
    return build_opener()


def download_file(
    source_url: str,
    dest_path: Union[str, "os.PathLike[str]"],
    config: Optional[DownloadConfig] = None,
) -> None:
    """Download ``source_url`` to ``dest_path``, overwriting any existing file.

    Raises ``DownloadError`` on any failure.
    """
    config = config or DownloadConfig()
    opener = _build_opener(config)

    try:
        response = opener.open(source_url, timeout=config.timeout)
    except HTTPError as exc:
        exc.close()
        raise DownloadError(f"download failed: server returned status {exc.code}") from exc
    except (URLError, HTTPException, OSError, ValueError) as exc:
        raise DownloadError(f"download failed: request error: {exc}") from exc

    with response:
        if response.status != 200:
            raise DownloadError(
                f"download failed: server returned status {response.status}"
            )
        try:
            out = open(dest_path, "wb")
        except OSError as exc:
            raise DownloadError(
                f"download failed: cannot create {dest_path}: {exc}"
            ) from exc
        with out:
            try:
                shutil.copyfileobj(response, out, _CHUNK_SIZE)
            except (OSError, HTTPException) as exc:
                raise DownloadError(f"download failed: writing file failed: {exc}") from exc