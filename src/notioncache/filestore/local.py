"""Mirror remote files to a local directory.

:class:`LocalFileStore` downloads a file, works out its MIME type, writes
it as ``<url_key><ext>`` and reports the URL it will be served from.  The
MIME type comes from the leading bytes when they are recognised, then
from the URL's extension, then falls back to
``application/octet-stream``.
"""

from __future__ import annotations

import asyncio
import mimetypes
from pathlib import Path
from urllib.parse import urlsplit

import httpx

from notioncache.errors import NotioncacheFileStoreError
from notioncache.models.objects import CachedFileData
from notioncache.observability import MetricsHook, NoopMetricsHook, get_logger

log = get_logger("notioncache.filestore")

_DEFAULT_MIME = "application/octet-stream"

# Map of magic bytes to MIME types for sniffing.
_MAGIC_BYTES: list[tuple[bytes, str]] = [
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"RIFF", "image/webp"),  # RIFF....WEBP (check further)
    (b"<svg", "image/svg+xml"),
    (b"BM", "image/bmp"),
    (b"%PDF-", "application/pdf"),
    (b"ID3", "audio/mpeg"),
    (b"OggS", "audio/ogg"),
    (b"fLaC", "audio/flac"),
    (b"PK\x03\x04", "application/zip"),
]

# Extensions for sniffed types that mimetypes maps ambiguously.
_EXTENSIONS: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/svg+xml": ".svg",
    "audio/mpeg": ".mp3",
    "video/mp4": ".mp4",
    "application/octet-stream": "",
}


def sniff_mime(data: bytes) -> str | None:
    """Detect a MIME type from the first bytes of *data*.

    >>> sniff_mime(b"%PDF-1.7 ...")
    'application/pdf'
    >>> sniff_mime(b"plain words") is None
    True
    """
    for magic, mime in _MAGIC_BYTES:
        if data[:len(magic)] == magic:
            # Extra check for WEBP: RIFF....WEBP
            if magic == b"RIFF" and data[8:12] != b"WEBP":
                continue
            return mime
    # ISO base media (MP4): the box type sits at offset 4.
    if data[4:8] == b"ftyp":
        return "video/mp4"
    return None


def guess_mime_from_url(url: str) -> str | None:
    """Guess a MIME type from the extension of the URL path."""
    mime_type, _ = mimetypes.guess_type(urlsplit(url).path)
    return mime_type


def extension_for(mime: str) -> str:
    if mime in _EXTENSIONS:
        return _EXTENSIONS[mime]
    return mimetypes.guess_extension(mime) or ""


def _write_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


class LocalFileStore:
    """Download files into *directory* and serve them under *public_base_url*.

    Parameters
    ----------
    directory:
        Where mirrored files are written.
    public_base_url:
        URL prefix the application serves *directory* under.
    client:
        ``httpx.AsyncClient`` used for downloads.  Not closed by the store
        unless it was created here.
    metrics:
        Optional metrics hook; each mirrored file is counted.
    """

    def __init__(
        self,
        directory: str | Path,
        public_base_url: str,
        client: httpx.AsyncClient | None = None,
        metrics: MetricsHook | None = None,
    ) -> None:
        self._directory = Path(directory)
        self._public_base_url = public_base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(follow_redirects=True)
        self._metrics = metrics if metrics is not None else NoopMetricsHook()

    async def cache_file(self, url_key: str, url: str) -> CachedFileData:
        """Download *url* and store it under *url_key*.

        Raises
        ------
        NotioncacheFileStoreError
            If the download fails or the file cannot be written.
        """
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            # The error text carries the signed URL; keep it out of the message.
            status = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
            raise NotioncacheFileStoreError(
                message=f"Failed to download {urlsplit(url).path} ({type(exc).__name__})",
                context={"url_key": url_key, "status_code": status},
                cause=exc,
            ) from exc

        data = response.content
        mime = sniff_mime(data) or guess_mime_from_url(url) or _DEFAULT_MIME
        filename = f"{url_key}{extension_for(mime)}"

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, _write_file, self._directory / filename, data)
        except OSError as exc:
            raise NotioncacheFileStoreError(
                message=f"Failed to write {filename}: {exc}",
                context={"url_key": url_key, "path": str(self._directory / filename)},
                cause=exc,
            ) from exc

        self._metrics.increment("notioncache.files_cached_total", tags={"file_type": mime})
        log.info(
            "File mirrored",
            extra={"extra_fields": {"op": "cache_file", "url_key": url_key, "file_type": mime, "bytes": len(data)}},
        )
        return CachedFileData(
            url_key=url_key,
            url=f"{self._public_base_url}/{filename}",
            file_type=mime,
            name=Path(urlsplit(url).path).name or None,
            file_size_in_kb=round(len(data) / 1024, 3),
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
