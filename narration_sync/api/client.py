"""Async asset client for OCR and TTS documents.

WHY: Each segment needs two JSON documents (OCR word boxes and TTS token
timing) that may live on a web server or next to a local manifest. The
assembler should not care which; it asks the client for a payload and
gets a typed object or an exception.

HOW: AssetClient is an async context manager wrapping httpx.AsyncClient.
``http://`` and ``https://`` references go through httpx; ``file://``
URLs and plain paths are read from disk, relative to ``base_dir`` when
given. JSON is decoded here and validated by the payload models.

RULES:
- Always use the async context manager (async with AssetClient() as client:)
- Requests send ``Cache-Control: no-cache``; narration assets are
  regenerated in place and stale copies desynchronize the highlight
- Non-2xx responses raise AssetFetchError with the status code
- Transport failures and missing files raise AssetFetchError with
  status_code=None
- Undecodable JSON raises PayloadError
- No retries and no cancellation; a fetch runs to completion or failure
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import unquote, urlparse

import httpx

from narration_sync.api.models import OcrPayload, PayloadError, TtsPayload
from narration_sync.config import CONNECT_TIMEOUT_S, FETCH_TIMEOUT_S

logger = logging.getLogger(__name__)

_HTTP_SCHEMES = frozenset({"http", "https"})


class AssetFetchError(Exception):
    """Raised when an asset document cannot be retrieved.

    WHY: Callers need a typed exception to tell "the file is not there"
    apart from "the file is there but malformed" (PayloadError).

    RULES:
    - ref is the reference exactly as requested
    - status_code is the HTTP status, or None for transport/file errors
    """

    def __init__(self, ref: str, status_code: Optional[int], message: str) -> None:
        self.ref = ref
        self.status_code = status_code
        self.message = message
        if status_code is None:
            super().__init__("Failed to fetch {}: {}".format(ref, message))
        else:
            super().__init__("Failed to fetch {} (HTTP {}): {}".format(ref, status_code, message))


def is_http_ref(ref: str) -> bool:
    """True when ``ref`` is an http(s) URL."""
    return urlparse(ref).scheme.lower() in _HTTP_SCHEMES


class AssetClient:
    """Async client that loads JSON assets over HTTP or from disk.

    RULES:
    - Use as: async with AssetClient(base_dir=...) as client: ...
    - base_dir anchors relative local paths; the CWD is used otherwise
    - transport is for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        base_dir: Optional[Union[str, Path]] = None,
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else None
        self._timeout_s = timeout_s if timeout_s is not None else FETCH_TIMEOUT_S
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> AssetClient:
        self._client = httpx.AsyncClient(
            headers={"Cache-Control": "no-cache"},
            timeout=httpx.Timeout(self._timeout_s, connect=CONNECT_TIMEOUT_S),
            transport=self._transport,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "AssetClient must be used as an async context manager: "
                "async with AssetClient() as client: ..."
            )
        return self._client

    def _local_path(self, ref: str) -> Path:
        parsed = urlparse(ref)
        if parsed.scheme == "file":
            return Path(unquote(parsed.path))
        path = Path(ref)
        if not path.is_absolute() and self._base_dir is not None:
            path = self._base_dir / path
        return path

    async def fetch_json(self, ref: str) -> Any:
        """Fetch and decode one JSON document.

        Raises:
            AssetFetchError: If the document cannot be retrieved.
            PayloadError: If the body is not valid JSON.
        """
        if is_http_ref(ref):
            client = self._ensure_client()
            try:
                resp = await client.get(ref)
            except httpx.HTTPError as e:
                raise AssetFetchError(ref, None, str(e) or type(e).__name__) from e
            if not resp.is_success:
                raise AssetFetchError(ref, resp.status_code, resp.reason_phrase or resp.text)
            logger.debug("Fetched %s (%d bytes)", ref, len(resp.content))
            body = resp.text
        else:
            path = self._local_path(ref)
            try:
                body = path.read_text(encoding="utf-8")
            except OSError as e:
                raise AssetFetchError(ref, None, e.strerror or str(e)) from e
            logger.debug("Read %s (%d chars)", path, len(body))

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise PayloadError("{} is not valid JSON: {}".format(ref, e)) from e

    async def fetch_ocr(self, ref: str) -> OcrPayload:
        """Fetch an OCR document and parse it into an OcrPayload."""
        return OcrPayload.parse(await self.fetch_json(ref), source="OCR payload {}".format(ref))

    async def fetch_tts(self, ref: str) -> TtsPayload:
        """Fetch a TTS document and parse it into a TtsPayload."""
        return TtsPayload.parse(await self.fetch_json(ref), source="TTS payload {}".format(ref))
