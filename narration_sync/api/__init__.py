"""Asset client package — async access to OCR and TTS documents.

WHY: Segment assembly needs two JSON documents per segment, served over
HTTP or sitting next to a local manifest. This package hides where they
come from behind one async client and typed payload dataclasses.

HOW: Uses httpx.AsyncClient for non-blocking HTTP and plain file reads
for local paths. Payloads are validated with jsonschema and parsed into
dataclasses defined in models.py.

RULES:
- All HTTP calls go through AssetClient (no direct httpx usage elsewhere)
- Structural problems raise PayloadError; retrieval problems AssetFetchError
"""

from narration_sync.api.client import AssetClient, AssetFetchError
from narration_sync.api.models import OcrPayload, PayloadError, TtsPayload, TtsToken

__all__ = [
    "AssetClient",
    "AssetFetchError",
    "OcrPayload",
    "PayloadError",
    "TtsPayload",
    "TtsToken",
]
