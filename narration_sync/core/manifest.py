"""Segment manifest parsing and asset resolution.

WHY: A page's segments are described by one manifest file listing, per
segment, its audio clip, OCR document, TTS document, and text. Paths in
the manifest are relative to the manifest itself, so the assembler
needs them resolved before it can fetch anything.

HOW: parse_manifest validates the JSON against the bundled manifest
schema and builds dataclasses. to_segment_assets resolves every file
against a base location (a URL joined with urljoin, or a directory
joined as a path) and returns SegmentAsset records in manifest order.

RULES:
- Validation failures raise ManifestError
- segment_count is informational; a mismatch is logged, not rejected
- Segments keep manifest order
- The manifest's own time/word ranges are carried but never validated
  against the OCR/TTS payloads
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import urljoin

from narration_sync.api.client import is_http_ref
from narration_sync.core.ir import SegmentAsset
from narration_sync.schemas import validate

logger = logging.getLogger(__name__)


class ManifestError(ValueError):
    """Raised when a segment manifest is unreadable or structurally invalid."""


@dataclass
class ManifestSegment:
    """One manifest entry, paths still relative to the manifest."""

    id: str
    audio: str
    ocr: str
    tts: str
    text: str = ""
    image: Optional[str] = None
    global_time_range_ms: Optional[Tuple[float, float]] = None
    duration_ms: Optional[float] = None
    word_index_range: Optional[Tuple[int, int]] = None

    @classmethod
    def from_dict(cls, data: dict) -> ManifestSegment:
        time_range = data.get("global_time_range_ms")
        word_range = data.get("word_index_range")
        return cls(
            id=data["id"],
            audio=data["audio"],
            ocr=data["ocr"],
            tts=data["tts"],
            text=data.get("text", ""),
            image=data.get("image"),
            global_time_range_ms=tuple(time_range) if time_range else None,
            duration_ms=data.get("duration_ms"),
            word_index_range=tuple(word_range) if word_range else None,
        )


@dataclass
class Manifest:
    """A page's segment manifest."""

    image: str
    segments: List[ManifestSegment] = field(default_factory=list)
    dataset: str = ""
    source: Dict[str, str] = field(default_factory=dict)
    segment_count: Optional[int] = None


def parse_manifest(data: Any) -> Manifest:
    """Validate a raw manifest document and build a Manifest.

    Raises:
        ManifestError: If the document does not match the manifest schema.
    """
    validate(data, "manifest", ManifestError, "segment manifest")

    manifest = Manifest(
        image=data["image"],
        segments=[ManifestSegment.from_dict(s) for s in data["segments"]],
        dataset=data.get("dataset", ""),
        source=dict(data.get("source") or {}),
        segment_count=data.get("segment_count"),
    )

    if manifest.segment_count is not None and manifest.segment_count != len(manifest.segments):
        logger.warning(
            "Manifest declares %d segments but lists %d",
            manifest.segment_count, len(manifest.segments),
        )
    return manifest


def load_manifest(path: Union[str, Path]) -> Manifest:
    """Read and parse a manifest file from disk.

    Raises:
        ManifestError: If the file cannot be read, is not JSON, or is invalid.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ManifestError("Cannot read manifest {}: {}".format(path, e.strerror or e)) from e
    except json.JSONDecodeError as e:
        raise ManifestError("Manifest {} is not valid JSON: {}".format(path, e)) from e
    return parse_manifest(data)


def resolve_ref(base: Union[str, Path], ref: str) -> str:
    """Resolve a manifest-relative file reference against ``base``.

    ``base`` is the directory (or URL ending in ``/``) holding the
    manifest. Absolute URLs and absolute paths in ``ref`` are returned
    unchanged.
    """
    if is_http_ref(ref):
        return ref
    base_str = str(base)
    if is_http_ref(base_str):
        if not base_str.endswith("/"):
            base_str += "/"
        return urljoin(base_str, ref)
    return str(Path(base_str) / ref)


def to_segment_assets(manifest: Manifest, base: Union[str, Path]) -> List[SegmentAsset]:
    """Turn manifest entries into SegmentAssets with resolved references."""
    return [
        SegmentAsset(
            id=segment.id,
            audio_url=resolve_ref(base, segment.audio),
            ocr_url=resolve_ref(base, segment.ocr),
            tts_url=resolve_ref(base, segment.tts),
            text=segment.text,
            image_url=resolve_ref(base, segment.image or manifest.image),
        )
        for segment in manifest.segments
    ]


def referenced_files(manifest: Manifest) -> List[str]:
    """List every file the manifest uses: the page image, then each
    segment's audio, OCR, and TTS file in manifest order."""
    files = [manifest.image]
    for segment in manifest.segments:
        files.extend([segment.audio, segment.ocr, segment.tts])
    return files
