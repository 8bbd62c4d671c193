"""Segment assembly — OCR + TTS payloads to SegmentModel.

WHY: Each segment pairs one OCR document with one TTS document. The
renderer needs them combined into runs of timed words with a segment
time range, for every segment of a page, in manifest order.

HOW: build_segment is the synchronous core: build words, attach token
timing, cluster runs using the OCR image width, and derive the segment
time range. load_segment_models fetches every segment's two payloads
concurrently (and all segments concurrently with each other) through an
AssetClient, then runs build_segment on each.

RULES:
- OCR and TTS of one segment are fetched concurrently; both must succeed
- Segments are assembled independently; output keeps input order
- Any fetch or parse failure fails the whole batch (no partial results)
- Segment t0 / t1 = min start / max end over timed words; 0 / 0 if none
- Page image size comes from the first segment; mismatches are logged
- Words and runs are owned by their segment; nothing is shared across
  segments
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Sequence, Tuple

from narration_sync.api.client import AssetClient
from narration_sync.api.models import OcrPayload, TtsPayload
from narration_sync.core.ir import PageModel, SegmentAsset, SegmentModel, WordModel
from narration_sync.core.runs import build_runs
from narration_sync.core.words import attach_token_timing, build_words

logger = logging.getLogger(__name__)


def time_range(words: Sequence[WordModel]) -> Tuple[float, float]:
    """Return (min t0, max t1) over timed words, or (0, 0) when none are timed."""
    timed = [w for w in words if w.is_timed]
    if not timed:
        return 0, 0
    return min(w.t0 for w in timed), max(w.t1 for w in timed)


def build_segment(asset: SegmentAsset, ocr: OcrPayload, tts: TtsPayload) -> SegmentModel:
    """Assemble one segment from its already-fetched payloads.

    Args:
        asset: The segment descriptor (id, audio, text).
        ocr: Parsed OCR payload for the segment.
        tts: Parsed TTS payload for the segment.

    Returns:
        The assembled SegmentModel.
    """
    words = build_words(ocr)
    applied = attach_token_timing(words, tts)
    runs = build_runs(asset.id, words, ocr.width)
    t0, t1 = time_range(words)

    logger.debug(
        "Segment %s: %d words, %d runs, %d timing tokens applied, %s-%s ms",
        asset.id, len(words), len(runs), applied, t0, t1,
    )
    return SegmentModel(
        id=asset.id,
        audio_url=asset.audio_url,
        text=asset.text,
        t0=t0,
        t1=t1,
        runs=runs,
        image_width=ocr.width,
        image_height=ocr.height,
    )


async def _load_segment(client: AssetClient, asset: SegmentAsset) -> SegmentModel:
    ocr, tts = await asyncio.gather(
        client.fetch_ocr(asset.ocr_url),
        client.fetch_tts(asset.tts_url),
    )
    return build_segment(asset, ocr, tts)


async def load_segment_models(
    assets: Sequence[SegmentAsset],
    client: AssetClient,
) -> PageModel:
    """Fetch and assemble every segment of a page concurrently.

    Args:
        assets: Segment descriptors in display order.
        client: An entered AssetClient used for all fetches.

    Returns:
        PageModel with segments in the same order as ``assets``.

    Raises:
        AssetFetchError: If any OCR or TTS document cannot be retrieved.
        PayloadError: If any OCR or TTS document is malformed.
    """
    segments: List[SegmentModel] = list(
        await asyncio.gather(*(_load_segment(client, asset) for asset in assets))
    )
    if not segments:
        return PageModel(image_width=0, image_height=0, segments=[])

    first = segments[0]
    mismatched = [
        s.id for s in segments[1:]
        if (s.image_width, s.image_height) != (first.image_width, first.image_height)
    ]
    if mismatched:
        logger.warning(
            "Segments %s report a different image size than %s (%dx%d); "
            "page size is taken from the first segment, per-segment sizes "
            "are kept on each SegmentModel",
            ", ".join(mismatched), first.id, first.image_width, first.image_height,
        )

    logger.info("Loaded %d segments", len(segments))
    return PageModel(
        image_width=first.image_width,
        image_height=first.image_height,
        segments=segments,
    )
