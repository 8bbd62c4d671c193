"""Word building from OCR records and timing attachment from TTS tokens.

WHY: OCR reports each word as a centre-based, possibly rotated rectangle;
the rest of the system works with axis-aligned top-left boxes. TTS
reports timestamps per token, keyed by the OCR reading index, and a
word can be covered by several tokens.

HOW: build_words converts every OCR record into a WordModel, keeping the
record's position as ``idx``. attach_token_timing walks the tokens in
order and widens each referenced word's timing envelope.

RULES:
- bbox.x = cx - w/2, bbox.y = cy - h/2; size clamped to at least 1
- Rotation is discarded; angles beyond _ROTATION_WARN_DEG are logged
- Word ids are ``word-{idx}``
- Tokens without a usable in-range begin_index are skipped silently
- Envelope merge: t0 = min of starts, t1 = max of ends
"""

from __future__ import annotations

import logging
from typing import List

from narration_sync.api.models import OcrPayload, TtsPayload
from narration_sync.core.ir import BBox, WordModel, WordTiming

logger = logging.getLogger(__name__)

_WORD_ID_PREFIX = "word-"

# Boxes are treated as axis-aligned. Past this angle the highlight will
# visibly miss the printed word.
_ROTATION_WARN_DEG = 2.0


def build_words(ocr: OcrPayload) -> List[WordModel]:
    """Convert OCR word records into axis-aligned WordModels.

    Args:
        ocr: Parsed OCR payload.

    Returns:
        WordModels in OCR order; ``words[i].idx == i``.
    """
    words: List[WordModel] = []
    rotated = 0
    for idx, raw in enumerate(ocr.words):
        if abs(raw.angle) > _ROTATION_WARN_DEG:
            rotated += 1
        words.append(WordModel(
            id="{}{}".format(_WORD_ID_PREFIX, idx),
            idx=idx,
            text=raw.text,
            bbox=BBox.clamped(raw.cx - raw.w / 2, raw.cy - raw.h / 2, raw.w, raw.h),
        ))

    if rotated:
        logger.warning(
            "%d of %d OCR words are rotated more than %.1f degrees; "
            "rotation is ignored and their highlight boxes may be off",
            rotated, len(words), _ROTATION_WARN_DEG,
        )
    return words


def attach_token_timing(words: List[WordModel], tts: TtsPayload) -> int:
    """Attach TTS token timestamps to words by index.

    Mutates ``words`` in place. Malformed timing data never raises.

    Returns:
        The number of tokens that were applied.
    """
    applied = 0
    for token in tts.subtitles:
        if not token.is_usable:
            continue
        idx = token.begin_index
        if idx < 0 or idx >= len(words):
            continue

        word = words[idx]
        if word.timing is None:
            word.timing = WordTiming(t0=token.begin_time, t1=token.end_time)
        else:
            word.timing = word.timing.merged(token.begin_time, token.end_time)
        applied += 1

    skipped = len(tts.subtitles) - applied
    if skipped:
        logger.debug("Skipped %d TTS tokens without a usable word index", skipped)
    return applied
