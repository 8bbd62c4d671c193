"""Sync map JSON formatter — the renderer's read-along document.

WHY: A browser or mobile renderer that cannot run Python still needs the
clustered runs, padded highlight boxes, and word timings. The sync map
is that document, one file per page.

HOW: Walks segments → runs → words and serializes each level. Every run
carries its union box, its ``expand_box`` highlight box, and its time
range. The document is validated with jsonschema against the bundled
sync_map schema before returning.

RULES:
- version is "1.0.0"
- Untimed words and runs serialize t0 / t1 as null
- Segment entries carry their own image size
- Output suffix: "-syncmap.json"
- Validate output against the schema before returning; raise on failure
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

import jsonschema

from narration_sync.core.geometry import expand_box
from narration_sync.core.ir import PageModel, RunModel, SegmentModel, WordModel
from narration_sync.core.progress import run_time_range
from narration_sync.formatters.base import BaseFormatter, FormatterOutput
from narration_sync.schemas import get_schema

SYNC_MAP_VERSION = "1.0.0"


def _word_dict(word: WordModel) -> Dict[str, Any]:
    return {
        "id": word.id,
        "idx": word.idx,
        "text": word.text,
        "bbox": word.bbox.to_dict(),
        "t0": word.t0,
        "t1": word.t1,
    }


def _run_dict(run: RunModel) -> Dict[str, Any]:
    span = run_time_range(run)
    return {
        "id": run.id,
        "bbox": run.bbox.to_dict(),
        "highlight": expand_box(run.bbox).to_dict(),
        "t0": span[0] if span else None,
        "t1": span[1] if span else None,
        "words": [_word_dict(w) for w in run.words],
    }


def _segment_dict(segment: SegmentModel) -> Dict[str, Any]:
    return {
        "id": segment.id,
        "audio": segment.audio_url,
        "text": segment.text,
        "t0": segment.t0,
        "t1": segment.t1,
        "image": {"width": segment.image_width, "height": segment.image_height},
        "runs": [_run_dict(r) for r in segment.runs],
    }


def build_sync_map(page: PageModel) -> Dict[str, Any]:
    """Serialize a PageModel into the sync map structure (not validated)."""
    return {
        "version": SYNC_MAP_VERSION,
        "image": {"width": page.image_width, "height": page.image_height},
        "segments": [_segment_dict(s) for s in page.segments],
    }


class SyncMapFormatter(BaseFormatter):
    """Formatter that produces the renderer's sync map JSON."""

    @property
    def name(self) -> str:
        return "Sync Map JSON"

    def format(self, page: PageModel) -> List[FormatterOutput]:
        """Convert the PageModel into a schema-valid sync map.

        Raises:
            jsonschema.ValidationError: If the generated JSON does not
                conform to the sync map schema.
        """
        output = build_sync_map(page)
        jsonschema.validate(instance=output, schema=get_schema("sync_map"))
        return [
            FormatterOutput(
                suffix="-syncmap.json",
                content=json.dumps(output, indent=2, ensure_ascii=False),
                media_type="application/json",
            )
        ]
