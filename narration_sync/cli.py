"""Command-line interface for Narration Sync.

WHY: Preparing a page for read-along playback is a batch step: take a
segment manifest, fetch every OCR and TTS document, cluster runs, and
write the files the renderer loads. The CLI wires that pipeline behind
a single command, and ``--probe`` answers "what is highlighted at t?"
for debugging a page without a renderer.

HOW: Uses argparse to accept the manifest path, output format selection,
output directory, and probe time. Runs the async loader via
asyncio.run(). Status messages go to stderr; probe results go to stdout.

RULES:
- Positional argument: path to the segment manifest JSON
- Asset paths in the manifest resolve relative to the manifest's folder
- --formats: comma-separated formatter keys (default: all registered)
- Output naming: {manifest stem}{suffix}, numeric suffix for conflicts
- Status output goes to stderr (not stdout)
- Exit code 1 on any load/format error, 130 on Ctrl-C
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from narration_sync.api.client import AssetClient
from narration_sync.config import LOG_LEVEL
from narration_sync.core.assembler import load_segment_models
from narration_sync.core.ir import PageModel
from narration_sync.core.manifest import load_manifest, to_segment_assets
from narration_sync.core.progress import compute_run_progress, find_active_run
from narration_sync.formatters import FORMATTERS
from narration_sync.formatters.base import FormatterOutput, format_ms

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Return a path that does not overwrite an existing file.

    ``page-syncmap.json`` becomes ``page-syncmap-2.json``, ``-3`` and so
    on when earlier names are taken.
    """
    candidate = output_dir / "{}{}".format(stem, suffix)
    if not candidate.exists():
        return candidate

    dot = suffix.rfind(".")
    base, ext = (suffix[:dot], suffix[dot:]) if dot > 0 else (suffix, "")
    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, base, counter, ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _print_probe(page: PageModel, t_ms: float) -> None:
    """Print each segment's active run and progress at ``t_ms`` to stdout."""
    for segment in page.segments:
        run = find_active_run(segment, t_ms)
        if run is None:
            print("{}\t-\t0.000".format(segment.id))
            continue
        print("{}\t{}\t{:.3f}\t{}".format(
            segment.id, run.id, compute_run_progress(run, t_ms), run.text,
        ))


async def _load_page(manifest_path: Path) -> PageModel:
    manifest = load_manifest(manifest_path)
    assets = to_segment_assets(manifest, manifest_path.parent)
    _status("Loading {} segments from {}...".format(len(assets), manifest_path.name))
    async with AssetClient(base_dir=manifest_path.parent) as client:
        return await load_segment_models(assets, client)


def _run(args: argparse.Namespace) -> int:
    manifest_path = Path(args.manifest).resolve()
    if not manifest_path.is_file():
        print("Error: Manifest not found: {}".format(manifest_path), file=sys.stderr)
        return 1

    output_dir = Path(args.output_dir).resolve() if args.output_dir else manifest_path.parent
    if args.probe is None and not output_dir.is_dir():
        print("Error: Output directory does not exist: {}".format(output_dir), file=sys.stderr)
        return 1

    if args.formats:
        format_keys = [f.strip() for f in args.formats.split(",") if f.strip()]
        for key in format_keys:
            if key not in FORMATTERS:
                available = ", ".join(sorted(FORMATTERS.keys()))
                print(
                    "Error: Unknown format '{}'. Available formats: {}".format(key, available),
                    file=sys.stderr,
                )
                return 1
    else:
        format_keys = list(FORMATTERS.keys())

    try:
        page = asyncio.run(_load_page(manifest_path))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        return 130
    except Exception as e:
        logger.debug("Load failed", exc_info=True)
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    run_count = sum(len(s.runs) for s in page.segments)
    _status("  {} segments, {} runs, image {}x{}".format(
        len(page.segments), run_count, page.image_width, page.image_height,
    ))

    if args.probe is not None:
        _status("Probe at {}".format(format_ms(args.probe)))
        _print_probe(page, args.probe)
        return 0

    stem = manifest_path.stem
    saved_files: List[Path] = []
    try:
        for key in format_keys:
            formatter = FORMATTERS[key]()
            _status("  Running {} formatter...".format(formatter.name))
            for output in formatter.format(page):
                saved_files.append(_save_output(output, stem, output_dir))
    except Exception as e:
        logger.debug("Formatting failed", exc_info=True)
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))
    for f in saved_files:
        _status("  {}".format(f.name))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="narration_sync",
        description="Cluster OCR words into reading runs, attach TTS timing, "
                    "and export read-along sync files for a page.",
    )

    parser.add_argument(
        "manifest",
        help="Path to the segment manifest JSON.",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: the manifest's directory).",
    )

    parser.add_argument(
        "--probe",
        type=float,
        default=None,
        metavar="MS",
        help="Print each segment's active run and progress at this playback "
             "time (milliseconds) instead of writing files.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(_run(args))


if __name__ == "__main__":
    main()
