"""Core assembly and intermediate representation modules.

WHY: The core package holds the algorithmic heart of the tool: the IR
dataclasses, box geometry, word building, run clustering, and the
playback progress calculator. Exporters and the CLI only consume it.

HOW: ir.py defines the data structures, geometry.py the box helpers,
words.py builds words and attaches timing, runs.py clusters words into
reading lines, assembler.py orchestrates per-segment assembly,
progress.py answers "how far along is the highlight at time t",
manifest.py turns a segment manifest into SegmentAsset records.

RULES:
- IR dataclasses are the contract; change with care
- Everything except assembler.load_segment_models is synchronous
- No module here writes files or talks to the network directly
"""
