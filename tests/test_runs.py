"""Unit tests for run clustering.

WHY: Run boundaries must match the printed lines on the page image;
the renderer draws one highlight per run. Thresholds are tuned for
scanned-book line heights and must not drift.

HOW: Tests cover the column split, the line tolerance (both the 10px
floor and the 0.6 x height band), left-to-right ordering, global line
ordering, run ids and boxes, and independence from input order.
"""

import itertools
import random

from conftest import make_word
from narration_sync.core.geometry import union_bbox
from narration_sync.core.runs import (
    build_runs,
    cluster_lines,
    group_lines,
    split_columns,
)
from narration_sync.core.words import build_words


def _texts(lines):
    return [" ".join(w.text for w in line) for line in lines]


class TestSplitColumns:

    def test_threshold_is_55_percent_of_width(self):
        words = [make_word(0, x=549), make_word(1, x=550), make_word(2, x=551)]
        left, right = split_columns(words, 1000)
        assert [w.idx for w in left] == [0]
        assert [w.idx for w in right] == [1, 2]

    def test_single_column_page_has_empty_right(self):
        words = [make_word(i, x=50 * i, y=30 * (i % 2)) for i in range(6)]
        left, right = split_columns(words, 1000)
        assert len(left) == 6
        assert right == []


class TestGroupLines:

    def test_same_height_words_share_a_line(self):
        words = [make_word(0, x=200, y=0), make_word(1, x=0, y=4), make_word(2, x=100, y=-3)]
        lines = group_lines(words)
        assert len(lines) == 1
        assert [w.idx for w in lines[0]] == [1, 2, 0]

    def test_ten_pixel_floor_for_short_words(self):
        # h=10 -> 0.6h = 6, floor of 10 applies
        ref = make_word(0, x=0, y=0, h=10)
        near = make_word(1, x=50, y=10, h=10)   # centre diff 10 -> same line
        far = make_word(2, x=100, y=11, h=10)   # centre diff 11 -> new line
        lines = group_lines([ref, near, far])
        assert [[w.idx for w in line] for line in lines] == [[0, 1], [2]]

    def test_height_band_for_tall_words(self):
        # h=40 -> tolerance 24
        ref = make_word(0, x=0, y=0, h=40)
        near = make_word(1, x=50, y=24, h=40)
        far = make_word(2, x=100, y=25, h=40)
        lines = group_lines([ref, near, far])
        assert [[w.idx for w in line] for line in lines] == [[0, 1], [2]]

    def test_reference_is_first_member_not_centroid(self):
        # Each word is within 8px of its neighbour but the third is 16px
        # from the line's first word, so it opens a new line.
        words = [make_word(0, x=0, y=0, h=10), make_word(1, x=50, y=8, h=10), make_word(2, x=100, y=16, h=10)]
        lines = group_lines(words)
        assert [[w.idx for w in line] for line in lines] == [[0, 1], [2]]

    def test_empty_column(self):
        assert group_lines([]) == []


class TestClusterLines:

    def test_sample_page_reading_order(self, sample_ocr):
        lines = cluster_lines(build_words(sample_ocr), sample_ocr.width)
        assert _texts(lines) == ["Once upon a", "lived a", "time there", "fox"]

    def test_single_column_emits_no_right_lines(self):
        words = [
            make_word(0, x=0, y=0), make_word(1, x=120, y=2),
            make_word(2, x=0, y=60), make_word(3, x=120, y=58),
        ]
        lines = cluster_lines(words, 1000)
        assert len(lines) == 2
        assert all(w.bbox.x < 550 for line in lines for w in line)

    def test_lines_ordered_by_first_word_y_then_x(self):
        words = [
            make_word(0, x=600, y=50),
            make_word(1, x=0, y=50),
            make_word(2, x=0, y=10),
        ]
        lines = cluster_lines(words, 1000)
        assert [line[0].idx for line in lines] == [2, 1, 0]

    def test_no_words_no_lines(self):
        assert cluster_lines([], 1000) == []

    def test_permutation_independent(self, sample_ocr):
        words = build_words(sample_ocr)
        expected = [[w.idx for w in line] for line in cluster_lines(words, sample_ocr.width)]

        rng = random.Random(7)
        for _ in range(50):
            shuffled = list(words)
            rng.shuffle(shuffled)
            got = [[w.idx for w in line] for line in cluster_lines(shuffled, sample_ocr.width)]
            assert got == expected

    def test_exact_ties_are_order_independent(self):
        # Two words with identical boxes: idx decides, not list position.
        words = [make_word(0, x=10, y=10), make_word(1, x=10, y=10), make_word(2, x=200, y=12)]
        results = {
            tuple(tuple(w.idx for w in line) for line in cluster_lines(list(p), 1000))
            for p in itertools.permutations(words)
        }
        assert results == {((0, 1, 2),)}


class TestBuildRuns:

    def test_run_ids_boxes_and_words(self, sample_ocr):
        words = build_words(sample_ocr)
        runs = build_runs("seg-7", words, sample_ocr.width)
        assert [r.id for r in runs] == ["seg-7-run-1", "seg-7-run-2", "seg-7-run-3", "seg-7-run-4"]
        for run in runs:
            assert run.bbox == union_bbox(run.words)
            assert [w.bbox.x for w in run.words] == sorted(w.bbox.x for w in run.words)

    def test_every_word_in_exactly_one_run(self, sample_ocr):
        words = build_words(sample_ocr)
        runs = build_runs("seg", words, sample_ocr.width)
        member_ids = [id(w) for run in runs for w in run.words]
        assert len(member_ids) == len(words)
        assert set(member_ids) == {id(w) for w in words}

    def test_first_run_box(self, sample_ocr):
        runs = build_runs("seg", build_words(sample_ocr), sample_ocr.width)
        first = runs[0]
        assert (first.bbox.x, first.bbox.y, first.bbox.w, first.bbox.h) == (60, 100, 220, 20)
        assert first.text == "Once upon a"
