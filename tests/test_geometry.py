"""Unit tests for box union and highlight padding.

WHY: Run boxes and highlight boxes are what the user actually sees. An
off-by-one in padding or a union that misses a word shows up as a
highlight clipping the text.

HOW: Tests cover union containment and minimum size, the exact padding
values (including half-up rounding), and the "padding never shrinks"
property over a spread of box heights.
"""

import pytest

from conftest import make_word
from narration_sync.core.geometry import expand_box, round_half_up, union_bbox
from narration_sync.core.ir import BBox


class TestUnionBBox:

    def test_single_word_is_its_own_box(self):
        word = make_word(0, x=10, y=20, w=30, h=40)
        assert union_bbox([word]) == BBox(x=10, y=20, w=30, h=40)

    def test_spans_all_words(self):
        words = [
            make_word(0, x=10, y=20, w=30, h=10),
            make_word(1, x=50, y=5, w=20, h=10),
            make_word(2, x=0, y=30, w=5, h=25),
        ]
        box = union_bbox(words)
        assert box == BBox(x=0, y=5, w=70, h=50)
        for word in words:
            assert box.contains(word.bbox)

    def test_minimum_size_is_one(self):
        words = [make_word(0, x=5, y=5, w=0, h=0), make_word(1, x=5, y=5, w=0, h=0)]
        box = union_bbox(words)
        assert box.w >= 1
        assert box.h >= 1

    def test_empty_input_raises(self):
        with pytest.raises(ValueError):
            union_bbox([])


class TestRoundHalfUp:

    @pytest.mark.parametrize("value, expected", [
        (0.5, 1),
        (1.5, 2),
        (2.5, 3),
        (2.4999, 2),
        (-0.5, 0),
        (3.0, 3),
    ])
    def test_ties_round_up(self, value, expected):
        assert round_half_up(value) == expected


class TestExpandBox:

    def test_padding_for_typical_line(self):
        # h=20: pad_x=round(1.2)=1, top=round(2.0)=2, bottom=round(3.6)=4
        box = expand_box(BBox(x=100, y=200, w=300, h=20))
        assert box == BBox(x=99, y=198, w=302, h=26)

    def test_top_padding_rounds_half_up(self):
        # h=25: top = 2.5 -> 3 (banker's rounding would give 2)
        box = expand_box(BBox(x=0, y=100, w=50, h=25))
        assert box.y == 97

    def test_small_box_uses_minimum_padding(self):
        box = expand_box(BBox(x=10, y=10, w=1, h=1))
        assert box == BBox(x=9, y=9, w=3, h=4)

    def test_bottom_grows_more_than_top(self):
        src = BBox(x=0, y=100, w=400, h=60)
        box = expand_box(src)
        top = src.y - box.y
        bottom = box.bottom - src.bottom
        assert bottom > top

    @pytest.mark.parametrize("h", [1, 2, 5, 9, 17, 25, 33, 48, 100, 250])
    def test_never_shrinks(self, h):
        src = BBox(x=3, y=7, w=11, h=h)
        box = expand_box(src)
        assert box.w >= src.w
        assert box.h >= src.h
        assert box.contains(src)

    def test_does_not_mutate_input(self):
        src = BBox(x=1, y=2, w=3, h=4)
        expand_box(src)
        assert src == BBox(x=1, y=2, w=3, h=4)
