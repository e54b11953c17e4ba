"""Test module for the pathseg.svgpath module.

The tests are grouped into test cases, each of which is a function prefixed with "test_".
The tests are run using pytest.
"""

import math

import pytest

from pathseg.arc import Arc
from pathseg.cubic import Cubic
from pathseg.line import Line
from pathseg.quadratic import Quadratic
from pathseg.svgpath import SvgPath, svg_number


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0"),
        (-0.0, "0"),
        (5, "5"),
        (5.0, "5"),
        (-2.25, "-2.25"),
        (0.1, "0.1"),
        (1e-7, "0.0000001"),
        (123456789.5, "123456789.5"),
    ],
)
def test_svg_number(value, expected):
    """Numbers are written positionally without trailing zeros."""
    assert svg_number(value) == expected


def test_from_segments_contiguous():
    """Contiguous segments share one move-to."""
    segments = [Line((0, 0), (1, 0)), Quadratic((1, 0), (2, 1), (3, 0)), Cubic((3, 0), (4, 1), (5, -1), (6, 0))]
    assert SvgPath.from_segments(segments) == "M 0 0 L 1 0 Q 2 1 3 0 C 4 1 5 -1 6 0"


def test_from_segments_gap_and_close():
    """A gap starts a new subpath, closed appends Z."""
    segments = [Line((0, 0), (1, 0)), Line((2, 0), (2, 1))]
    assert SvgPath.from_segments(segments, closed=True) == "M 0 0 L 1 0 M 2 0 L 2 1 Z"


def test_from_segments_epsilon():
    """Tiny gaps within epsilon do not start a new subpath."""
    segments = [Line((0, 0), (1, 0)), Line((1.0000001, 0), (1, 1))]
    assert SvgPath.from_segments(segments, epsilon=1e-6).count("M") == 1
    assert SvgPath.from_segments(segments).count("M") == 2


def test_from_segments_empty():
    """No segments give an empty path, even if closed."""
    assert SvgPath.from_segments([], closed=True) == ""


def test_from_segments_arc():
    """Arcs are written as A commands after the move-to."""
    quarter = SvgPath.from_segments([Arc((0, 0), 2, 0, math.pi / 2, False)])
    assert quarter.startswith("M 2 0 A 2 2 0 0 1 ")
    large = SvgPath.from_segments([Arc((0, 0), 2, 0, 1.5 * math.pi, False)])
    assert large.startswith("M 2 0 A 2 2 0 1 1 ")


def test_beautify_commands_batches():
    """Every argument batch gets its own command letter."""
    assert SvgPath.beautify_commands("M10,20L30 40 50 60Z") == "M 10 20 L 30 40 L 50 60 Z"


def test_beautify_commands_rounding():
    """Values are rounded by the given function."""
    result = SvgPath.beautify_commands("M 10.4 20.6 C 1.1 2.2 3.3 4.4 5.5 6.6", round_func=round)
    assert result == "M 10 21 C 1 2 3 4 6 7"


def test_beautify_commands_arc_and_exponent():
    """Arcs take seven arguments, exponents are expanded."""
    result = SvgPath.beautify_commands("A 1 1 0 0 1 2e-3 3")
    assert result == "A 1 1 0 0 1 0.002 3"
