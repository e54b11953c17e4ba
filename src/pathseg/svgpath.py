"""Handling SVG path strings for segments"""

from __future__ import annotations

import re
from typing import Callable, ClassVar, Optional, Sequence, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from pathseg.segment import Segment


def svg_number(value: float) -> str:
    """
    Format a number for SVG path data.

    SVG parsers do not reliably accept scientific notation, so the shortest
    positional representation that round-trips the float is used.

    Args:
        value (float): the number

    Returns:
        str: e.g. "5", "0.1", "-2.25"
    """
    if value == 0:
        return "0"
    return np.format_float_positional(float(value), trim="-")


class SvgPath:
    """
    This class provides a collection of static methods for SVG-paths built from segments.
    A SVG-path is characterized by a string describing a sequence of points.
    Commands (command : number of values : command-character):
        MoveTo:           2: Mm
        LineTo:           2: Ll   1: Hh(x)   1:Vv(y)
        CubicBezier:      6: Cc   4: Ss
        QuadraticBezier:  4: Qq   2: Tt
        ArcCurve:         7: Aa
        ClosePath:        0: Zz
    """

    # Command letters:
    SVG_CMDS: ClassVar[str] = "MmLlHhVvCcSsQqTtAaZz"
    # Definition of a number:
    SVG_ARGS: ClassVar[str] = r"[-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?"

    # Number of arguments per command letter
    BATCH_SIZES: ClassVar[dict] = {
        "M": 2,
        "L": 2,
        "T": 2,
        "S": 4,
        "Q": 4,
        "C": 6,
        "H": 1,
        "V": 1,
        "A": 7,
        "Z": 0,
    }

    @staticmethod
    def from_segments(segments: Sequence[Segment], closed: bool = False, epsilon: float = 0.0) -> str:
        """
        Build a path string from consecutive _segments_.

        A move-to is emitted before the first segment and whenever a segment
        does not start where the previous one ended (within _epsilon_).

        Args:
            segments (Sequence[Segment]): the segments
            closed (bool): append a close-path command. Defaults to False.
            epsilon (float): tolerance for continuity. Defaults to 0.0.

        Returns:
            str: the SVG path string, empty for no segments
        """
        parts = []
        last_end = None
        for segment in segments:
            start = segment.start
            if last_end is None or not start.equals_epsilon(last_end, epsilon):
                parts.append(f"M {svg_number(start.x)} {svg_number(start.y)}")
            parts.append(segment.get_svg_path_fragment())
            last_end = segment.end
        if closed and parts:
            parts.append("Z")
        return " ".join(parts)

    @staticmethod
    def beautify_commands(path_string: str, round_func: Optional[Callable] = None) -> str:
        """
        Takes the given _path_string_ and rounds (mathematical) each point of the path
            by using the given _round_func_.
            If _round_func_ is None the numbers are only normalized by svg_number().

        Args:
            path_string (str): a SVG path string
            round_func (Optional[Callable], optional):
                a function that takes a float and returns a float. Defaults to None.

        Returns:
            str: the beautified path_string, one command letter per argument batch
        """
        ret_commands = []
        for command in re.findall(f"[{SvgPath.SVG_CMDS}][^{SvgPath.SVG_CMDS}]*", path_string):
            command_letter = command[0]
            args = re.findall(SvgPath.SVG_ARGS, command[1:])
            batch_size = SvgPath.BATCH_SIZES[command_letter.upper()]

            # commands without arguments (like "Z")
            if batch_size == 0:
                ret_commands.append(command_letter)
                continue

            for i, arg in enumerate(args):
                if not i % batch_size:
                    ret_commands.append(command_letter)
                value = float(arg)
                if round_func:
                    value = round_func(value)
                ret_commands.append(svg_number(value))

        return " ".join(ret_commands)
