"""Drawing targets for segments: a canvas-like path protocol and its SVG implementation"""

from __future__ import annotations

import gzip
import io
import logging
from typing import Iterable, List, Optional, Protocol, Union

import svgwrite
import svgwrite.container
import svgwrite.path
from svgwrite.utils import strlist

from pathseg.arc import Arc
from pathseg.elliptical_arc import EllipticalArc
from pathseg.geom import Bounds, Vec2
from pathseg.segment import Segment
from pathseg.svgpath import svg_number

logger = logging.getLogger(__name__)


class PathContext(Protocol):
    """
    The subset of the 2D canvas path API that segments draw into.

    write_to_context() of a segment assumes the current point is already at the
    start of the segment. arc() and ellipse() connect the current point with the
    start of the arc by a straight line, like the canvas does.
    """

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None: ...

    def bezier_curve_to(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        cp1x: float,
        cp1y: float,
        cp2x: float,
        cp2y: float,
        x: float,
        y: float,
    ) -> None: ...

    def arc(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        x: float,
        y: float,
        radius: float,
        start_angle: float,
        end_angle: float,
        anticlockwise: bool,
    ) -> None: ...

    def ellipse(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        x: float,
        y: float,
        radius_x: float,
        radius_y: float,
        rotation: float,
        start_angle: float,
        end_angle: float,
        anticlockwise: bool,
    ) -> None: ...


###############################################################################
# SvgPathContext
###############################################################################
class SvgPathContext:
    """
    PathContext collecting the drawn commands in an svgwrite path element.

    Coordinates are written with svg_number(), arcs as SVG "A" commands.
    """

    def __init__(self, **extra):
        """
        Args:
            **extra: SVG attributes of the path element (e.g. stroke="black", fill="none")
        """
        self.path: svgwrite.path.Path = svgwrite.path.Path(**extra)
        self._current_point: Optional[Vec2] = None

    @property
    def current_point(self) -> Optional[Vec2]:
        """Optional[Vec2]: End of the last command, None before the first move_to."""
        return self._current_point

    @property
    def commands(self) -> str:
        """str: The path data collected so far."""
        return strlist(self.path.commands, " ")

    def _push(self, command: str, *points: Vec2) -> None:
        values = []
        for point in points:
            values.append(svg_number(point.x))
            values.append(svg_number(point.y))
        self.path.push(command, *values)
        self._current_point = points[-1]

    def _connect_to(self, point: Vec2) -> None:
        if self._current_point is None:
            self._push("M", point)
        elif self._current_point != point:
            self._push("L", point)

    def move_to(self, x: float, y: float) -> None:
        self._push("M", Vec2(x, y))

    def line_to(self, x: float, y: float) -> None:
        self._push("L", Vec2(x, y))

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None:
        self._push("Q", Vec2(cpx, cpy), Vec2(x, y))

    def bezier_curve_to(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        cp1x: float,
        cp1y: float,
        cp2x: float,
        cp2y: float,
        x: float,
        y: float,
    ) -> None:
        self._push("C", Vec2(cp1x, cp1y), Vec2(cp2x, cp2y), Vec2(x, y))

    def _push_arc_segment(self, segment: Union[Arc, EllipticalArc]) -> None:
        self._connect_to(segment.start)
        self.path.push(segment.get_svg_path_fragment())
        self._current_point = segment.end

    def arc(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        x: float,
        y: float,
        radius: float,
        start_angle: float,
        end_angle: float,
        anticlockwise: bool,
    ) -> None:
        self._push_arc_segment(Arc(Vec2(x, y), radius, start_angle, end_angle, anticlockwise))

    def ellipse(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        x: float,
        y: float,
        radius_x: float,
        radius_y: float,
        rotation: float,
        start_angle: float,
        end_angle: float,
        anticlockwise: bool,
    ) -> None:
        self._push_arc_segment(
            EllipticalArc(Vec2(x, y), radius_x, radius_y, rotation, start_angle, end_angle, anticlockwise)
        )

    def close_path(self) -> None:
        """Close the current subpath."""
        self.path.push("Z")

    def add_segments(self, segments: Iterable[Segment], closed: bool = False) -> SvgPathContext:
        """
        Draw _segments_ in order, starting a new subpath wherever one does not
        start at the end of its predecessor.

        Args:
            segments (Iterable[Segment]): the segments to draw
            closed (bool, optional): True to close the path at the end. Defaults to False.

        Returns:
            SvgPathContext: self, for chaining
        """
        for segment in segments:
            if self._current_point is None or self._current_point != segment.start:
                self.move_to(segment.start.x, segment.start.y)
            segment.write_to_context(self)
            self._current_point = segment.end
        if closed:
            self.close_path()
        return self

    @classmethod
    def from_segments(cls, segments: Iterable[Segment], closed: bool = False, **extra) -> SvgPathContext:
        """A new context with _segments_ already drawn, see add_segments()."""
        return cls(**extra).add_segments(segments, closed)


###############################################################################
# SvgSegmentPage
###############################################################################
class SvgSegmentPage:
    """
    An SVG document with a viewbox around the drawn segments.

    Contains a main group for the segments and a debug group, hidden and only
    saved on request, e.g. for control polygons or bounding boxes.
    """

    drawing: svgwrite.Drawing
    main_layer: svgwrite.container.Group
    debug_layer: svgwrite.container.Group

    def __init__(self, bounds: Bounds, margin: float = 1.0, size: Optional[tuple] = None):
        """
        Args:
            bounds (Bounds): area that has to be visible
            margin (float, optional): extra space around _bounds_. Defaults to 1.0.
            size (tuple, optional): SVG width and height, e.g. ("100mm", "50mm"). Defaults to the viewbox size.
        """
        if bounds.is_empty():
            raise ValueError("SvgSegmentPage needs non-empty bounds")
        view = bounds.dilated(margin)
        view_box = " ".join(svg_number(value) for value in (view.xmin, view.ymin, view.width, view.height))
        self.drawing = svgwrite.Drawing(
            size=size if size is not None else (svg_number(view.width), svg_number(view.height)),
            viewBox=view_box,
            profile="full",
        )
        self.main_layer = self.drawing.g(id="main")
        self.debug_layer = self.drawing.g(id="debug", display="none")

    def add_segments(
        self,
        segments: List[Segment],
        closed: bool = False,
        add_to_debug_layer: bool = False,
        **extra,
    ) -> svgwrite.path.Path:
        """
        Add _segments_ as one path element.

        Args:
            segments (List[Segment]): the segments to draw
            closed (bool, optional): True to close the path. Defaults to False.
            add_to_debug_layer (bool, optional): True to add to the debug layer. Defaults to False.
            **extra: SVG attributes of the path element

        Returns:
            svgwrite.path.Path: the added element
        """
        extra.setdefault("fill", "none")
        extra.setdefault("stroke", "black")
        path = SvgPathContext.from_segments(segments, closed, **extra).path
        logger.debug("Adding path with %d segments", len(segments))
        if add_to_debug_layer:
            return self.debug_layer.add(path)
        return self.main_layer.add(path)

    def to_string(self, include_debug_layer: bool = False, pretty: bool = False, indent: int = 2) -> str:
        """The SVG document as string."""
        drawing = svgwrite.Drawing(
            size=(self.drawing["width"], self.drawing["height"]), viewBox=self.drawing["viewBox"], profile="full"
        )
        drawing.add(self.main_layer)
        if include_debug_layer:
            drawing.add(self.debug_layer)
        svg_buffer = io.StringIO()
        drawing.write(svg_buffer, pretty=pretty, indent=indent)
        return svg_buffer.getvalue()

    def save_as(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        filename: str,
        include_debug_layer: bool = False,
        pretty: bool = False,
        indent: int = 2,
        compressed: bool = False,
    ) -> None:
        """Save as SVG file

        Args:
            filename (str): path and filename
            include_debug_layer (bool, optional): True if file should contain debug_layer. Defaults to False.
            pretty (bool, optional): True for easy readable output. Defaults to False.
            indent (int, optional): Indention if pretty is enabled. Defaults to 2 spaces.
            compressed (bool, optional): Save as compressed svgz-file. Defaults to False.
        """
        output_data = self.to_string(include_debug_layer, pretty, indent).encode("utf-8")
        if compressed:
            output_data = gzip.compress(output_data)
        with open(filename, "wb") as svg_file:
            svg_file.write(output_data)
