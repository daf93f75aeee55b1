"""Pie chart segment geometry.

Turns an ordered list of ``(name, amount, color)`` items into contiguous pie segments.
Angles are in degrees in the screen convention used by SVG: 0° points right and angles
grow clockwise, so the first segment starts at -90° (12 o'clock).

Each segment also carries a closed wedge path::

    M cx cy L x1 y1 A r r 0 <large-arc> 1 x2 y2 Z

An empty item list and a zero total both produce the empty-chart state (an empty list),
see :func:`is_empty_chart`.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from .coerce import coerce_amount, get_field

#: Canvas edge of the default chart, in pixels
CHART_SIZE: int = 280
#: Gap between the canvas edge and the circle, in pixels
CHART_MARGIN: int = 20

DEFAULT_CENTER: Tuple[float, float] = (CHART_SIZE / 2, CHART_SIZE / 2)
DEFAULT_RADIUS: float = (CHART_SIZE - CHART_MARGIN * 2) / 2

#: Angle of the first segment's leading edge
START_ANGLE: float = -90.0
FULL_CIRCLE: float = 360.0


@dataclass(slots=True)
class ChartItem:
    """One input value of the pie chart."""
    name: str
    amount: Any
    color: str
    category: Optional[str] = None  # raw category key


@dataclass(slots=True)
class ChartSegment:
    """A rendered pie segment."""
    name: str
    color: str
    amount: float
    percentage: str
    start_angle: float
    end_angle: float
    path: str
    large_arc: bool
    start_point: Tuple[float, float]
    end_point: Tuple[float, float]
    category: Optional[str] = None

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle


def is_empty_chart(segments: List[ChartSegment]) -> bool:
    """Return True if `segments` is the empty-chart state."""
    return not segments


def to_radians(degrees: float) -> float:
    return degrees * math.pi / 180


def arc_point(center: Tuple[float, float], radius: float, degrees: float) -> Tuple[float, float]:
    """Return the point at `degrees` on the circle of `radius` around `center`."""
    rad = to_radians(degrees)
    return (
        center[0] + radius * math.cos(rad),
        center[1] + radius * math.sin(rad),
    )


def format_number(value: float) -> str:
    """Format a path coordinate with the shortest round-trip text, without a trailing ``.0``."""
    if value == 0:
        return '0'
    text = repr(float(value))
    if text.endswith('.0'):
        return text[:-2]
    return text


def arc_path(center: Tuple[float, float], radius: float, start_angle: float, end_angle: float) -> str:
    """Build the closed wedge path for the given angle range.

    Args:
        center: Circle center ``(cx, cy)``.
        radius: Circle radius.
        start_angle: Leading edge in degrees.
        end_angle: Trailing edge in degrees.

    Returns:
        str: SVG path data.
    """
    x1, y1 = arc_point(center, radius, start_angle)
    x2, y2 = arc_point(center, radius, end_angle)
    large_arc = 1 if end_angle - start_angle > 180 else 0

    cx, cy = (format_number(v) for v in center)
    r = format_number(radius)
    return (
        f'M {cx} {cy} '
        f'L {format_number(x1)} {format_number(y1)} '
        f'A {r} {r} 0 {large_arc} 1 {format_number(x2)} {format_number(y2)} Z'
    )


def compute_chart_segments(
        items: Iterable[Any],
        center: Tuple[float, float] = DEFAULT_CENTER,
        radius: float = DEFAULT_RADIUS,
) -> List[ChartSegment]:
    """Compute contiguous pie segments for `items` in the order given.

    Items may be :class:`ChartItem` instances or mappings with ``name``, ``amount`` and
    ``color`` keys. Amounts are read with :func:`coerce_amount`.

    Args:
        items: Ordered chart items.
        center: Circle center used for the wedge paths.
        radius: Circle radius used for the wedge paths.

    Returns:
        list[ChartSegment]: One segment per item, or an empty list when there are no
            items or the amounts add up to zero.
    """
    items = list(items)
    if not items:
        return []

    amounts = [coerce_amount(get_field(item, 'amount')) for item in items]
    total = sum(amounts)
    if total == 0:
        logging.debug('Chart total is zero, nothing to draw.')
        return []

    cursor = START_ANGLE
    segments: List[ChartSegment] = []
    for item, amount in zip(items, amounts):
        fraction = amount / total
        start_angle = cursor
        end_angle = cursor + fraction * FULL_CIRCLE
        cursor = end_angle

        segments.append(
            ChartSegment(
                name=get_field(item, 'name'),
                color=get_field(item, 'color'),
                amount=amount,
                percentage=f'{fraction * 100:.1f}',
                start_angle=start_angle,
                end_angle=end_angle,
                path=arc_path(center, radius, start_angle, end_angle),
                large_arc=end_angle - start_angle > 180,
                start_point=arc_point(center, radius, start_angle),
                end_point=arc_point(center, radius, end_angle),
                category=get_field(item, 'category'),
            )
        )

    return segments
