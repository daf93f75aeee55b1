"""Pie chart widget drawing the expense share of each category."""
import logging
from typing import Any, Iterable, List, Optional, Tuple

from PySide6 import QtCore, QtGui, QtWidgets

from ..data import chart

PLACEHOLDER_TEXT = 'No data'


def painter_path(segment: chart.ChartSegment, center: Tuple[float, float], radius: float) -> QtGui.QPainterPath:
    """Build the Qt wedge path of a segment.

    Segment angles are measured clockwise on screen, Qt's arc angles counter-clockwise,
    so both the start and the sweep are negated.
    """
    cx, cy = center
    rect = QtCore.QRectF(cx - radius, cy - radius, radius * 2.0, radius * 2.0)

    path = QtGui.QPainterPath()
    path.moveTo(cx, cy)
    path.lineTo(*segment.start_point)
    path.arcTo(rect, -segment.start_angle, -segment.sweep)
    path.closeSubpath()
    return path


class PieChartView(QtWidgets.QWidget):
    """Draws chart items as contiguous wedges starting at twelve o'clock.

    Segments are recomputed whenever the items or the widget size change, so
    the pie always fits the widget minus the configured margin.
    """

    def __init__(self, size: int = chart.CHART_SIZE, margin: int = chart.CHART_MARGIN, parent=None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('PocketLedgerPieChartView')

        self._items: List[Any] = []
        self._segments: List[chart.ChartSegment] = []
        self._margin = margin

        self.setMinimumSize(size, size)
        self.setSizePolicy(QtWidgets.QSizePolicy.Expanding, QtWidgets.QSizePolicy.Expanding)

    @property
    def segments(self) -> List[chart.ChartSegment]:
        return self._segments

    def geometry_for_rect(self, rect: QtCore.QRectF) -> Tuple[Tuple[float, float], float]:
        """Return the center and radius of the pie for a drawing rectangle."""
        center = (rect.center().x(), rect.center().y())
        radius = max(min(rect.width(), rect.height()) / 2.0 - self._margin, 0.0)
        return center, radius

    def set_items(self, items: Iterable[Any]) -> None:
        """Set the chart items and recompute the segments."""
        self._items = list(items)
        self._recompute()

    def _recompute(self) -> None:
        center, radius = self.geometry_for_rect(QtCore.QRectF(self.rect()))
        self._segments = chart.compute_chart_segments(self._items, center=center, radius=radius)
        logging.debug(f'PieChartView: {len(self._segments)} segments')
        self.update()

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:
        super().resizeEvent(event)
        self._recompute()

    def segment_at(self, pos: QtCore.QPointF) -> Optional[chart.ChartSegment]:
        """Return the segment under `pos`, if any."""
        center, radius = self.geometry_for_rect(QtCore.QRectF(self.rect()))
        for segment in self._segments:
            if painter_path(segment, center, radius).contains(pos):
                return segment
        return None

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        painter = QtGui.QPainter(self)
        painter.setRenderHint(QtGui.QPainter.Antialiasing, True)

        if chart.is_empty_chart(self._segments):
            painter.setPen(self.palette().color(QtGui.QPalette.PlaceholderText))
            painter.drawText(self.rect(), QtCore.Qt.AlignCenter, PLACEHOLDER_TEXT)
            painter.end()
            return

        center, radius = self.geometry_for_rect(QtCore.QRectF(self.rect()))
        pen = QtGui.QPen(self.palette().color(QtGui.QPalette.Window))
        pen.setWidthF(1.0)
        painter.setPen(pen)

        for segment in self._segments:
            color = QtGui.QColor(segment.color)
            if not color.isValid():
                color = self.palette().color(QtGui.QPalette.Mid)
            painter.setBrush(color)
            painter.drawPath(painter_path(segment, center, radius))

        painter.end()
