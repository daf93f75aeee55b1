"""
UI package: application signals, application setup and report widgets.

This package provides:

- :mod:`PocketLedger.ui.actions` – Application-wide Qt signals.
- :mod:`PocketLedger.ui.app` – QApplication subclass.
- :mod:`PocketLedger.ui.piechart` – Pie chart widget rendering :class:`PocketLedger.data.chart.ChartSegment` items.
- :mod:`PocketLedger.ui.main` – Monthly report widget composing summary labels, chart and legend.
"""
