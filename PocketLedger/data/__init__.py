"""
PocketLedger data package: monthly aggregation and chart geometry.

This package provides:

- :mod:`PocketLedger.data.coerce` – Shared amount coercion used by every computation.
- :mod:`PocketLedger.data.data` – Monthly summaries (:func:`PocketLedger.data.data.compute_monthly_summary`), chart item assembly and pandas-based monthly overviews and trends.
- :mod:`PocketLedger.data.chart` – Pie chart segment angles and wedge paths (:func:`PocketLedger.data.chart.compute_chart_segments`).
"""
