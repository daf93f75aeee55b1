"""
PocketLedger: local personal expense tracker with monthly reports and category pie charts.

This package provides:

- :mod:`PocketLedger.core` – Key-value storage and the authentication, category and transaction services.
- :mod:`PocketLedger.data` – Monthly aggregation (:func:`PocketLedger.data.data.compute_monthly_summary`) and pie chart geometry (:func:`PocketLedger.data.chart.compute_chart_segments`).
- :mod:`PocketLedger.ui` – A small PySide6 UI rendering monthly summaries and charts.
- :mod:`PocketLedger.settings` – Settings management, schema validation and locale formatting.
- :mod:`PocketLedger.log` – Application logging.

Use :func:`PocketLedger.exec_` to launch the application.
"""
import sys

from PySide6 import QtCore

# Fail on Python < 3.11
if not (sys.version_info.major == 3 and sys.version_info.minor >= 11):
    raise RuntimeError('PocketLedger requires Python 3.11 or higher.')

__version__ = '0.1.0'
__author__ = 'Gergely Wootsch'
__license__ = 'GPL-3.0'
__copyright__ = 'Copyright (C) 2025 Gergely Wootsch'
__description__ = 'PocketLedger: local personal expense tracker with monthly reports and category charts.'

from .log import log

log.setup_logging()


def exec_() -> None:
    """Launch the PocketLedger GUI application and enter its event loop.

    Opens the configured local store, shows the monthly report of the signed-in user
    and starts the Qt event loop.
    """

    from .core import services
    from .settings import lib
    from .ui import app
    from .ui import main

    application = app.Application(sys.argv)

    bundle = services.from_settings(lib.get_settings())
    widget = main.show(bundle)

    # Load the saved month once the event loop is running
    QtCore.QTimer.singleShot(100, lambda: widget.load_month(main.initial_month()))

    sys.exit(application.exec())


if __name__ == '__main__':
    exec_()
