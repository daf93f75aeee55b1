"""Application-wide Qt signals for PocketLedger.

This module provides:
    - Signals: custom Qt signals for configuration changes, ledger data changes,
      authentication state and UI actions (showLogs, error).
"""
import logging

from PySide6 import QtCore


class Signals(QtCore.QObject):
    """Centralized Qt signals for application config, data, and UI events."""
    configSectionChanged = QtCore.Signal(str)
    metadataChanged = QtCore.Signal(str, object)

    authStateChanged = QtCore.Signal(object)  # user dict or None
    transactionsChanged = QtCore.Signal(str)  # user id
    categoriesChanged = QtCore.Signal(str)  # user id

    showLogs = QtCore.Signal()

    error = QtCore.Signal(str)

    def __init__(self):
        super().__init__()
        self._connect_signals()

    def _connect_signals(self):
        @QtCore.Slot(str, object)
        def metadata_changed(key: str, value: object) -> None:
            logging.debug(f'Metadata "{key}" changed to {value!r}')

        self.metadataChanged.connect(metadata_changed)


signals = Signals()
