"""
Logging subsystem for application logging.

Modules:

- :mod:`PocketLedger.log.log` – Root logger setup, in-memory log handler and Qt message bridge.
"""
