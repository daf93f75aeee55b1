"""
Core package for PocketLedger providing local storage and the ledger services.

This package includes:

- :mod:`PocketLedger.core.storage` – Key-value store capability with in-memory and SQLite implementations.
- :mod:`PocketLedger.core.auth` – Local user registration, sign-in and profile management.
- :mod:`PocketLedger.core.categories` – Default and user-defined expense categories.
- :mod:`PocketLedger.core.transactions` – Income and expense records and monthly filtering.
- :mod:`PocketLedger.core.services` – Wiring of the services to a single store.
"""
