"""Wiring of the ledger services to a single key-value store."""
import logging
from dataclasses import dataclass
from typing import Optional

from . import storage
from .auth import AuthService
from .categories import CategoryService
from .transactions import NegativeAmountPolicy, TransactionService


@dataclass(slots=True)
class Services:
    """The services of one ledger, sharing one store."""
    store: storage.KeyValueStore
    auth: AuthService
    categories: CategoryService
    transactions: TransactionService


def create(store: storage.KeyValueStore,
           negative_policy: NegativeAmountPolicy = NegativeAmountPolicy.Allow,
           min_password_length: int = 6) -> Services:
    """Build the services around `store`."""
    return Services(
        store=store,
        auth=AuthService(store, min_password_length=min_password_length),
        categories=CategoryService(store),
        transactions=TransactionService(store, negative_policy=negative_policy),
    )


def from_settings(settings, store: Optional[storage.KeyValueStore] = None) -> Services:
    """Build the services using the validation settings.

    Args:
        settings (SettingsAPI): Loaded application settings.
        store: Store to use. Defaults to a :class:`~PocketLedger.core.storage.SQLiteStore`
            at the configured path.
    """
    if store is None:
        logging.debug(f'Opening local store at {settings.db_path}')
        store = storage.SQLiteStore(settings.db_path)

    validation = settings.get_section('validation')
    return create(
        store,
        negative_policy=NegativeAmountPolicy(validation['negative_amounts']),
        min_password_length=validation['min_password_length'],
    )
