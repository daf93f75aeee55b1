"""
Income and expense records.

Transactions are kept as a JSON list under
:data:`~PocketLedger.core.storage.TRANSACTIONS_KEY`. Dates are stored as ISO 8601
strings and returned as :class:`datetime.datetime` objects, newest first.
"""

import datetime
import enum
import logging
from typing import Any, Dict, Iterable, List

from dateutil import parser as dateparser

from . import storage
from ..data import data
from ..data.coerce import coerce_amount
from ..status import status


class NegativeAmountPolicy(enum.StrEnum):
    """How negative amounts are treated when a transaction is written."""
    Allow = 'allow'
    Reject = 'reject'


def _serialize_date(value: Any) -> Any:
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    return value


def parse_date(value: Any) -> datetime.datetime:
    """Parse a stored date to a naive local datetime.

    Missing or unparsable dates are treated as now.
    """
    if isinstance(value, datetime.datetime):
        dt = value
    elif isinstance(value, datetime.date):
        dt = datetime.datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value:
        try:
            dt = dateparser.isoparse(value)
        except (ValueError, OverflowError):
            logging.warning(f'Unparsable transaction date "{value}". Using now.')
            return datetime.datetime.now()
    else:
        return datetime.datetime.now()

    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


class TransactionService:
    """Reads and edits transactions.

    Args:
        store: Key-value store holding the transactions.
        negative_policy (NegativeAmountPolicy): Whether negative amounts may be written.
    """

    def __init__(self, store: storage.KeyValueStore,
                 negative_policy: NegativeAmountPolicy = NegativeAmountPolicy.Allow) -> None:
        self.store = store
        self.negative_policy = NegativeAmountPolicy(negative_policy)

    def _transactions(self) -> List[Dict[str, Any]]:
        return storage.load_json(self.store, storage.TRANSACTIONS_KEY, [])

    def _save_transactions(self, transactions: List[Dict[str, Any]]) -> None:
        storage.dump_json(self.store, storage.TRANSACTIONS_KEY, transactions)

    @staticmethod
    def _notify(user_ids: Iterable[str]) -> None:
        from ..ui.actions import signals
        for user_id in sorted(set(user_ids)):
            signals.transactionsChanged.emit(user_id)

    def _validate(self, values: Dict[str, Any]) -> None:
        if 'type' in values and values['type'] not in tuple(data.TransactionType):
            raise status.TransactionInvalidException(
                f'Transaction type must be one of {[t.value for t in data.TransactionType]}, '
                f'got "{values["type"]}".'
            )
        if (
                'amount' in values
                and self.negative_policy == NegativeAmountPolicy.Reject
                and coerce_amount(values['amount']) < 0
        ):
            raise status.TransactionInvalidException(f'Negative amount "{values["amount"]}" is not allowed.')

    def add_transaction(self, user_id: str, values: Dict[str, Any]) -> str:
        """Add a transaction for a user.

        Raises:
            status.TransactionInvalidException: If the type is unknown, or the amount is
                negative under the reject policy.

        Returns:
            str: The new transaction id.
        """
        if 'type' not in values:
            raise status.TransactionInvalidException('Transaction type is missing.')
        self._validate(values)

        timestamp = storage.now_str()
        transaction = {
            'id': storage.make_id(),
            **values,
            'userId': user_id,
            'date': _serialize_date(values.get('date')),
            'createdAt': timestamp,
            'updatedAt': timestamp,
        }

        transactions = self._transactions()
        transactions.append(transaction)
        self._save_transactions(transactions)

        logging.debug(f'Added {transaction["type"]} {transaction["id"]} for user {user_id}')
        self._notify([user_id])
        return transaction['id']

    def update_transaction(self, transaction_id: str, values: Dict[str, Any]) -> None:
        """Merge `values` into a transaction. The stored date is kept unless a new one is given.

        Raises:
            status.TransactionNotFoundException: If the transaction does not exist.
            status.TransactionInvalidException: If the new values are invalid.
        """
        self._validate(values)

        transactions = self._transactions()
        for idx, transaction in enumerate(transactions):
            if transaction.get('id') != transaction_id:
                continue
            transactions[idx] = {
                **transaction,
                **values,
                'id': transaction_id,
                'date': _serialize_date(values.get('date')) or transaction.get('date'),
                'updatedAt': storage.now_str(),
            }
            self._save_transactions(transactions)
            self._notify([transactions[idx].get('userId', '')])
            return
        raise status.TransactionNotFoundException(transaction_id)

    def delete_transaction(self, transaction_id: str) -> None:
        transactions = self._transactions()
        remaining = [t for t in transactions if t.get('id') != transaction_id]
        if len(remaining) == len(transactions):
            logging.debug(f'Transaction {transaction_id} not found, nothing to delete')
        self._save_transactions(remaining)
        self._notify(t.get('userId', '') for t in transactions if t.get('id') == transaction_id)

    @staticmethod
    def _prepare(transactions: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        prepared = [{**t, 'date': parse_date(t.get('date'))} for t in transactions]
        return sorted(prepared, key=lambda t: t['date'], reverse=True)

    def get_user_transactions(self, user_id: str) -> List[Dict[str, Any]]:
        """Return a user's transactions, newest first."""
        return self._prepare(t for t in self._transactions() if t.get('userId') == user_id)

    def get_monthly_transactions(self, user_id: str, month: datetime.date) -> List[Dict[str, Any]]:
        """Return a user's transactions in the calendar month of `month`, newest first."""
        return [
            t for t in self.get_user_transactions(user_id)
            if t['date'].year == month.year and t['date'].month == month.month
        ]

    @staticmethod
    def compute_monthly_summary(transactions: Iterable[Any]) -> data.MonthlySummary:
        return data.compute_monthly_summary(transactions)
