# tests/test_report.py
"""
Tests for the pandas based monthly overview and trend computations in PocketLedger.data.data.

Run with:
    python -m unittest tests.test_report
"""
import unittest

import pandas as pd

from PocketLedger.data import data

TRANSACTIONS = [
    {'id': '1', 'type': 'income', 'amount': 1000, 'date': '2024-01-05T10:00:00'},
    {'id': '2', 'type': 'expense', 'amount': '300', 'category': 'food', 'date': '2024-01-10T10:00:00'},
    {'id': '3', 'type': 'expense', 'amount': 120.5, 'category': 'bills', 'date': '2024-02-01T10:00:00'},
    {'id': '4', 'type': 'expense', 'amount': 80, 'category': 'food', 'date': '2024-03-15T10:00:00'},
    {'id': '5', 'type': 'expense', 'amount': 20, 'category': 'food', 'date': '2024-03-20T10:00:00'},
    {'id': '6', 'type': 'expense', 'amount': 5, 'category': 'food', 'date': 'not a date'},
]


class ToFrameTests(unittest.TestCase):

    def test_columns_and_order(self):
        df = data.to_frame(TRANSACTIONS)
        self.assertEqual(list(df.columns), data.TRANSACTION_DATA_COLUMNS)
        self.assertTrue(df['date'].is_monotonic_increasing)
        self.assertEqual(df['amount'].dtype, float)

    def test_invalid_dates_are_dropped(self):
        df = data.to_frame(TRANSACTIONS)
        self.assertEqual(len(df), len(TRANSACTIONS) - 1)
        self.assertNotIn('6', df['id'].tolist())

    def test_empty(self):
        df = data.to_frame([])
        self.assertTrue(df.empty)
        self.assertEqual(list(df.columns), data.TRANSACTION_DATA_COLUMNS)


class MonthlyOverviewTests(unittest.TestCase):

    def test_overview_window(self):
        df = data.get_monthly_overview(TRANSACTIONS, '2024-01', span=4)

        self.assertEqual(list(df.columns), data.OVERVIEW_DATA_COLUMNS)
        self.assertEqual(len(df), 4)
        self.assertEqual(df['month'].iloc[0], pd.Timestamp('2024-01-01'))
        self.assertEqual(df['income'].tolist(), [1000.0, 0.0, 0.0, 0.0])
        self.assertEqual(df['expense'].tolist(), [300.0, 120.5, 100.0, 0.0])
        self.assertEqual(df['balance'].tolist(), [700.0, -120.5, -100.0, 0.0])

    def test_overview_matches_monthly_summary(self):
        january = [t for t in TRANSACTIONS if t['date'].startswith('2024-01')]
        summary = data.compute_monthly_summary(january)
        row = data.get_monthly_overview(TRANSACTIONS, '2024-01').iloc[0]
        self.assertEqual(row['income'], summary.total_income)
        self.assertEqual(row['expense'], summary.total_expense)
        self.assertEqual(row['balance'], summary.balance)


class TrendTests(unittest.TestCase):

    def test_trend_window(self):
        df = data.get_trends(TRANSACTIONS, '2024-03', negative_span=3)

        self.assertEqual(list(df.columns), data.TREND_DATA_COLUMNS)
        self.assertEqual(len(df), 3)
        self.assertEqual(df['monthly_total'].tolist(), [300.0, 120.5, 100.0])

    def test_trend_defaults_to_latest_month(self):
        df = data.get_trends(TRANSACTIONS, negative_span=2)
        self.assertEqual(df['month'].iloc[-1], pd.Timestamp('2024-03-01'))

    def test_trend_single_category(self):
        df = data.get_trends(TRANSACTIONS, '2024-03', negative_span=3, category='bills')
        self.assertEqual(df['monthly_total'].tolist(), [0.0, 120.5, 0.0])

    def test_short_window_is_not_smoothed(self):
        df = data.get_trends(TRANSACTIONS, '2024-03', negative_span=2)
        self.assertEqual(df['loess'].tolist(), df['monthly_total'].tolist())

    def test_no_expenses(self):
        df = data.get_trends([])
        self.assertTrue(df.empty)
        self.assertEqual(list(df.columns), data.TREND_DATA_COLUMNS)
