"""
Smoke tests for UI components of PocketLedger.
Verifies each UI class can be instantiated offscreen and renders the monthly report.
"""
import datetime

from PySide6 import QtCore, QtGui

from PocketLedger.data import chart
from PocketLedger.settings import lib
from tests.base import BaseTestCase


class TestPieChartView(BaseTestCase):

    def test_painter_path_matches_wedge(self):
        from PocketLedger.ui.piechart import painter_path
        segments = chart.compute_chart_segments([
            {'name': 'A', 'amount': 1, 'color': '#FF0000'},
            {'name': 'B', 'amount': 3, 'color': '#00FF00'},
        ])
        center, radius = chart.DEFAULT_CENTER, chart.DEFAULT_RADIUS

        first = painter_path(segments[0], center, radius)
        # the quarter wedge spans from twelve to three o'clock
        self.assertTrue(first.contains(QtCore.QPointF(center[0] + 30, center[1] - 30)))
        self.assertFalse(first.contains(QtCore.QPointF(center[0] - 30, center[1] + 30)))

        second = painter_path(segments[1], center, radius)
        self.assertTrue(second.contains(QtCore.QPointF(center[0] - 30, center[1] + 30)))

    def test_view_fits_widget_and_paints(self):
        from PocketLedger.ui.piechart import PieChartView
        view = PieChartView(size=200, margin=10)
        view.resize(200, 200)
        view.set_items([
            chart.ChartItem('Food', 30, '#FF6B6B', 'food'),
            chart.ChartItem('Bills', 10, '#F38181', 'bills'),
        ])

        self.assertEqual(len(view.segments), 2)
        self.assertEqual(view.segments[0].percentage, '75.0')
        self.assertIsNotNone(view.segment_at(QtCore.QPointF(130, 100)))
        self.assertIsNone(view.segment_at(QtCore.QPointF(1, 1)))

        image = QtGui.QImage(200, 200, QtGui.QImage.Format_ARGB32)
        view.render(image)

    def test_empty_view_paints_placeholder(self):
        from PocketLedger.ui.piechart import PieChartView
        view = PieChartView()
        view.set_items([{'name': 'A', 'amount': 0, 'color': '#111111'}])
        self.assertTrue(chart.is_empty_chart(view.segments))

        image = QtGui.QImage(chart.CHART_SIZE, chart.CHART_SIZE, QtGui.QImage.Format_ARGB32)
        view.render(image)


class TestMainWidget(BaseTestCase):

    def setUp(self) -> None:
        super().setUp()
        lib.settings['locale'] = 'en_US'
        from PocketLedger.ui.main import MainWidget
        self.widget = MainWidget(self.services)

    def tearDown(self) -> None:
        self.widget.close()
        self.widget.deleteLater()
        super().tearDown()

    def test_signed_out_shows_empty_report(self):
        self.widget.load_month(datetime.date(2024, 3, 1))
        self.assertEqual(self.widget.month_label.text(), '2024-03')
        self.assertEqual(self.widget.income_label.text(), '$0.00')
        self.assertTrue(chart.is_empty_chart(self.widget.chart_view.segments))
        self.assertEqual(self.widget.legend_view.topLevelItemCount(), 0)

    def test_monthly_report(self):
        user = self.services.auth.register('a@example.com', 'secret1', 'Ann')
        tx = self.services.transactions
        tx.add_transaction(user['id'], {'type': 'income', 'amount': 1000, 'date': '2024-03-02T10:00:00'})
        tx.add_transaction(user['id'], {'type': 'expense', 'amount': '300', 'category': 'food',
                                        'date': '2024-03-03T10:00:00'})
        tx.add_transaction(user['id'], {'type': 'expense', 'amount': 100, 'category': 'bills',
                                        'date': '2024-03-04T10:00:00'})
        tx.add_transaction(user['id'], {'type': 'expense', 'amount': 999, 'category': 'food',
                                        'date': '2024-04-01T10:00:00'})

        self.widget.load_month(datetime.date(2024, 3, 1))

        self.assertEqual(self.widget.income_label.text(), '$1,000.00')
        self.assertEqual(self.widget.expense_label.text(), '$400.00')
        self.assertEqual(self.widget.balance_label.text(), '$600.00')
        legend = self.widget.legend_view
        self.assertEqual(legend.topLevelItemCount(), 2)
        rows = {
            legend.topLevelItem(i).text(0): legend.topLevelItem(i) for i in range(legend.topLevelItemCount())
        }
        self.assertEqual(set(rows), {'Food', 'Bills'})
        self.assertEqual(rows['Food'].text(1), '75.0%')
        self.assertEqual(rows['Bills'].text(1), '25.0%')

        # categories follow the order of the newest-first transactions
        self.assertEqual(legend.topLevelItem(0).text(0), 'Bills')

    def test_reloads_when_transactions_change(self):
        user = self.services.auth.register('a@example.com', 'secret1', 'Ann')
        self.widget.load_month(datetime.date(2024, 3, 1))
        self.assertEqual(self.widget.expense_label.text(), '$0.00')

        self.services.transactions.add_transaction(
            user['id'], {'type': 'expense', 'amount': 25, 'category': 'food', 'date': '2024-03-10T10:00:00'}
        )
        self.assertEqual(self.widget.expense_label.text(), '$25.00')

    def test_month_navigation_saves_yearmonth(self):
        self.widget.load_month(datetime.date(2024, 1, 1))

        self.widget.next_button.click()
        self.assertEqual(self.widget.month, datetime.date(2024, 2, 1))
        self.assertEqual(self.widget.month_label.text(), '2024-02')
        self.assertEqual(lib.settings['yearmonth'], '2024-02')

        self.widget.previous_month()
        self.widget.previous_month()
        self.assertEqual(self.widget.month_label.text(), '2023-12')
        self.assertEqual(lib.settings['yearmonth'], '2023-12')

        # persisted
        self.assertEqual(lib.SettingsAPI(app_data_dir=self.app_data_dir)['yearmonth'], '2023-12')

    def test_month_navigation_loads_month_transactions(self):
        user = self.services.auth.register('a@example.com', 'secret1', 'Ann')
        self.services.transactions.add_transaction(
            user['id'], {'type': 'expense', 'amount': 40, 'category': 'food', 'date': '2024-02-10T10:00:00'}
        )
        self.widget.load_month(datetime.date(2024, 3, 1))
        self.assertEqual(self.widget.expense_label.text(), '$0.00')

        self.widget.previous_button.click()
        self.assertEqual(self.widget.expense_label.text(), '$40.00')

    def test_initial_month_reads_saved_yearmonth(self):
        from PocketLedger.ui.main import initial_month
        self.assertEqual(initial_month(), datetime.date.today().replace(day=1))

        lib.settings['yearmonth'] = '2023-07'
        self.assertEqual(initial_month(), datetime.date(2023, 7, 1))

        lib.settings['yearmonth'] = 'July'
        self.assertEqual(initial_month(), datetime.date.today().replace(day=1))

    def test_overview_lists_span_months(self):
        user = self.services.auth.register('a@example.com', 'secret1', 'Ann')
        tx = self.services.transactions
        tx.add_transaction(user['id'], {'type': 'income', 'amount': 500, 'date': '2024-01-05T10:00:00'})
        tx.add_transaction(user['id'], {'type': 'expense', 'amount': 120, 'category': 'food',
                                        'date': '2024-01-06T10:00:00'})
        tx.add_transaction(user['id'], {'type': 'expense', 'amount': 80, 'category': 'bills',
                                        'date': '2024-03-06T10:00:00'})
        tx.add_transaction(user['id'], {'type': 'expense', 'amount': 999, 'category': 'food',
                                        'date': '2024-04-06T10:00:00'})

        self.widget.load_month(datetime.date(2024, 3, 1))
        overview = self.widget.overview_view
        self.assertEqual(overview.topLevelItemCount(), 1)
        self.assertEqual(overview.topLevelItem(0).text(0), '2024-03')

        lib.settings['span'] = 3
        self.assertEqual(overview.topLevelItemCount(), 3)
        self.assertEqual([overview.topLevelItem(i).text(0) for i in range(3)], ['2024-01', '2024-02', '2024-03'])

        january = overview.topLevelItem(0)
        self.assertEqual(january.text(1), '$500.00')
        self.assertEqual(january.text(2), '$120.00')
        self.assertEqual(january.text(3), '$380.00')
        self.assertEqual(overview.topLevelItem(1).text(2), '$0.00')
        for i in range(3):
            self.assertTrue(overview.topLevelItem(i).text(4).startswith('$'))

    def test_signed_out_overview_has_zero_rows(self):
        lib.settings['span'] = 2
        self.widget.load_month(datetime.date(2024, 3, 1))
        overview = self.widget.overview_view
        self.assertEqual(overview.topLevelItemCount(), 2)
        self.assertEqual(overview.topLevelItem(1).text(3), '$0.00')

    def test_show_returns_widget(self):
        from PocketLedger.ui import main
        main.widget = None
        try:
            shown = main.show(self.services)
            self.assertIs(main.show(self.services), shown)
            shown.close()
        finally:
            main.widget = None


class TestApplication(BaseTestCase):

    def test_application_is_configured(self):
        from PySide6 import QtWidgets
        app = QtWidgets.QApplication.instance()
        self.assertIsNotNone(app)
        from PocketLedger.ui.app import Application
        self.assertTrue(issubclass(Application, QtWidgets.QApplication))
