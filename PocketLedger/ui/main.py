"""Monthly report widget: summary labels, category pie chart, legend and monthly overview."""
import datetime
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import pandas as pd
from dateutil.relativedelta import relativedelta
from PySide6 import QtCore, QtGui, QtWidgets

from .actions import signals
from .piechart import PieChartView
from ..core import categories as categories_lib
from ..core.services import Services
from ..data import chart, data
from ..settings import lib, locale

widget: Optional['MainWidget'] = None


def show(bundle: Services) -> 'MainWidget':
    """Create the main widget on first use and show it."""
    global widget

    if widget is None:
        widget = MainWidget(bundle)

    widget.show()
    return widget


def _current_locale() -> str:
    if lib.settings is None:
        return locale.DEFAULT_LOCALE
    return lib.settings['locale'] or locale.DEFAULT_LOCALE


def _current_span() -> int:
    if lib.settings is None:
        return 1
    return lib.settings['span'] or 1


def initial_month() -> datetime.date:
    """Return the month saved in the `yearmonth` setting, or the current month."""
    value = lib.settings['yearmonth'] if lib.settings is not None else ''
    if value:
        try:
            return datetime.datetime.strptime(value, '%Y-%m').date()
        except ValueError:
            logging.warning(f'Invalid yearmonth setting "{value}". Using the current month.')
    return datetime.date.today().replace(day=1)


class LegendView(QtWidgets.QTreeWidget):
    """Lists the chart segments with their share and amount."""

    def __init__(self, parent=None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('PocketLedgerLegendView')
        self.setRootIsDecorated(False)
        self.setHeaderLabels(['Category', '%', 'Amount'])
        self.setSelectionMode(QtWidgets.QAbstractItemView.NoSelection)

    def set_segments(self, segments: Sequence[chart.ChartSegment]) -> None:
        self.clear()
        loc = _current_locale()
        for segment in segments:
            item = QtWidgets.QTreeWidgetItem([
                segment.name,
                f'{segment.percentage}%',
                locale.format_currency_value(segment.amount, loc),
            ])
            pixmap = QtGui.QPixmap(12, 12)
            pixmap.fill(QtGui.QColor(segment.color))
            item.setIcon(0, QtGui.QIcon(pixmap))
            item.setTextAlignment(1, QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter)
            item.setTextAlignment(2, QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter)
            self.addTopLevelItem(item)


class OverviewView(QtWidgets.QTreeWidget):
    """Lists income, expense, balance and the smoothed expense trend of the last months."""

    def __init__(self, parent=None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('PocketLedgerOverviewView')
        self.setRootIsDecorated(False)
        self.setHeaderLabels(['Month', 'Income', 'Expense', 'Balance', 'Trend'])
        self.setSelectionMode(QtWidgets.QAbstractItemView.NoSelection)

    def set_data(self, overview: pd.DataFrame, trends: pd.DataFrame) -> None:
        """Show one row per overview month, with the trend value of the same month."""
        self.clear()
        loc = _current_locale()
        trends = trends.dropna(subset=['loess'])
        trend = {data.month_key(m): v for m, v in zip(trends['month'], trends['loess'])}

        for row in overview.itertuples(index=False):
            key = data.month_key(row.month)
            values = [row.income, row.expense, row.balance]
            item = QtWidgets.QTreeWidgetItem(
                [key] + [locale.format_currency_value(v, loc) for v in values] + [
                    locale.format_currency_value(trend[key], loc) if key in trend else ''
                ]
            )
            for column in range(1, 5):
                item.setTextAlignment(column, QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter)
            self.addTopLevelItem(item)


class MainWidget(QtWidgets.QWidget):
    """Shows the monthly summary of the signed-in user.

    The previous and next buttons step through the months and save the shown
    month to the `yearmonth` setting. The overview lists the `span` months
    ending with the shown month.

    Args:
        bundle (Services): The ledger services to read from.
    """

    def __init__(self, bundle: Services, parent=None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('PocketLedgerMainWidget')
        self.setWindowTitle(lib.app_name)

        self.bundle = bundle
        self.month: Optional[datetime.date] = None
        self.summary: data.MonthlySummary = data.compute_monthly_summary([])

        self.previous_button: QtWidgets.QToolButton
        self.next_button: QtWidgets.QToolButton
        self.month_label: QtWidgets.QLabel
        self.income_label: QtWidgets.QLabel
        self.expense_label: QtWidgets.QLabel
        self.balance_label: QtWidgets.QLabel
        self.chart_view: PieChartView
        self.legend_view: LegendView
        self.overview_view: OverviewView
        self._unsubscribe: Optional[Callable[[], None]] = None

        self._create_ui()
        self._init_actions()
        self._connect_signals()

    def _create_ui(self) -> None:
        QtWidgets.QVBoxLayout(self)

        header = QtWidgets.QHBoxLayout()
        self.previous_button = QtWidgets.QToolButton(self)
        self.previous_button.setArrowType(QtCore.Qt.LeftArrow)
        self.previous_button.setToolTip('Previous Month')

        self.month_label = QtWidgets.QLabel(self)
        font = self.month_label.font()
        font.setBold(True)
        self.month_label.setFont(font)
        self.month_label.setAlignment(QtCore.Qt.AlignCenter)

        self.next_button = QtWidgets.QToolButton(self)
        self.next_button.setArrowType(QtCore.Qt.RightArrow)
        self.next_button.setToolTip('Next Month')

        header.addWidget(self.previous_button, 0)
        header.addWidget(self.month_label, 1)
        header.addWidget(self.next_button, 0)
        self.layout().addLayout(header)

        grid = QtWidgets.QFormLayout()
        self.income_label = QtWidgets.QLabel(self)
        self.expense_label = QtWidgets.QLabel(self)
        self.balance_label = QtWidgets.QLabel(self)
        grid.addRow('Income', self.income_label)
        grid.addRow('Expense', self.expense_label)
        grid.addRow('Balance', self.balance_label)
        self.layout().addLayout(grid)

        config = lib.settings.get_section('chart') if lib.settings else {}
        self.chart_view = PieChartView(
            size=config.get('size', chart.CHART_SIZE),
            margin=config.get('margin', chart.CHART_MARGIN),
            parent=self
        )
        self.layout().addWidget(self.chart_view, 1)

        self.legend_view = LegendView(parent=self)
        self.layout().addWidget(self.legend_view, 1)

        self.overview_view = OverviewView(parent=self)
        self.layout().addWidget(self.overview_view, 1)

    def _init_actions(self) -> None:
        self.previous_button.clicked.connect(self.previous_month)
        self.next_button.clicked.connect(self.next_month)

        for label, shortcut, slot in (
                ('Previous Month', 'Ctrl+Left', self.previous_month),
                ('Next Month', 'Ctrl+Right', self.next_month),
        ):
            action = QtGui.QAction(label, self)
            action.setShortcut(shortcut)
            action.triggered.connect(slot)
            self.addAction(action)

    def _connect_signals(self) -> None:
        self._unsubscribe = self.bundle.auth.on_auth_state_changed(signals.authStateChanged.emit)

        signals.authStateChanged.connect(self.reload)
        signals.transactionsChanged.connect(self.reload)
        signals.categoriesChanged.connect(self.reload)
        signals.metadataChanged.connect(self.metadata_changed)

    @QtCore.Slot(str, object)
    def metadata_changed(self, key: str, value: object) -> None:
        if key in ('locale', 'span'):
            self.reload()

    def reload(self, *args) -> None:
        """Reload the displayed month."""
        if self.month is not None:
            self.load_month(self.month)

    @QtCore.Slot()
    def previous_month(self) -> None:
        self.set_month((self.month or initial_month()) - relativedelta(months=1))

    @QtCore.Slot()
    def next_month(self) -> None:
        self.set_month((self.month or initial_month()) + relativedelta(months=1))

    def set_month(self, month: datetime.date) -> None:
        """Save `month` to the `yearmonth` setting and load it."""
        if lib.settings is not None:
            lib.settings['yearmonth'] = data.month_key(month)
        self.load_month(month)

    def load_month(self, month: datetime.date) -> None:
        """Load the signed-in user's transactions of `month`.

        Shows an empty report when nobody is signed in.
        """
        self.month = month
        user = self.bundle.auth.current_user()
        if not user:
            logging.debug('No signed-in user, showing an empty report')
            self.refresh([], categories_lib.DEFAULT_CATEGORIES)
            self.refresh_overview([])
            return

        transactions = self.bundle.transactions.get_monthly_transactions(user['id'], month)
        categories = self.bundle.categories.get_user_categories(user['id'])
        self.refresh(transactions, categories)
        self.refresh_overview(self.bundle.transactions.get_user_transactions(user['id']))

    def refresh(self, transactions: Iterable[Any], categories: List[Dict[str, Any]]) -> None:
        """Recompute the summary and chart from `transactions`."""
        self.summary = data.compute_monthly_summary(transactions)
        self.chart_view.set_items(data.get_chart_items(self.summary, categories))
        self.update_labels()

    def refresh_overview(self, transactions: List[Dict[str, Any]]) -> None:
        """Recompute the monthly overview and expense trend of the `span` months up to the shown month."""
        if self.month is None:
            return

        span = _current_span()
        first = self.month - relativedelta(months=span - 1)
        overview = data.get_monthly_overview(transactions, data.month_key(first), span=span)
        trends = data.get_trends(transactions, data.month_key(self.month), negative_span=span)
        self.overview_view.set_data(overview, trends)

    def update_labels(self) -> None:
        loc = _current_locale()
        self.month_label.setText(data.month_key(self.month) if self.month else '')
        self.income_label.setText(locale.format_currency_value(self.summary.total_income, loc))
        self.expense_label.setText(locale.format_currency_value(self.summary.total_expense, loc))
        self.balance_label.setText(locale.format_currency_value(self.summary.balance, loc))
        self.legend_view.set_segments(self.chart_view.segments)

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        if self._unsubscribe is None:
            super().closeEvent(event)
            return

        self._unsubscribe()
        self._unsubscribe = None
        for signal in (signals.authStateChanged, signals.transactionsChanged, signals.categoriesChanged):
            signal.disconnect(self.reload)
        signals.metadataChanged.disconnect(self.metadata_changed)
        super().closeEvent(event)
