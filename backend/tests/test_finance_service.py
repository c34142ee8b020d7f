"""
Tests for FinanceService listings and summaries.
"""

from datetime import date, datetime, timezone

import pytest

from rest_api.models import FinancialTransaction
from rest_api.services.domain import FinanceService, OrderDraft, OrderLine
from shared.config.constants import OrderStatus, OrderType, TransactionCategory, TransactionType
from shared.utils.exceptions import NotFoundError, ValidationError


def _entry(restaurant_id, kind, category, amount, when, description=None):
    return FinancialTransaction(
        restaurant_id=restaurant_id,
        type=kind,
        category=category,
        amount_cents=amount,
        description=description,
        date=when,
    )


@pytest.fixture
def ledger(db_session, restaurant_a, restaurant_b):
    """
    March 2024 ledger for restaurant A plus noise:
        Mar 10: income 5000, expense 1200
        Mar 11: income 3000
        Apr 01: expense 700
    Restaurant B has an income on Mar 10 that must never be counted for A.
    """
    utc = timezone.utc
    db_session.add_all(
        [
            _entry(restaurant_a.id, TransactionType.INCOME, TransactionCategory.SALES, 5000,
                   datetime(2024, 3, 10, 13, 0, tzinfo=utc)),
            _entry(restaurant_a.id, TransactionType.EXPENSE, TransactionCategory.INGREDIENTS, 1200,
                   datetime(2024, 3, 10, 8, 0, tzinfo=utc), "Vegetables"),
            _entry(restaurant_a.id, TransactionType.INCOME, TransactionCategory.SALES, 3000,
                   datetime(2024, 3, 11, 20, 0, tzinfo=utc)),
            _entry(restaurant_a.id, TransactionType.EXPENSE, TransactionCategory.RENT, 700,
                   datetime(2024, 4, 1, 0, 0, tzinfo=utc)),
            _entry(restaurant_b.id, TransactionType.INCOME, TransactionCategory.SALES, 99999,
                   datetime(2024, 3, 10, 12, 0, tzinfo=utc)),
        ]
    )
    db_session.commit()


class TestSummaries:

    def test_daily_summary(self, db_session, restaurant_a, ledger):
        summary = FinanceService(db_session).get_daily_summary(restaurant_a.id, date(2024, 3, 10))

        assert summary.income_cents == 5000
        assert summary.expense_cents == 1200
        assert summary.balance_cents == 3800
        assert summary.period_start == summary.period_end == date(2024, 3, 10)

    def test_daily_summary_empty_day(self, db_session, restaurant_a, ledger):
        summary = FinanceService(db_session).get_daily_summary(restaurant_a.id, date(2024, 3, 12))
        assert (summary.income_cents, summary.expense_cents, summary.balance_cents) == (0, 0, 0)

    def test_monthly_summary(self, db_session, restaurant_a, ledger):
        summary = FinanceService(db_session).get_monthly_summary(restaurant_a.id, 2024, 3)

        assert summary.income_cents == 8000
        assert summary.expense_cents == 1200
        assert summary.balance_cents == 6800
        assert summary.period_start == date(2024, 3, 1)
        assert summary.period_end == date(2024, 3, 31)

    def test_monthly_summary_excludes_next_month_boundary(self, db_session, restaurant_a, ledger):
        april = FinanceService(db_session).get_monthly_summary(restaurant_a.id, 2024, 4)
        assert april.expense_cents == 700
        assert april.period_end == date(2024, 4, 30)

    def test_december_summary(self, db_session, restaurant_a, ledger):
        summary = FinanceService(db_session).get_monthly_summary(restaurant_a.id, 2024, 12)
        assert summary.period_end == date(2024, 12, 31)
        assert summary.balance_cents == 0

    @pytest.mark.parametrize("month", [0, 13])
    def test_invalid_month(self, db_session, restaurant_a, month):
        with pytest.raises(ValidationError):
            FinanceService(db_session).get_monthly_summary(restaurant_a.id, 2024, month)


class TestListTransactions:

    def test_lists_newest_first(self, db_session, restaurant_a, ledger):
        entries = FinanceService(db_session).list_transactions(restaurant_a.id)

        assert [e.amount_cents for e in entries] == [700, 3000, 5000, 1200]

    def test_filter_by_type(self, db_session, restaurant_a, ledger):
        entries = FinanceService(db_session).list_transactions(
            restaurant_a.id, transaction_type=TransactionType.EXPENSE
        )
        assert sorted(e.amount_cents for e in entries) == [700, 1200]

    def test_filter_by_range(self, db_session, restaurant_a, ledger):
        entries = FinanceService(db_session).list_transactions(
            restaurant_a.id,
            start=datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc),
            end=datetime(2024, 4, 1, 0, 0, tzinfo=timezone.utc),
        )
        assert sorted(e.amount_cents for e in entries) == [3000, 5000]

    def test_naive_bounds_are_utc(self, db_session, restaurant_a, ledger):
        entries = FinanceService(db_session).list_transactions(
            restaurant_a.id,
            start=datetime(2024, 3, 11),
            end=datetime(2024, 3, 12),
        )
        assert [e.amount_cents for e in entries] == [3000]

    def test_inverted_range_rejected(self, db_session, restaurant_a):
        with pytest.raises(ValidationError):
            FinanceService(db_session).list_transactions(
                restaurant_a.id,
                start=datetime(2024, 3, 12, tzinfo=timezone.utc),
                end=datetime(2024, 3, 11, tzinfo=timezone.utc),
            )

    def test_unknown_type_rejected(self, db_session, restaurant_a):
        with pytest.raises(ValidationError):
            FinanceService(db_session).list_transactions(restaurant_a.id, transaction_type="refund")

    def test_pagination(self, db_session, restaurant_a, ledger):
        entries = FinanceService(db_session).list_transactions(restaurant_a.id, limit=2, offset=1)
        assert [e.amount_cents for e in entries] == [3000, 5000]


class TestTransactionsByOrder:

    def test_paid_order_has_its_sale(self, db_session, order_service, restaurant_a):
        order = order_service.create_order(
            restaurant_a.id,
            OrderDraft(type=OrderType.TAKEAWAY),
            [OrderLine(restaurant_a.burger.id, 3)],
        ).order
        order_service.update_status(restaurant_a.id, order.id, OrderStatus.PAID)

        entries = FinanceService(db_session).get_transactions_by_order(restaurant_a.id, order.id)

        assert len(entries) == 1
        assert entries[0].amount_cents == 3000

    def test_sale_counts_in_daily_summary(self, db_session, order_service, restaurant_a):
        order = order_service.create_order(
            restaurant_a.id,
            OrderDraft(type=OrderType.TAKEAWAY),
            [OrderLine(restaurant_a.fries.id, 2)],
        ).order
        order_service.update_status(restaurant_a.id, order.id, OrderStatus.PAID)
        paid_day = order_service.get_order(restaurant_a.id, order.id).paid_at.date()

        summary = FinanceService(db_session).get_daily_summary(restaurant_a.id, paid_day)

        assert summary.income_cents == 1000

    def test_unknown_order(self, db_session, restaurant_a):
        with pytest.raises(NotFoundError):
            FinanceService(db_session).get_transactions_by_order(restaurant_a.id, "missing")


class TestRecordEntry:

    def test_expense_counts_in_summaries(self, db_session, restaurant_a, ledger):
        service = FinanceService(db_session)

        entry = service.record_entry(
            restaurant_a.id,
            TransactionType.EXPENSE,
            TransactionCategory.UTILITIES,
            800,
            day=date(2024, 3, 11),
            description="  Electricity\x00 ",
            user_id="manager-1",
        )

        assert entry.id is not None
        assert entry.description == "Electricity"
        assert entry.user_id == "manager-1"
        assert service.get_daily_summary(restaurant_a.id, date(2024, 3, 11)).expense_cents == 800
        assert service.get_monthly_summary(restaurant_a.id, 2024, 3).expense_cents == 2000

    def test_other_income(self, db_session, restaurant_a):
        service = FinanceService(db_session)
        entry = service.record_entry(
            restaurant_a.id, TransactionType.INCOME, TransactionCategory.OTHER_INCOME, 2500
        )

        assert service.get_transaction(restaurant_a.id, entry.id).amount_cents == 2500

    @pytest.mark.parametrize(
        "kind, category",
        [
            (TransactionType.INCOME, TransactionCategory.SALES),
            (TransactionType.INCOME, TransactionCategory.RENT),
            (TransactionType.EXPENSE, TransactionCategory.OTHER_INCOME),
            (TransactionType.EXPENSE, "snacks"),
            ("refund", TransactionCategory.RENT),
        ],
    )
    def test_category_must_fit_type(self, db_session, restaurant_a, kind, category):
        with pytest.raises(ValidationError):
            FinanceService(db_session).record_entry(restaurant_a.id, kind, category, 100)
        assert db_session.query(FinancialTransaction).count() == 0

    @pytest.mark.parametrize("amount", [0, -100])
    def test_amount_must_be_positive(self, db_session, restaurant_a, amount):
        with pytest.raises(ValidationError):
            FinanceService(db_session).record_entry(
                restaurant_a.id, TransactionType.EXPENSE, TransactionCategory.RENT, amount
            )

    def test_foreign_order_rejected(self, db_session, order_service, restaurant_a, restaurant_b):
        foreign = order_service.create_order(
            restaurant_b.id,
            OrderDraft(type=OrderType.TAKEAWAY),
            [OrderLine(restaurant_b.burger.id, 1)],
        ).order

        with pytest.raises(NotFoundError):
            FinanceService(db_session).record_entry(
                restaurant_a.id,
                TransactionType.EXPENSE,
                TransactionCategory.INGREDIENTS,
                300,
                order_id=foreign.id,
            )

    def test_get_transaction_is_scoped(self, db_session, restaurant_a, restaurant_b):
        service = FinanceService(db_session)
        entry = service.record_entry(
            restaurant_b.id, TransactionType.EXPENSE, TransactionCategory.RENT, 100
        )

        with pytest.raises(NotFoundError):
            service.get_transaction(restaurant_a.id, entry.id)
        with pytest.raises(NotFoundError):
            service.get_transaction(restaurant_a.id, "missing")
