"""
Finance endpoints: manual ledger entries, listings and income/expense
summaries.

Restricted to restaurant management (admin, manager).

All routes are prefixed with /api/restaurants/{restaurant_id}/finance
"""

from datetime import date, datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shared.config.constants import MANAGEMENT_USER_TYPES
from shared.infrastructure.db import get_db
from shared.security.auth import RestaurantScope, restaurant_scope_for
from shared.utils.schemas import (
    CreateTransactionRequest,
    ErrorResponse,
    FinancialSummaryOutput,
    TransactionOutput,
    TransactionType,
)
from rest_api.routers._common import Pagination, get_pagination
from rest_api.services.domain import FinanceService, FinancialSummary


router = APIRouter(
    prefix="/api/restaurants/{restaurant_id}/finance",
    tags=["finance"],
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)

management_scope = restaurant_scope_for(MANAGEMENT_USER_TYPES)


def get_finance_service(db: Session = Depends(get_db)) -> FinanceService:
    return FinanceService(db)


def _summary(summary: FinancialSummary) -> FinancialSummaryOutput:
    return FinancialSummaryOutput(
        period_start=summary.period_start,
        period_end=summary.period_end,
        income_cents=summary.income_cents,
        expense_cents=summary.expense_cents,
        balance_cents=summary.balance_cents,
    )


@router.get("/transactions", response_model=list[TransactionOutput])
def list_transactions(
    transaction_type: TransactionType | None = Query(default=None, alias="type"),
    start: datetime | None = None,
    end: datetime | None = None,
    order_id: str | None = None,
    pagination: Pagination = Depends(get_pagination),
    scope: RestaurantScope = Depends(management_scope),
    service: FinanceService = Depends(get_finance_service),
) -> list[TransactionOutput]:
    """
    List ledger entries, newest first.

    start/end bound the transaction date as [start, end). With order_id the
    entries booked for that order are returned instead.
    """
    if order_id is not None:
        transactions = service.get_transactions_by_order(scope.restaurant_id, order_id)
    else:
        transactions = service.list_transactions(
            scope.restaurant_id,
            transaction_type=transaction_type,
            start=start,
            end=end,
            limit=pagination.limit,
            offset=pagination.offset,
        )
    return [TransactionOutput.model_validate(t) for t in transactions]


@router.post(
    "/transactions",
    response_model=TransactionOutput,
    status_code=status.HTTP_201_CREATED,
)
def create_transaction(
    body: CreateTransactionRequest,
    scope: RestaurantScope = Depends(management_scope),
    service: FinanceService = Depends(get_finance_service),
) -> TransactionOutput:
    """Book an expense or a non-sales income by hand."""
    transaction = service.record_entry(
        scope.restaurant_id,
        body.type,
        body.category,
        body.amount_cents,
        day=body.entry_date,
        description=body.description,
        user_id=scope.user_id,
        order_id=body.order_id,
    )
    return TransactionOutput.model_validate(transaction)


@router.get("/transactions/{transaction_id}", response_model=TransactionOutput)
def get_transaction(
    transaction_id: str,
    scope: RestaurantScope = Depends(management_scope),
    service: FinanceService = Depends(get_finance_service),
) -> TransactionOutput:
    return TransactionOutput.model_validate(
        service.get_transaction(scope.restaurant_id, transaction_id)
    )


@router.get("/summary/daily", response_model=FinancialSummaryOutput)
def daily_summary(
    day: date = Query(alias="date"),
    scope: RestaurantScope = Depends(management_scope),
    service: FinanceService = Depends(get_finance_service),
) -> FinancialSummaryOutput:
    return _summary(service.get_daily_summary(scope.restaurant_id, day))


@router.get("/summary/monthly", response_model=FinancialSummaryOutput)
def monthly_summary(
    year: int = Query(ge=2000, le=9999),
    month: int = Query(ge=1, le=12),
    scope: RestaurantScope = Depends(management_scope),
    service: FinanceService = Depends(get_finance_service),
) -> FinancialSummaryOutput:
    return _summary(service.get_monthly_summary(scope.restaurant_id, year, month))
