"""
Transaction endpoints
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from .accounts import valid_account_id
from .dependencies import BankingSystem, get_banking_system, get_request_id
from .schemas import (
    CreateTransactionRequest, serialize_page, serialize_posting, serialize_summary
)


router = APIRouter()


@router.get("/{account_id}/transactions")
async def list_transactions(
    account_id: str = Depends(valid_account_id),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    transaction_type: Optional[str] = Query(None, alias="type"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    min_amount: Optional[str] = Query(None, alias="minAmount"),
    max_amount: Optional[str] = Query(None, alias="maxAmount"),
    system: BankingSystem = Depends(get_banking_system)
):
    """Get transaction history for account with filtering and pagination"""
    result = await system.queries.list_transactions(
        account_id,
        page=page,
        limit=limit,
        transaction_type=transaction_type,
        start_date=start_date,
        end_date=end_date,
        min_amount=min_amount,
        max_amount=max_amount
    )
    return serialize_page(result)


@router.post("/{account_id}/transactions", status_code=status.HTTP_201_CREATED)
async def create_transaction(
    request: CreateTransactionRequest,
    account_id: str = Depends(valid_account_id),
    system: BankingSystem = Depends(get_banking_system),
    request_id: Optional[str] = Depends(get_request_id)
):
    """Post a deposit, withdrawal or transfer"""
    result = await system.engine.post_transaction(
        account_id,
        transaction_type=request.type,
        amount=request.amount,
        description=request.description,
        correlation_id=request_id
    )
    return serialize_posting(result)


@router.get("/{account_id}/transactions/summary")
async def get_transaction_summary(
    account_id: str = Depends(valid_account_id),
    system: BankingSystem = Depends(get_banking_system)
):
    """Get per-type totals for an account"""
    summary = await system.queries.get_summary(account_id)
    return serialize_summary(summary)
