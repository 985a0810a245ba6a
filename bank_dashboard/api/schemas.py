"""
Pydantic schemas for API requests and response serializers

Request models only pin down the body shape (a JSON object with known keys);
field rules are enforced by the validation module so every violation is
reported together.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

from ..accounts import Account
from ..engine import PostingResult
from ..queries import TransactionPage
from ..transactions import Transaction, TransactionSummary


class CreateAccountRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    
    account_number: Optional[Any] = Field(None, alias="accountNumber")
    account_type: Optional[Any] = Field(None, alias="accountType")
    account_holder: Optional[Any] = Field(None, alias="accountHolder")
    initial_balance: Optional[Any] = Field(None, alias="initialBalance")


class CreateTransactionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    
    type: Optional[Any] = Field(None, description="DEPOSIT, WITHDRAWAL or TRANSFER")
    amount: Optional[Any] = Field(None, description="Positive amount, at most 1,000,000")
    description: Optional[Any] = Field(None, description="Optional, at most 255 characters")


def serialize_account(account: Account) -> Dict[str, Any]:
    return {
        "id": account.id,
        "accountNumber": account.account_number,
        "accountType": account.account_type.value,
        "balance": float(account.balance),
        "accountHolder": account.account_holder,
        "createdAt": account.created_at.isoformat()
    }


def serialize_transaction(transaction: Transaction) -> Dict[str, Any]:
    return {
        "id": transaction.id,
        "accountId": transaction.account_id,
        "type": transaction.transaction_type.value,
        "amount": float(transaction.amount),
        "description": transaction.description,
        "createdAt": transaction.created_at.isoformat()
    }


def serialize_page(page: TransactionPage) -> Dict[str, Any]:
    return {
        "data": [serialize_transaction(txn) for txn in page.data],
        "pagination": {
            "page": page.pagination.page,
            "limit": page.pagination.limit,
            "total": page.pagination.total,
            "totalPages": page.pagination.total_pages,
            "hasMore": page.pagination.has_more
        }
    }


def serialize_posting(result: PostingResult) -> Dict[str, Any]:
    return {
        "message": result.message,
        "transaction": serialize_transaction(result.transaction),
        "newBalance": float(result.new_balance)
    }


def serialize_summary(summary: TransactionSummary) -> Dict[str, Any]:
    return {
        "totalDeposits": float(summary.total_deposits),
        "totalWithdrawals": float(summary.total_withdrawals),
        "totalTransfers": float(summary.total_transfers),
        "transactionCount": summary.transaction_count
    }
