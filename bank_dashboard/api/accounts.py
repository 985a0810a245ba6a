"""
Account management endpoints
"""

from fastapi import APIRouter, Depends, status

from .dependencies import BankingSystem, get_banking_system
from .schemas import CreateAccountRequest, serialize_account
from ..errors import ValidationError
from ..validation import validate_new_account


router = APIRouter()


def valid_account_id(account_id: str) -> str:
    """Reject blank account ids before they reach the stores"""
    if not account_id.strip():
        raise ValidationError("Account ID is required")
    return account_id


@router.get("")
async def list_accounts(system: BankingSystem = Depends(get_banking_system)):
    """List all accounts, newest first"""
    accounts = await system.account_store.get_all()
    return [serialize_account(account) for account in accounts]


@router.get("/{account_id}")
async def get_account(
    account_id: str = Depends(valid_account_id),
    system: BankingSystem = Depends(get_banking_system)
):
    """Get account details"""
    account = await system.account_store.get_by_id(account_id)
    return serialize_account(account)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_account(
    request: CreateAccountRequest,
    system: BankingSystem = Depends(get_banking_system)
):
    """Create a new account"""
    new_account = validate_new_account(
        account_number=request.account_number,
        account_type=request.account_type,
        account_holder=request.account_holder,
        initial_balance=request.initial_balance
    )
    account = await system.account_store.create(new_account)
    return {
        "message": "Account created successfully",
        "account": serialize_account(account)
    }


@router.delete("/{account_id}")
async def delete_account(
    account_id: str = Depends(valid_account_id),
    system: BankingSystem = Depends(get_banking_system)
):
    """Delete an account"""
    await system.account_store.delete(account_id)
    return {"message": "Account deleted successfully"}
