"""
Request Validation Module

Converts loosely typed request values (JSON bodies, query strings) into
typed request objects. Every violated rule is reported; validation never
stops at the first problem.
"""

from decimal import Decimal, InvalidOperation
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Any, List, Optional
import math

from .accounts import AccountType, NewAccount
from .errors import ValidationError
from .transactions import TransactionFilters, TransactionType


TRANSACTION_TYPES = ", ".join(t.value for t in TransactionType)
ACCOUNT_TYPES = ", ".join(t.value for t in AccountType)


@dataclass
class TransactionRequest:
    """Validated posting request"""
    transaction_type: TransactionType
    amount: Decimal
    description: Optional[str] = None


@dataclass
class TransactionQuery:
    """Validated transaction listing parameters"""
    page: int = 1
    limit: int = 10
    filters: TransactionFilters = field(default_factory=TransactionFilters)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _to_decimal(value: Any) -> Optional[Decimal]:
    """Decimal for a JSON number, or None if the value is not a finite number"""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    result = Decimal(str(value))
    return result if result.is_finite() else None


def _parse_decimal_param(value: Any) -> Optional[Decimal]:
    """Decimal for a query-string number, or None if unparseable"""
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return _to_decimal(value)
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return result if result.is_finite() else None


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 date or timestamp; naive values are taken as UTC"""
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip())
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_int_param(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def validate_transaction_request(
    transaction_type: Any,
    amount: Any,
    description: Any = None,
    max_amount: Decimal = Decimal("1000000"),
    max_description_length: int = 255
) -> TransactionRequest:
    """
    Validate a posting request

    Raises:
        ValidationError: with one message per violated rule
    """
    errors: List[str] = []

    parsed_type = None
    if _is_blank(transaction_type):
        errors.append("Transaction type is required")
    else:
        try:
            parsed_type = TransactionType(transaction_type)
        except ValueError:
            errors.append(f"Invalid transaction type. Must be one of: {TRANSACTION_TYPES}")

    parsed_amount = None
    if amount is None:
        errors.append("Amount is required")
    else:
        parsed_amount = _to_decimal(amount)
        if parsed_amount is None:
            errors.append("Amount must be a valid number")
        elif parsed_amount <= 0:
            errors.append("Amount must be greater than 0")
        elif parsed_amount > max_amount:
            errors.append(f"Amount cannot exceed ${max_amount:,} per transaction")

    if description is not None:
        if not isinstance(description, str):
            errors.append("Description must be a string")
        elif len(description) > max_description_length:
            errors.append(f"Description cannot exceed {max_description_length} characters")

    if errors:
        raise ValidationError("Validation failed", errors)

    return TransactionRequest(
        transaction_type=parsed_type,
        amount=parsed_amount,
        description=description or None
    )


def validate_new_account(
    account_number: Any,
    account_type: Any,
    account_holder: Any,
    initial_balance: Any = None
) -> NewAccount:
    """Validate an account creation request"""
    errors: List[str] = []

    if _is_blank(account_number) or not isinstance(account_number, str):
        errors.append("Account number is required")

    parsed_type = None
    if _is_blank(account_type):
        errors.append("Account type is required")
    else:
        try:
            parsed_type = AccountType(account_type)
        except ValueError:
            errors.append(f"Invalid account type. Must be one of: {ACCOUNT_TYPES}")

    if _is_blank(account_holder) or not isinstance(account_holder, str):
        errors.append("Account holder name is required")

    balance = Decimal("0")
    if initial_balance is not None:
        parsed_balance = _to_decimal(initial_balance)
        if parsed_balance is None or parsed_balance < 0:
            errors.append("Initial balance must be a non-negative number")
        else:
            balance = parsed_balance

    if errors:
        raise ValidationError("Validation failed", errors)

    return NewAccount(
        account_number=account_number.strip(),
        account_type=parsed_type,
        account_holder=account_holder.strip(),
        initial_balance=balance
    )


def validate_transaction_query(
    page: Any = None,
    limit: Any = None,
    transaction_type: Any = None,
    start_date: Any = None,
    end_date: Any = None,
    min_amount: Any = None,
    max_amount: Any = None,
    default_limit: int = 10,
    max_limit: int = 100
) -> TransactionQuery:
    """Validate listing parameters; blank values count as absent"""
    errors: List[str] = []
    query = TransactionQuery(limit=default_limit)

    if not _is_blank(transaction_type):
        try:
            query.filters.transaction_type = TransactionType(transaction_type)
        except ValueError:
            errors.append(f"Invalid type filter. Must be one of: {TRANSACTION_TYPES}")

    if not _is_blank(start_date):
        query.filters.start_date = parse_datetime(start_date)
        if query.filters.start_date is None:
            errors.append("Invalid start date format")
    if not _is_blank(end_date):
        query.filters.end_date = parse_datetime(end_date)
        if query.filters.end_date is None:
            errors.append("Invalid end date format")

    if not _is_blank(min_amount):
        query.filters.min_amount = _parse_decimal_param(min_amount)
        if query.filters.min_amount is None or query.filters.min_amount < 0:
            errors.append("Minimum amount must be a non-negative number")
    if not _is_blank(max_amount):
        query.filters.max_amount = _parse_decimal_param(max_amount)
        if query.filters.max_amount is None or query.filters.max_amount < 0:
            errors.append("Maximum amount must be a non-negative number")

    if not _is_blank(page):
        parsed_page = _parse_int_param(page)
        if parsed_page is None or parsed_page < 1:
            errors.append("Page must be a positive integer")
        else:
            query.page = parsed_page
    if not _is_blank(limit):
        parsed_limit = _parse_int_param(limit)
        if parsed_limit is None or not 1 <= parsed_limit <= max_limit:
            errors.append(f"Limit must be between 1 and {max_limit}")
        else:
            query.limit = parsed_limit

    if errors:
        raise ValidationError("Invalid query parameters", errors)

    return query
