"""Sample data for the dashboard

Three accounts and their transaction history, dated relative to the moment
of seeding. Accounts that already exist are left untouched together with
their transactions, so seeding twice does not duplicate history.
"""

from decimal import Decimal
from datetime import datetime, timedelta, timezone
from typing import Optional

from .accounts import AccountStore, AccountType, NewAccount
from .logging_config import get_logger
from .transactions import TransactionStore, TransactionType


SAMPLE_ACCOUNTS = [
    ("1", "ACC-001-2024", AccountType.CHECKING, Decimal("5250.75"), "John Doe", 30),
    ("2", "ACC-002-2024", AccountType.SAVINGS, Decimal("12500.00"), "Jane Smith", 60),
    ("3", "ACC-003-2024", AccountType.CHECKING, Decimal("890.25"), "Robert Johnson", 15),
]

SAMPLE_TRANSACTIONS = [
    ("1", TransactionType.DEPOSIT, Decimal("1500"), "Salary deposit", 25),
    ("1", TransactionType.WITHDRAWAL, Decimal("200"), "ATM withdrawal", 20),
    ("1", TransactionType.TRANSFER, Decimal("350"), "Rent payment", 15),
    ("1", TransactionType.DEPOSIT, Decimal("500"), "Freelance payment", 10),
    ("1", TransactionType.WITHDRAWAL, Decimal("75.50"), "Grocery shopping", 5),
    ("2", TransactionType.DEPOSIT, Decimal("5000"), "Initial deposit", 55),
    ("2", TransactionType.DEPOSIT, Decimal("2500"), "Bonus payment", 30),
    ("2", TransactionType.DEPOSIT, Decimal("5000"), "Tax refund", 10),
    ("3", TransactionType.DEPOSIT, Decimal("1000"), "Initial deposit", 14),
    ("3", TransactionType.WITHDRAWAL, Decimal("109.75"), "Utility bills", 7),
]

logger = get_logger("bank_dashboard.seed")


async def seed_sample_data(
    account_store: AccountStore,
    transaction_store: TransactionStore,
    now: Optional[datetime] = None
) -> int:
    """Insert the sample accounts and transactions; returns accounts added"""
    now = now or datetime.now(timezone.utc)
    seeded = set()

    for account_id, number, account_type, balance, holder, days_ago in SAMPLE_ACCOUNTS:
        if await account_store.exists(account_id):
            continue
        await account_store.create(
            NewAccount(
                account_number=number,
                account_type=account_type,
                account_holder=holder,
                initial_balance=balance
            ),
            account_id=account_id,
            created_at=now - timedelta(days=days_ago)
        )
        seeded.add(account_id)

    for account_id, transaction_type, amount, description, days_ago in SAMPLE_TRANSACTIONS:
        if account_id not in seeded:
            continue
        await transaction_store.insert(
            account_id=account_id,
            transaction_type=transaction_type,
            amount=amount,
            description=description,
            created_at=now - timedelta(days=days_ago)
        )

    logger.info(f"Sample data seeded: {len(seeded)} accounts")
    return len(seeded)
