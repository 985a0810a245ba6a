"""
Banking Dashboard API

Account and transaction backend for the banking dashboard: balance-safe
transaction posting, filterable transaction history and per-account summaries.
All financial calculations use Decimal.
"""

__version__ = "1.0.0"
