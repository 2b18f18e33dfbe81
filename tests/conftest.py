"""
Pytest configuration and fixtures for FinProj test suite.

This module provides reusable fixtures for testing all FinProj components.
Fixtures follow the principle of "arrange-act-assert" with clear separation.
"""

import json
from datetime import date
from typing import List

import pytest
from loguru import logger

from finproj.debt import DebtRecord, PaymentEvent
from finproj.goals import GoalRecord
from finproj.income import IncomeRecord
from finproj.investment import InvestmentRecord, InvestmentTransaction
from finproj.networth import AssetRecord, LiabilityRecord, ValuationPoint


# ---------------------------------------------------------------------------
# Date Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def today() -> date:
    """Fixed reference day so date-dependent results are reproducible."""
    return date(2025, 1, 15)


@pytest.fixture
def start_date() -> date:
    """Standard start date for tests."""
    return date(2024, 1, 1)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

@pytest.fixture
def log_messages():
    """
    Capture loguru messages emitted during a test.

    Yields a list of (level name, message) tuples.
    """
    messages = []
    handler_id = logger.add(
        lambda m: messages.append((m.record["level"].name, m.record["message"])),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)


# ---------------------------------------------------------------------------
# Debt Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def two_debts() -> List[DebtRecord]:
    """
    Credit card and personal loan.

    Card: 1,000 at 20%, minimum 50
    Loan:   500 at 15%, minimum 30
    """
    return [
        DebtRecord(id=1, balance=1_000, annual_rate_percent=20, minimum_payment=50,
                   name="Card", debt_type="credit_card", due_date=date(2025, 2, 20)),
        DebtRecord(id=2, balance=500, annual_rate_percent=15, minimum_payment=30,
                   name="Loan", debt_type="loan", due_date=date(2025, 2, 5)),
    ]


@pytest.fixture
def three_debts(two_debts) -> List[DebtRecord]:
    """two_debts plus a small, low-rate debt without a due date."""
    return two_debts + [
        DebtRecord(id=3, balance=200, annual_rate_percent=5, minimum_payment=25,
                   name="Store card", debt_type="credit_card"),
    ]


@pytest.fixture
def debt_with_payments() -> DebtRecord:
    """Car loan opened at 12,000 with two recorded payments."""
    return DebtRecord(
        id=10,
        balance=11_500,
        annual_rate_percent=6,
        minimum_payment=300,
        name="Car",
        debt_type="auto",
        initial_balance=12_000,
        payments=(
            PaymentEvent(10, 300.0, date(2024, 3, 1), 240.0, 60.0),
            PaymentEvent(10, 300.0, date(2024, 4, 1), 260.0, 40.0),
        ),
    )


# ---------------------------------------------------------------------------
# Net Worth Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def house() -> AssetRecord:
    """House revalued twice in 2024."""
    return AssetRecord(
        id=1,
        value=320_000,
        name="House",
        category="real_estate",
        value_history=(
            ValuationPoint(date(2024, 1, 1), 300_000),
            ValuationPoint(date(2024, 6, 1), 310_000),
            ValuationPoint(date(2024, 12, 1), 320_000),
        ),
    )


@pytest.fixture
def iou() -> LiabilityRecord:
    return LiabilityRecord(id=1, amount=2_000, name="Family loan", category="personal")


@pytest.fixture
def index_fund() -> InvestmentRecord:
    """10 shares bought in February, 4 sold in August; priced at 100."""
    return InvestmentRecord(
        id=1,
        symbol="VTI",
        current_price=100.0,
        average_cost=80.0,
        investment_type="etf",
        transactions=(
            InvestmentTransaction("buy", 10, date(2024, 2, 10), 80.0),
            InvestmentTransaction("sell", 4, date(2024, 8, 10), 95.0),
        ),
    )


# ---------------------------------------------------------------------------
# Goal and Income Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def car_goal() -> GoalRecord:
    """10,000 of 50,000 saved, due end of 2025."""
    return GoalRecord(
        target_amount=50_000,
        target_date=date(2025, 12, 31),
        current_amount=10_000,
        monthly_contribution=2_000,
        name="Car",
        category="purchase",
        created_at=date(2024, 12, 31),
    )


@pytest.fixture
def salary_and_bonus() -> List[IncomeRecord]:
    """Monthly salary of 50,000 and a one-time bonus of 100,000."""
    return [
        IncomeRecord(50_000, "monthly", date(2025, 1, 1), income_type="salary"),
        IncomeRecord(100_000, "one_time", date(2025, 1, 10), income_type="bonus"),
    ]


# ---------------------------------------------------------------------------
# Records File Fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def records_data() -> dict:
    """Records document covering every section."""
    return {
        "schema_version": "0.1.0",
        "debts": [
            {"id": 1, "name": "Card", "debt_type": "credit_card", "balance": 1000,
             "annual_rate_percent": 20, "minimum_payment": 50},
            {"id": 2, "name": "Loan", "debt_type": "loan", "balance": 500,
             "annual_rate_percent": 15, "minimum_payment": 30,
             "initial_balance": 800,
             "payments": [
                 {"debt_id": 2, "amount": 100, "date": "2024-06-01",
                  "principal_portion": 90, "interest_portion": 10},
             ]},
        ],
        "assets": [
            {"id": 1, "name": "House", "category": "real_estate", "value": 310000,
             "value_history": [
                 {"date": "2024-01-01", "value": 300000},
                 {"date": "2024-07-01", "value": 310000},
             ]},
        ],
        "liabilities": [
            {"id": 1, "name": "IOU", "category": "personal", "amount": 2000},
        ],
        "investments": [
            {"id": 1, "symbol": "VTI", "investment_type": "etf", "current_price": 100,
             "average_cost": 80,
             "transactions": [
                 {"type": "buy", "shares": 10, "date": "2024-02-10", "price_per_share": 80},
             ]},
        ],
        "goals": [
            {"name": "Car", "category": "purchase", "current_amount": 10000,
             "target_amount": 50000, "target_date": "2025-12-31",
             "monthly_contribution": 2000, "created_at": "2024-12-31"},
        ],
        "incomes": [
            {"amount": 50000, "frequency": "monthly", "date": "2025-01-01",
             "income_type": "salary"},
            {"amount": 100000, "frequency": "one_time", "date": "2025-01-10"},
        ],
        "expenses": [
            {"amount": 20000, "frequency": "monthly", "date": "2025-01-01",
             "income_type": "rent"},
        ],
    }


@pytest.fixture
def records_file(tmp_path, records_data):
    """records_data written to a temporary JSON file."""
    path = tmp_path / "records.json"
    with open(path, "w") as f:
        json.dump(records_data, f)
    return path
