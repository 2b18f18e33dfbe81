"""
FinProj — Personal Finance Projection & Analytics Engine

Turns raw financial records (balances, rates, dates, cash flows) into
derived quantities for a personal-finance backend.

Modules
-------
- timevalue    : Compound interest, loan payments, amortization, savings growth
- rates        : NPV and Newton-Raphson rate of return
- debt         : Payoff simulation, avalanche/snowball/minimum plans, analytics
- investment   : Positions from transaction logs, gains, allocation
- networth     : Monthly net-worth reconstruction and analytics
- goals        : Savings goal progress, contributions, projections
- income       : Monthly-equivalent normalization and cash-flow projection
- utils        : Shared utilities (validation, calendar helpers, formatting)

"""

__version__ = "0.1.0"

from .timevalue import compound_interest, loan_payment, amortization_schedule
from .rates import CashFlow, solve_rate
from .debt import DebtRecord, PayoffStrategy, simulate_payoff, plan_strategy, get_analytics
from .networth import reconstruct
from .goals import GoalRecord, create_goal, apply_contribution
from .income import Frequency, IncomeRecord, to_monthly_equivalent, project_months
from . import utils
