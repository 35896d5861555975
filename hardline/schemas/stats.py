from typing import Dict, List
from pydantic import BaseModel


class TopExpense(BaseModel):
    id: int
    date: str
    description: str
    category: str | None = None
    amount: float


class MonthlyStats(BaseModel):
    user_id: int
    year: int
    month: int  # 1-12
    total_income: float
    total_expenses: float
    total_fixed_expenses: float
    savings: float
    savings_rate: float
    category_breakdown: Dict[str, float]
    top_expenses: List[TopExpense]
    transaction_count: int
    avg_daily_spending: float


class YearToDateSummary(BaseModel):
    year: int
    months_covered: int
    total_income: float
    total_expenses: float
    total_fixed_expenses: float
    total_savings: float
    avg_savings_rate: float
    category_totals: Dict[str, float]
    monthly_stats: List[MonthlyStats]


class BudgetDashboard(BaseModel):
    total_income: float
    total_spent: float
    fixed_expenses: float
    available_balance: float
    days_until_payday: int


class PenaltyBreakdown(BaseModel):
    takeaways: int
    snacks: int
    total: int
