from .users import (
    UserBase,
    UserCreate,
    UserUpdate,
    User,
)

from .fixed_expenses import (
    FixedExpenseBase,
    FixedExpenseCreate,
    FixedExpenseUpdate,
    FixedExpense,
    ChargeRunResult,
)

from .transactions import (
    TransactionBase,
    TransactionCreate,
    TransactionUpdate,
    Transaction,
)

from .stats import (
    TopExpense,
    MonthlyStats,
    YearToDateSummary,
    BudgetDashboard,
    PenaltyBreakdown,
)

from .shopping import (
    ShoppingItemBase,
    ShoppingItemCreate,
    ShoppingItemUpdate,
    ShoppingItem,
    CycleInfo,
)

from .prices import (
    PriceRecordCreate,
    PriceRecord,
    PriceTrend,
    PriceComparison,
)
