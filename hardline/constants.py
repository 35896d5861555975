EXPENSE_CATEGORIES = (
    "Essential",
    "Discretionary",
    "WorkAI",
    "Startup",
    "Food",
    "Entertainment",
    "Snack",
    "Takeaway",
)

INCOME_SOURCES = ("Salary", "Sister", "SideProject", "Other")

# Ledger labels written by the charge engine
AUTO_DEBIT_PREFIX = "Auto-debit: "
MANUAL_DEBIT_PREFIX = "Manual debit: "
FIXED_EXPENSE_CATEGORY = "Essential"

# Penalty rules
PENALTY_AMOUNT = 500
SNACK_LIMIT = 2
