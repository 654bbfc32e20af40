from typing import List, Dict, Optional

import models
from core.currency import SUPPORTED_CURRENCIES, format_currency
from store import FinanceStore

BUDGET_WARNING_RATIO = 0.8
RECENT_TRANSACTIONS_IN_CONTEXT = 5
TOP_CATEGORIES_IN_CONTEXT = 3


# --- Transaction Services ---

async def list_transactions(
    store: FinanceStore,
    transaction_type: Optional[str] = None,
    category: Optional[str] = None
) -> List[models.Transaction]:
    """
    Returns the stored transactions, newest first, optionally filtered by type and
    (case-insensitively) by category.
    """
    transactions = store.transactions
    if transaction_type:
        transactions = [t for t in transactions if t.type == transaction_type]
    if category:
        transactions = [t for t in transactions if t.category.lower() == category.lower()]
    return list(transactions)


async def fetch_transaction(transaction_id: str, store: FinanceStore) -> Optional[models.Transaction]:
    return store.get_transaction(transaction_id)


async def create_transaction(transaction_in: models.TransactionCreate, store: FinanceStore) -> models.Transaction:
    """
    Creates a transaction and puts it at the top of the list.

    Args:
        transaction_in: Pydantic model with the new transaction's data.
        store: The FinanceStore instance.

    Returns:
        The created transaction, including its generated id.
    """
    transaction = models.Transaction(id=store.new_id(), **transaction_in.model_dump())
    store.add_transaction(transaction)
    print(f"Created transaction {transaction.id}: {transaction.type} {transaction.amount} ({transaction.category})")
    return transaction


async def update_transaction(
    transaction_id: str,
    transaction_update: models.TransactionUpdate,
    store: FinanceStore
) -> Optional[models.Transaction]:
    """
    Applies the provided fields to an existing transaction.
    Returns None if the transaction does not exist.
    """
    existing = store.get_transaction(transaction_id)
    if existing is None:
        return None

    update_data = transaction_update.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        return existing

    updated = models.Transaction(**{**existing.model_dump(), **update_data})
    store.replace_transaction(updated)
    return updated


async def delete_transaction(transaction_id: str, store: FinanceStore) -> bool:
    return store.remove_transaction(transaction_id)


def totals_by_category(transactions: List[models.Transaction], transaction_type: str) -> Dict[str, float]:
    """Sums amounts per category for one transaction type, largest total first."""
    totals: Dict[str, float] = {}
    for t in transactions:
        if t.type == transaction_type:
            totals[t.category] = totals.get(t.category, 0) + t.amount
    return dict(sorted(totals.items(), key=lambda item: item[1], reverse=True))


# --- Budget Services ---

def calculate_category_spending(transactions: List[models.Transaction], category_name: str) -> float:
    """Sum of Expense transactions whose category matches `category_name`, ignoring case."""
    return sum(
        t.amount for t in transactions
        if t.type == "Expense" and t.category.lower() == category_name.lower()
    )


def build_budget_status(budget: models.Budget, transactions: List[models.Transaction]) -> models.BudgetStatus:
    current_spending = calculate_category_spending(transactions, budget.category_name)
    limit = budget.spending_limit

    if limit > 0:
        ratio = current_spending / limit
        progress = min(ratio * 100, 100)
        is_over_limit = current_spending > limit
        if ratio >= 1:
            alert_level = "exceeded"
        elif ratio > BUDGET_WARNING_RATIO:
            alert_level = "warning"
        else:
            alert_level = "ok"
    else:
        progress = 0
        is_over_limit = False
        alert_level = "ok"

    return models.BudgetStatus(
        **budget.model_dump(),
        current_spending=current_spending,
        remaining=limit - current_spending,
        progress=progress,
        is_over_limit=is_over_limit,
        alert_level=alert_level,
    )


async def list_budget_statuses(store: FinanceStore) -> List[models.BudgetStatus]:
    return [build_budget_status(b, store.transactions) for b in store.budgets]


async def fetch_budget_status(budget_id: str, store: FinanceStore) -> Optional[models.BudgetStatus]:
    budget = store.get_budget(budget_id)
    if budget is None:
        return None
    return build_budget_status(budget, store.transactions)


async def create_budget(budget_in: models.BudgetCreate, store: FinanceStore) -> models.BudgetStatus:
    budget = models.Budget(id=store.new_id(), **budget_in.model_dump())
    store.add_budget(budget)
    print(f"Created budget {budget.id} for category '{budget.category_name}' with limit {budget.spending_limit}")
    return build_budget_status(budget, store.transactions)


async def update_budget(budget_id: str, budget_update: models.BudgetUpdate, store: FinanceStore) -> Optional[models.BudgetStatus]:
    existing = store.get_budget(budget_id)
    if existing is None:
        return None

    update_data = budget_update.model_dump(exclude_unset=True, exclude_none=True)
    updated = models.Budget(**{**existing.model_dump(), **update_data})
    store.replace_budget(updated)
    return build_budget_status(updated, store.transactions)


async def delete_budget(budget_id: str, store: FinanceStore) -> bool:
    return store.remove_budget(budget_id)


# --- Dashboard Services ---

async def build_dashboard_summary(store: FinanceStore) -> models.DashboardSummary:
    transactions = store.transactions
    total_income = sum(t.amount for t in transactions if t.type == "Income")
    total_expenses = sum(t.amount for t in transactions if t.type == "Expense")
    statuses = [build_budget_status(b, transactions) for b in store.budgets]

    return models.DashboardSummary(
        currency=store.currency,
        total_income=total_income,
        total_expenses=total_expenses,
        net=total_income - total_expenses,
        expenses_by_category=totals_by_category(transactions, "Expense"),
        income_by_category=totals_by_category(transactions, "Income"),
        budget_alerts=[s for s in statuses if s.alert_level != "ok"],
    )


# --- Chatbot Services ---

def generate_financial_context(transactions: List[models.Transaction], currency: str) -> str:
    """
    Summarizes the user's transactions for the financial-advice chatbot: the most recent
    transactions, the top expense categories and all-time totals.
    """
    context = "User's Financial Context:\n"

    if transactions:
        context += f"\nRecent Transactions (last {RECENT_TRANSACTIONS_IN_CONTEXT}):\n"
        for t in transactions[:RECENT_TRANSACTIONS_IN_CONTEXT]:
            verb = "Received" if t.type == "Income" else "Spent"
            context += f"- {verb} {format_currency(t.amount, currency)} for \"{t.description}\" (Category: {t.category}) on {t.date.isoformat()}\n"
    else:
        context += "\nNo transaction data available.\n"

    top_spending = list(totals_by_category(transactions, "Expense").items())[:TOP_CATEGORIES_IN_CONTEXT]
    if top_spending:
        context += "\nTop Spending Categories:\n"
        for category, amount in top_spending:
            context += f"- {category}: {format_currency(amount, currency)}\n"

    total_income = sum(t.amount for t in transactions if t.type == "Income")
    total_expenses = sum(t.amount for t in transactions if t.type == "Expense")
    context += (
        "\nOverall Summary (all time):\n"
        f"- Total Income: {format_currency(total_income, currency)}\n"
        f"- Total Expenses: {format_currency(total_expenses, currency)}\n"
        f"- Net: {format_currency(total_income - total_expenses, currency)}\n"
    )
    return context


# --- Settings Services ---

async def get_preferred_currency(store: FinanceStore) -> str:
    return store.currency


async def set_preferred_currency(currency: str, store: FinanceStore) -> Optional[str]:
    """Stores the preferred currency. Returns None for an unsupported code."""
    code = currency.upper()
    if code not in SUPPORTED_CURRENCIES:
        return None
    store.currency = code
    return code
