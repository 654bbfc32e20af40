import uuid
from typing import List, Optional

import config
import models

# Demo data the application starts with when SEED_DEMO_DATA is enabled.
DEMO_TRANSACTIONS = [
    {"id": "1", "description": "Salary Deposit", "amount": 5000, "date": "2024-07-01", "type": "Income", "category": "Salary"},
    {"id": "2", "description": "Groceries", "amount": 150, "date": "2024-07-02", "type": "Expense", "category": "Food"},
    {"id": "3", "description": "Rent", "amount": 1200, "date": "2024-07-01", "type": "Expense", "category": "Housing"},
    {"id": "4", "description": "Internet Bill", "amount": 60, "date": "2024-07-03", "type": "Expense", "category": "Utilities"},
    {"id": "5", "description": "Freelance Project", "amount": 750, "date": "2024-07-05", "type": "Income", "category": "Freelance"},
]

DEMO_BUDGETS = [
    {"id": "1", "category_name": "Food", "spending_limit": 400},
    {"id": "2", "category_name": "Entertainment", "spending_limit": 200},
    {"id": "3", "category_name": "Utilities", "spending_limit": 150},
]


class FinanceStore:
    """
    In-memory state for one running application: transactions (newest first), category budgets
    and the preferred display currency.

    Only request handlers on the event loop touch it, one at a time, so no locking is needed.
    """

    def __init__(
        self,
        transactions: Optional[List[models.Transaction]] = None,
        budgets: Optional[List[models.Budget]] = None,
        currency: str = config.DEFAULT_CURRENCY,
    ):
        self.transactions: List[models.Transaction] = list(transactions or [])
        self.budgets: List[models.Budget] = list(budgets or [])
        self.currency = currency

    @classmethod
    def with_demo_data(cls) -> "FinanceStore":
        return cls(
            transactions=[models.Transaction(**t) for t in DEMO_TRANSACTIONS],
            budgets=[models.Budget(**b) for b in DEMO_BUDGETS],
        )

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    # --- Transactions ---

    def add_transaction(self, transaction: models.Transaction) -> models.Transaction:
        self.transactions.insert(0, transaction)
        return transaction

    def get_transaction(self, transaction_id: str) -> Optional[models.Transaction]:
        return next((t for t in self.transactions if t.id == transaction_id), None)

    def replace_transaction(self, transaction: models.Transaction) -> bool:
        for index, existing in enumerate(self.transactions):
            if existing.id == transaction.id:
                self.transactions[index] = transaction
                return True
        return False

    def remove_transaction(self, transaction_id: str) -> bool:
        before = len(self.transactions)
        self.transactions = [t for t in self.transactions if t.id != transaction_id]
        return len(self.transactions) < before

    # --- Budgets ---

    def add_budget(self, budget: models.Budget) -> models.Budget:
        self.budgets.append(budget)
        return budget

    def get_budget(self, budget_id: str) -> Optional[models.Budget]:
        return next((b for b in self.budgets if b.id == budget_id), None)

    def replace_budget(self, budget: models.Budget) -> bool:
        for index, existing in enumerate(self.budgets):
            if existing.id == budget.id:
                self.budgets[index] = budget
                return True
        return False

    def remove_budget(self, budget_id: str) -> bool:
        before = len(self.budgets)
        self.budgets = [b for b in self.budgets if b.id != budget_id]
        return len(self.budgets) < before


finance_store: Optional[FinanceStore] = None


def get_store() -> FinanceStore:
    """
    Dependency to get the application's FinanceStore.
    Creates it (seeded with demo data when SEED_DEMO_DATA is set) if it hasn't been already.
    Tests replace this dependency with a fresh store.
    """
    global finance_store
    if finance_store is None:
        finance_store = FinanceStore.with_demo_data() if config.SEED_DEMO_DATA else FinanceStore()
        print(f"Finance store created with {len(finance_store.transactions)} transactions and {len(finance_store.budgets)} budgets.")
    return finance_store


def init_store():
    """
    Initializes the store. Can be called at application startup.
    """
    if finance_store is None:
        get_store()
    print("Finance store initialization check complete.")
