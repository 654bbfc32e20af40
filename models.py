# ================================================
# FILE: models.py
# ================================================
from typing import List, Optional, Dict, Literal
from datetime import date as date_type
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.schemas import ChartConfig, TransactionType


class ApiModel(BaseModel):
    """Base for API models: camelCase JSON, snake_case attributes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# --- Transactions ---

class TransactionBase(ApiModel):
    """Base model for transaction attributes."""
    description: str = Field(..., min_length=1, description="What the money was spent on or received for", examples=["Starbucks Coffee"])
    amount: float = Field(..., gt=0, description="Transaction amount, always positive; the direction is given by `type`", examples=[4.75])
    date: date_type = Field(..., description="Date of the transaction (YYYY-MM-DD)", examples=["2024-07-02"])
    type: TransactionType = Field(..., description="Income or Expense", examples=["Expense"])
    category: str = Field(..., min_length=1, description="Manual or accepted AI category", examples=["Dining"])
    ai_suggested_category: Optional[str] = Field(None, description="Top AI suggestion before user confirmation")
    ai_confidence: Optional[float] = Field(None, ge=0, le=1, description="Confidence of the AI suggestion")


class TransactionCreate(TransactionBase):
    """Model for creating a transaction. The id is assigned by the store."""
    pass


class TransactionUpdate(ApiModel):
    """Model for updating a transaction. All fields are optional."""
    description: Optional[str] = Field(None, min_length=1)
    amount: Optional[float] = Field(None, gt=0)
    date: Optional[date_type] = None
    type: Optional[TransactionType] = None
    category: Optional[str] = Field(None, min_length=1)
    ai_suggested_category: Optional[str] = None
    ai_confidence: Optional[float] = Field(None, ge=0, le=1)


class Transaction(TransactionBase):
    """A recorded income or expense."""
    id: str = Field(..., description="Unique identifier for the transaction", examples=["1"])


class CategorySuggestionRequest(ApiModel):
    description: str = Field(..., description="Transaction description to categorize", examples=["Starbucks Coffee"])


# --- Budgets ---

class BudgetBase(ApiModel):
    """Base model for category budgets."""
    category_name: str = Field(..., min_length=1, description="Transaction category this budget limits (case-insensitive match)", examples=["Food"])
    spending_limit: float = Field(..., ge=0, description="Monthly spending limit for the category", examples=[400])


class BudgetCreate(BudgetBase):
    pass


class BudgetUpdate(ApiModel):
    """Model for updating a budget. All fields are optional."""
    category_name: Optional[str] = Field(None, min_length=1)
    spending_limit: Optional[float] = Field(None, ge=0)


class Budget(BudgetBase):
    id: str = Field(..., description="Unique identifier for the budget", examples=["1"])


class BudgetStatus(Budget):
    """
    A budget together with the spending derived from the current transactions.
    Recomputed on every read.
    """
    current_spending: float = Field(..., description="Sum of Expense transactions in this category")
    remaining: float = Field(..., description="spending_limit - current_spending (negative when over the limit)")
    progress: float = Field(..., ge=0, le=100, description="Percent of the limit spent, capped at 100")
    is_over_limit: bool
    alert_level: Literal['ok', 'warning', 'exceeded']


# --- Dashboard ---

class DashboardSummary(ApiModel):
    currency: str
    total_income: float
    total_expenses: float
    net: float
    expenses_by_category: Dict[str, float] = Field({}, description="Expense totals per category, largest first")
    income_by_category: Dict[str, float] = Field({}, description="Income totals per category, largest first")
    budget_alerts: List[BudgetStatus] = Field([], description="Budgets at more than 80% of their limit")


# --- Chatbot ---

class ChatRequest(ApiModel):
    question: str = Field(..., min_length=1, description="The user's financial question", examples=["How can I save more?"])
    include_financial_context: bool = Field(True, description="Build a financial context from the stored transactions")


class ChatMessage(ApiModel):
    id: str
    text: str
    sender: Literal['user', 'ai']
    timestamp: int = Field(..., description="Milliseconds since the epoch")
    chart: Optional[ChartConfig] = None


# --- Settings ---

class CurrencyOption(ApiModel):
    value: str
    label: str


class CurrencySetting(ApiModel):
    currency: str = Field(..., description="Preferred ISO currency code", examples=["USD"])
