# ================================================
# FILE: core/schemas.py
# ================================================
"""
Input and output contracts for every AI flow.

Attributes are snake_case; the JSON exchanged with the model and with HTTP clients uses the
camelCase aliases (e.g. `suggestedCategories`). Both spellings are accepted on input.
"""
from typing import Any, Dict, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, ValidationError
from pydantic.alias_generators import to_camel

from core.exceptions import SchemaValidationError

RiskTolerance = Literal['low', 'medium', 'high']
TransactionType = Literal['Income', 'Expense']
ChartType = Literal['pie', 'bar']

ModelT = TypeVar("ModelT", bound=BaseModel)


class FlowSchema(BaseModel):
    """Base for all flow schemas: camelCase on the wire, strict types (no coercion), unknown keys ignored."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, strict=True)


# --- Transaction categorization ---

class SuggestTransactionCategoriesInput(FlowSchema):
    transaction_description: str = Field(..., min_length=1, description="The description of the transaction to categorize.", examples=["Starbucks Coffee"])


class CategorySuggestion(FlowSchema):
    category: str = Field(..., description="The suggested category for the transaction.")
    confidence: float = Field(..., ge=0, le=1, description="A score between 0 and 1 representing the confidence in the suggested category.")


class SuggestTransactionCategoriesOutput(FlowSchema):
    suggested_categories: List[CategorySuggestion] = Field(
        ...,
        max_length=3,
        description="Up to 3 suggested categories with confidence scores, most likely first."
    )


# --- Budget adjustment ---

class AdjustBudgetInput(FlowSchema):
    income: float = Field(..., gt=0, description="Monthly income.")
    spending: Dict[str, NonNegativeFloat] = Field(..., description="Spending categories and amounts.")
    goals: Dict[str, NonNegativeFloat] = Field(..., description="Financial goals and target amounts.")
    savings_rate: float = Field(..., ge=0, le=100, description="Current savings rate (percentage).")
    risk_tolerance: RiskTolerance = Field(..., description="Risk tolerance level.")
    lifestyle_events_notes: str = Field(..., description="Any significant lifestyle changes.")


class InvestmentAllocation(FlowSchema):
    asset_class: str
    percentage: float = Field(..., ge=0, le=100)
    rationale: str = Field(..., description="Rationale for this specific asset class allocation based on risk tolerance and goals.")


class AdjustBudgetOutput(FlowSchema):
    adjusted_spending: Dict[str, NonNegativeFloat] = Field(..., description="Adjusted spending amounts by category.")
    recommended_savings_rate: float = Field(..., ge=0, le=100, description="Recommended savings rate (percentage).")
    investment_allocation: List[InvestmentAllocation] = Field(..., description="Investment allocation strategy with rationale for each allocation.")
    summary: str = Field(..., description="Comprehensive summary of the budget plan, decision-making advice, and key recommendations for achieving financial goals.")


# --- Budget optimization ---

class OptimizeBudgetInput(FlowSchema):
    income: float = Field(..., gt=0, description="The user's total monthly income.", examples=[5000])
    current_spending: Dict[str, NonNegativeFloat] = Field(
        ...,
        description="Current monthly spending, category -> amount.",
        examples=[{"Rent": 1500, "Groceries": 400}]
    )
    financial_goals: Dict[str, NonNegativeFloat] = Field(
        ...,
        description="Financial goals, goal name -> target amount.",
        examples=[{"Emergency Fund": 5000}]
    )
    current_savings_rate: float = Field(..., ge=0, le=100, description="The user's current monthly savings rate as a percentage (0-100).", examples=[10])
    risk_tolerance: RiskTolerance = Field(..., description="The user's risk tolerance for investments.")
    lifestyle_events_notes: Optional[str] = Field(None, description="Upcoming lifestyle events or financial considerations (e.g. \"expecting a child\").")


class InvestmentSuggestion(FlowSchema):
    asset_class: str = Field(..., description="The suggested asset class (e.g. \"Stocks\", \"Bonds\", \"ETFs\").")
    percentage: float = Field(..., ge=0, le=100, description="The recommended allocation percentage for this asset class.")
    rationale: Optional[str] = Field(None, description="Brief rationale based on risk tolerance and goals.")


class GoalAchievement(FlowSchema):
    goal_name: str = Field(..., description="Name of the financial goal.")
    current_allocation: NonNegativeFloat = Field(..., description="Current monthly amount allocated towards this goal.")
    recommended_allocation: NonNegativeFloat = Field(..., description="Recommended monthly amount to allocate.")
    time_to_achieve_months: Optional[NonNegativeFloat] = Field(None, description="Estimated months to achieve the goal with the recommended allocation.")
    notes: Optional[str] = Field(None, description="Additional advice specific to this goal.")


class OptimizeBudgetOutput(FlowSchema):
    """
    Optimized plan. Total optimized spending plus savings should not exceed income, but that is only
    requested in the prompt; the schema does not enforce it.
    """
    summary: str = Field(..., description="A concise summary of the budget optimization recommendations.")
    optimized_spending: Dict[str, NonNegativeFloat] = Field(..., description="Recommended monthly spending, category -> amount.")
    recommended_savings_rate: float = Field(..., ge=0, le=100, description="Recommended monthly savings rate as a percentage (0-100).")
    investment_suggestions: List[InvestmentSuggestion] = Field(..., description="Asset classes with allocation percentage and rationale.")
    actionable_steps: List[str] = Field(..., description="Specific steps to implement the optimized budget.")
    warnings_or_considerations: Optional[List[str]] = Field(None, description="Warnings or potential downsides of the plan.")
    goal_achievement_analysis: Optional[List[GoalAchievement]] = Field(None, description="Impact of the optimized budget on each financial goal.")


# --- Financial advice chat ---

class FinancialAdviceChatbotInput(FlowSchema):
    question: str = Field(..., min_length=1, description="The user's financial question.")
    financial_context: Optional[str] = Field(None, description="Summarized transaction history, spending patterns and budget information.")


class ChartDataPoint(FlowSchema):
    name: str = Field(..., description="Label for the data point (e.g. category name, month).")
    value: float = Field(..., description="Value for the data point.")
    fill: Optional[str] = Field(None, description="Hex color code for the data point.")


class ChartConfig(FlowSchema):
    type: ChartType = Field(..., description="Type of chart to display.")
    data: List[ChartDataPoint] = Field(..., description="Data for the chart, one object per slice or bar.")
    title: Optional[str] = None
    x_axis_label: Optional[str] = None
    y_axis_label: Optional[str] = None


class FinancialAdviceChatbotOutput(FlowSchema):
    answer: str = Field(..., description="The textual answer to the user's question.")
    chart: Optional[ChartConfig] = Field(
        None,
        description="Chart data, only when the financial context holds enough data for a meaningful chart related to the question."
    )


def _format_location(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "<root>"


def validate(schema: Type[ModelT], data: Any) -> ModelT:
    """
    Validates `data` (a mapping or a model instance) against `schema`.

    Model instances are dumped and re-validated so that values assigned after construction
    are checked as well.

    Raises:
        SchemaValidationError: one violation per offending field.
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True)
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        violations = [
            {"field": _format_location(err["loc"]), "constraint": err["msg"]}
            for err in e.errors()
        ]
        raise SchemaValidationError(schema.__name__, violations) from e
