"""
Caller-side wrappers around the flow invoker used by the routers.

Each action always returns a value of the flow's output shape. InputValidationError is the only
exception allowed through; the routers report it to the client as a form error.
"""
import traceback
from typing import Any

from core.exceptions import InputValidationError
from core.flows import (
    FLOWS,
    FlowInvoker,
    UNCATEGORIZED,
    UNCATEGORIZED_CONFIDENCE,
    fallback_for,
)
from core.schemas import (
    AdjustBudgetOutput,
    CategorySuggestion,
    FinancialAdviceChatbotOutput,
    OptimizeBudgetOutput,
    SuggestTransactionCategoriesOutput,
)

GENERIC_CHAT_APOLOGY = "I'm sorry, I couldn't process that request. Please try again."
GENERIC_PLAN_APOLOGY = (
    "I'm sorry, I encountered an issue generating a full budget plan at this moment. "
    "The AI response was not in the expected format. Please check your inputs or try again."
)


def _missing_primary_field(flow_name: str, output: Any) -> bool:
    value = getattr(output, FLOWS[flow_name].primary_field)
    if isinstance(value, str):
        return not value.strip()
    return not value


async def _run_action(invoker: FlowInvoker, flow_name: str, input_data: Any):
    flow = FLOWS[flow_name]
    try:
        result = await invoker.invoke(flow, input_data)
        return result.output
    except InputValidationError:
        raise
    except Exception as e:
        print(f"Error in action for flow '{flow_name}': {e}")
        traceback.print_exc()
        return fallback_for(flow_name, input_data)


async def get_ai_category_suggestion_action(invoker: FlowInvoker, input_data: Any) -> SuggestTransactionCategoriesOutput:
    result = await _run_action(invoker, "suggest_categories", input_data)
    if _missing_primary_field("suggest_categories", result):
        return SuggestTransactionCategoriesOutput(
            suggested_categories=[CategorySuggestion(category=UNCATEGORIZED, confidence=UNCATEGORIZED_CONFIDENCE)]
        )
    return result


async def get_budget_adjustment_action(invoker: FlowInvoker, input_data: Any) -> AdjustBudgetOutput:
    result = await _run_action(invoker, "adjust_budget", input_data)
    if _missing_primary_field("adjust_budget", result):
        print("get_budget_adjustment_action: AI result is missing its summary.")
        return result.model_copy(update={"summary": GENERIC_PLAN_APOLOGY})
    return result


async def get_budget_plan_action(invoker: FlowInvoker, input_data: Any) -> OptimizeBudgetOutput:
    result = await _run_action(invoker, "optimize_budget", input_data)
    if _missing_primary_field("optimize_budget", result):
        print("get_budget_plan_action: AI result is missing its summary.")
        return result.model_copy(update={"summary": GENERIC_PLAN_APOLOGY})
    return result


async def get_chatbot_response_action(invoker: FlowInvoker, input_data: Any) -> FinancialAdviceChatbotOutput:
    result = await _run_action(invoker, "financial_advice_chat", input_data)
    if _missing_primary_field("financial_advice_chat", result):
        return FinancialAdviceChatbotOutput(answer=GENERIC_CHAT_APOLOGY, chart=None)
    return result
