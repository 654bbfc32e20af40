# ================================================
# FILE: core/flows.py
# ================================================
"""
The AI flow catalog and the invoker that runs one flow end to end:

    validate input -> render prompt -> call model -> validate output -> FlowResult

Only InputValidationError and errors building the agent escape `FlowInvoker.invoke`. Every
model-side failure (transport error, timeout, missing configuration, malformed or schema-violating
JSON) is turned into a fallback output that satisfies the flow's own output schema.
"""
import asyncio
import traceback
from typing import Any, Callable, Dict, Generic, Literal, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic_ai import Agent # type: ignore
from pydantic_ai.exceptions import ModelHTTPError, UnexpectedModelBehavior # type: ignore

import config
from core import prompts
from core.exceptions import InputValidationError, ModelUnavailableError, OutputValidationError, SchemaValidationError
from core.llm import get_ai_model, model_settings
from core.schemas import (
    AdjustBudgetInput,
    AdjustBudgetOutput,
    CategorySuggestion,
    FinancialAdviceChatbotInput,
    FinancialAdviceChatbotOutput,
    GoalAchievement,
    OptimizeBudgetInput,
    OptimizeBudgetOutput,
    SuggestTransactionCategoriesInput,
    SuggestTransactionCategoriesOutput,
    validate,
)

OutputT = TypeVar("OutputT", bound=BaseModel)

RETRYABLE_STATUS_CODES = (429, 500, 503, 504)

UNCATEGORIZED = "Uncategorized"
UNCATEGORIZED_CONFIDENCE = 0.1

ADJUST_BUDGET_APOLOGY = "I'm sorry, I couldn't generate a complete budget plan at this moment. Please check your inputs or try again later."
OPTIMIZE_BUDGET_APOLOGY = (
    "I'm sorry, I encountered an issue generating a full budget plan at this moment. "
    "Please check your inputs or try again. As a general tip, reviewing your non-essential "
    "spending is often a good first step to optimize your budget."
)
OPTIMIZE_BUDGET_FALLBACK_WARNING = "The AI could not generate a detailed plan. This is a fallback response."
GOAL_ANALYSIS_UNAVAILABLE = "Detailed analysis unavailable due to an error."
CHAT_APOLOGY = "I'm sorry, I couldn't process that request fully. Please try again."


class FlowResult(BaseModel, Generic[OutputT]):
    """Outcome of one invocation. `output` is schema-valid for both outcomes."""
    outcome: Literal['success', 'fallback']
    output: OutputT
    failure: Optional[Literal['model_call_failed', 'output_invalid']] = None
    detail: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.outcome == 'fallback'


class Flow:
    """A named flow: its schemas, its prompt renderer and its fallback policy."""

    def __init__(
        self,
        name: str,
        input_model: Type[BaseModel],
        output_model: Type[BaseModel],
        render: Callable[[Any], str],
        fallback: Callable[[Any], BaseModel],
        primary_field: str,
    ):
        self.name = name
        self.input_model = input_model
        self.output_model = output_model
        self.render = render
        self.fallback = fallback
        self.primary_field = primary_field

    def __repr__(self) -> str:
        return f"Flow({self.name!r})"


# --- Fallback policies ---

def suggest_categories_fallback(input_data: SuggestTransactionCategoriesInput) -> SuggestTransactionCategoriesOutput:
    return SuggestTransactionCategoriesOutput(
        suggested_categories=[CategorySuggestion(category=UNCATEGORIZED, confidence=UNCATEGORIZED_CONFIDENCE)]
    )


def adjust_budget_fallback(input_data: AdjustBudgetInput) -> AdjustBudgetOutput:
    return AdjustBudgetOutput(
        adjusted_spending=dict(input_data.spending),
        recommended_savings_rate=input_data.savings_rate,
        investment_allocation=[],
        summary=ADJUST_BUDGET_APOLOGY,
    )


def optimize_budget_fallback(input_data: OptimizeBudgetInput) -> OptimizeBudgetOutput:
    return OptimizeBudgetOutput(
        summary=OPTIMIZE_BUDGET_APOLOGY,
        optimized_spending=dict(input_data.current_spending),
        recommended_savings_rate=input_data.current_savings_rate,
        investment_suggestions=[],
        actionable_steps=[],
        warnings_or_considerations=[OPTIMIZE_BUDGET_FALLBACK_WARNING],
        goal_achievement_analysis=[
            GoalAchievement(
                goal_name=goal_name,
                current_allocation=0,
                recommended_allocation=0,
                notes=GOAL_ANALYSIS_UNAVAILABLE,
            )
            for goal_name in input_data.financial_goals
        ],
    )


def chat_fallback(input_data: FinancialAdviceChatbotInput) -> FinancialAdviceChatbotOutput:
    return FinancialAdviceChatbotOutput(answer=CHAT_APOLOGY, chart=None)


FLOWS: Dict[str, Flow] = {
    "suggest_categories": Flow(
        name="suggest_categories",
        input_model=SuggestTransactionCategoriesInput,
        output_model=SuggestTransactionCategoriesOutput,
        render=prompts.render_suggest_categories_prompt,
        fallback=suggest_categories_fallback,
        primary_field="suggested_categories",
    ),
    "adjust_budget": Flow(
        name="adjust_budget",
        input_model=AdjustBudgetInput,
        output_model=AdjustBudgetOutput,
        render=prompts.render_adjust_budget_prompt,
        fallback=adjust_budget_fallback,
        primary_field="summary",
    ),
    "optimize_budget": Flow(
        name="optimize_budget",
        input_model=OptimizeBudgetInput,
        output_model=OptimizeBudgetOutput,
        render=prompts.render_optimize_budget_prompt,
        fallback=optimize_budget_fallback,
        primary_field="summary",
    ),
    "financial_advice_chat": Flow(
        name="financial_advice_chat",
        input_model=FinancialAdviceChatbotInput,
        output_model=FinancialAdviceChatbotOutput,
        render=prompts.render_chatbot_prompt,
        fallback=chat_fallback,
        primary_field="answer",
    ),
}


def fallback_for(flow_name: str, input_data: Any) -> BaseModel:
    """
    Builds the fallback output of `flow_name` for `input_data`.

    Raises:
        InputValidationError: if `input_data` does not satisfy the flow's input schema.
    """
    flow = FLOWS[flow_name]
    return flow.fallback(_validate_input(flow, input_data))


def _validate_input(flow: Flow, input_data: Any) -> BaseModel:
    try:
        return validate(flow.input_model, input_data)
    except SchemaValidationError as e:
        print(f"Input rejected for flow '{flow.name}': {e.violations}")
        raise InputValidationError(flow.name, e.violations) from e


class FlowInvoker:
    """
    Runs flows against one language model.

    Args:
        model: a pydantic-ai model (or model name); None means no model is configured.
        model_settings: settings passed to every run.
        timeout: seconds allowed per model call; None disables the limit.
        max_attempts: total attempts for transport errors with a retryable status code.
    """

    def __init__(
        self,
        model: Any,
        model_settings: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = config.AI_TIMEOUT_SECONDS,
        max_attempts: int = config.AI_MAX_ATTEMPTS,
    ):
        self.model = model
        self.model_settings = model_settings
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)

    async def invoke(self, flow: Flow, input_data: Any) -> FlowResult:
        validated_input = _validate_input(flow, input_data)
        prompt = flow.render(validated_input)
        print(f"Running flow '{flow.name}'. Prompt:\n{prompt[:500]}...")

        # Agent construction errors propagate; only the model call falls back.
        agent = self._build_agent(flow)

        try:
            output = await self._call_model(agent, flow, prompt)
        except (UnexpectedModelBehavior, OutputValidationError) as e:
            return self._fallback(flow, validated_input, 'output_invalid', e)
        except Exception as e:
            return self._fallback(flow, validated_input, 'model_call_failed', e)

        print(f"Flow '{flow.name}' completed successfully.")
        return FlowResult[flow.output_model](outcome='success', output=output)

    def _build_agent(self, flow: Flow) -> Optional[Agent]:
        if self.model is None:
            return None
        return Agent(
            model=self.model,
            output_type=flow.output_model,
            retries=0,
            name=flow.name,
        )

    async def _call_model(self, agent: Optional[Agent], flow: Flow, prompt: str) -> BaseModel:
        if agent is None:
            raise ModelUnavailableError("No language model is configured (GEMINI_API_KEY missing?).")

        attempt = 0
        while True:
            attempt += 1
            try:
                agent_response = await asyncio.wait_for(
                    agent.run(prompt, model_settings=self.model_settings),
                    timeout=self.timeout,
                )
                break
            except ModelHTTPError as e:
                print(f"Model call for flow '{flow.name}' failed with status {e.status_code} (Attempt {attempt}/{self.max_attempts}).")
                if e.status_code in RETRYABLE_STATUS_CODES and attempt < self.max_attempts:
                    print("Retrying immediately...")
                    continue
                raise

        try:
            return validate(flow.output_model, agent_response.output)
        except SchemaValidationError as e:
            raise OutputValidationError(e.schema_name, e.violations) from e

    def _fallback(self, flow: Flow, validated_input: BaseModel, failure: str, error: Exception) -> FlowResult:
        print(f"Flow '{flow.name}' falling back ({failure}): {type(error).__name__}: {error}")
        traceback.print_exc()
        return FlowResult[flow.output_model](
            outcome='fallback',
            output=flow.fallback(validated_input),
            failure=failure,
            detail=f"{type(error).__name__}: {error}",
        )


def get_flow_invoker() -> FlowInvoker:
    """Dependency providing an invoker bound to the configured Gemini model."""
    return FlowInvoker(model=get_ai_model(), model_settings=model_settings)


# --- Flow invocation API ---

async def suggest_categories(invoker: FlowInvoker, description: str) -> SuggestTransactionCategoriesOutput:
    result = await invoker.invoke(FLOWS["suggest_categories"], {"transactionDescription": description})
    return result.output


async def adjust_budget(
    invoker: FlowInvoker,
    income: float,
    spending: Dict[str, float],
    goals: Dict[str, float],
    savings_rate: float,
    risk_tolerance: str,
    lifestyle_events_notes: str,
) -> AdjustBudgetOutput:
    result = await invoker.invoke(FLOWS["adjust_budget"], {
        "income": income,
        "spending": spending,
        "goals": goals,
        "savingsRate": savings_rate,
        "riskTolerance": risk_tolerance,
        "lifestyleEventsNotes": lifestyle_events_notes,
    })
    return result.output


async def optimize_budget(
    invoker: FlowInvoker,
    income: float,
    current_spending: Dict[str, float],
    financial_goals: Dict[str, float],
    current_savings_rate: float,
    risk_tolerance: str,
    lifestyle_events_notes: Optional[str] = None,
) -> OptimizeBudgetOutput:
    result = await invoker.invoke(FLOWS["optimize_budget"], {
        "income": income,
        "currentSpending": current_spending,
        "financialGoals": financial_goals,
        "currentSavingsRate": current_savings_rate,
        "riskTolerance": risk_tolerance,
        "lifestyleEventsNotes": lifestyle_events_notes,
    })
    return result.output


async def chat(invoker: FlowInvoker, question: str, financial_context: Optional[str] = None) -> FinancialAdviceChatbotOutput:
    result = await invoker.invoke(FLOWS["financial_advice_chat"], {
        "question": question,
        "financialContext": financial_context,
    })
    return result.output
