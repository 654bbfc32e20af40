import asyncio

import pytest
from pydantic_ai.exceptions import ModelHTTPError # type: ignore

from core import flows
from core.exceptions import InputValidationError
from core.flows import FLOWS, FlowInvoker, fallback_for
from core.schemas import validate

VALID_INPUTS = {
    "suggest_categories": {"transactionDescription": "Starbucks Coffee"},
    "adjust_budget": {
        "income": 5000,
        "spending": {"Food": 500, "Rent": 1500},
        "goals": {"Vacation": 2000},
        "savingsRate": 10,
        "riskTolerance": "medium",
        "lifestyleEventsNotes": "",
    },
    "optimize_budget": {
        "income": 5000,
        "currentSpending": {"Rent": 1500, "Groceries": 400},
        "financialGoals": {"Emergency Fund": 5000, "Vacation": 2000},
        "currentSavingsRate": 10,
        "riskTolerance": "low",
    },
    "financial_advice_chat": {"question": "How can I save more?"},
}

OPTIMIZED_PLAN = {
    "summary": "Trim groceries and raise savings to 20%.",
    "optimizedSpending": {"Rent": 1500, "Groceries": 350},
    "recommendedSavingsRate": 20,
    "investmentSuggestions": [
        {"assetClass": "ETFs (Broad Market)", "percentage": 70, "rationale": "Low-cost diversification"},
        {"assetClass": "High-Yield Savings Account", "percentage": 30},
    ],
    "actionableSteps": ["Set up an automatic transfer of 1000 on payday."],
}


def run(coro):
    return asyncio.run(coro)


def invoke(model, flow_name, input_data, **invoker_kwargs):
    invoker = FlowInvoker(model=model.model if model else None, **invoker_kwargs)
    return run(invoker.invoke(FLOWS[flow_name], input_data))


def test_categorization_returns_model_answer(scripted_model):
    model = scripted_model(payload={"suggestedCategories": [{"category": "Dining", "confidence": 0.9}]})
    result = invoke(model, "suggest_categories", {"transactionDescription": "Starbucks Coffee"})

    assert result.outcome == "success"
    assert result.failure is None
    assert result.output.model_dump(by_alias=True) == {
        "suggestedCategories": [{"category": "Dining", "confidence": 0.9}]
    }
    assert model.calls == 1
    assert "Transaction Description: Starbucks Coffee" in model.prompts[0]


def test_suggest_categories_api(scripted_model):
    model = scripted_model(payload={"suggestedCategories": [{"category": "Dining", "confidence": 0.9}]})
    output = run(flows.suggest_categories(FlowInvoker(model=model.model), "Starbucks Coffee"))
    assert output.suggested_categories[0].category == "Dining"


@pytest.mark.parametrize("flow_name", list(FLOWS))
def test_fallback_output_conforms_to_output_schema(scripted_model, flow_name):
    model = scripted_model(error=RuntimeError("connection reset"))
    result = invoke(model, flow_name, VALID_INPUTS[flow_name])

    assert result.outcome == "fallback"
    assert result.is_fallback
    assert result.failure == "model_call_failed"
    validate(FLOWS[flow_name].output_model, result.output.model_dump(by_alias=True))


@pytest.mark.parametrize("flow_name", list(FLOWS))
def test_fallback_for_is_schema_valid(flow_name):
    output = fallback_for(flow_name, VALID_INPUTS[flow_name])
    validate(FLOWS[flow_name].output_model, output)


def test_invalid_input_is_rejected_before_any_model_call(scripted_model):
    model = scripted_model(payload=OPTIMIZED_PLAN)
    bad_input = dict(VALID_INPUTS["optimize_budget"], currentSavingsRate=150)

    with pytest.raises(InputValidationError) as exc_info:
        invoke(model, "optimize_budget", bad_input)

    assert model.calls == 0
    assert exc_info.value.flow_name == "optimize_budget"
    assert exc_info.value.violations[0]["field"] == "currentSavingsRate"


def test_missing_required_field_is_rejected(scripted_model):
    model = scripted_model(payload={"answer": "hi"})
    with pytest.raises(InputValidationError):
        invoke(model, "financial_advice_chat", {"financialContext": "no question"})
    assert model.calls == 0


def test_optimize_fallback_echoes_input(scripted_model):
    model = scripted_model(error=ModelHTTPError(status_code=400, model_name="test"))
    result = invoke(model, "optimize_budget", VALID_INPUTS["optimize_budget"])
    output = result.output

    assert output.optimized_spending == {"Rent": 1500, "Groceries": 400}
    assert list(output.optimized_spending) == ["Rent", "Groceries"]
    assert output.recommended_savings_rate == 10
    assert output.investment_suggestions == []
    assert output.actionable_steps == []
    assert output.summary == flows.OPTIMIZE_BUDGET_APOLOGY
    assert [g.goal_name for g in output.goal_achievement_analysis] == ["Emergency Fund", "Vacation"]
    assert all(g.recommended_allocation == 0 for g in output.goal_achievement_analysis)


def test_adjust_fallback_echoes_input(scripted_model):
    model = scripted_model(error=TimeoutError())
    output = invoke(model, "adjust_budget", VALID_INPUTS["adjust_budget"]).output

    assert output.adjusted_spending == {"Food": 500, "Rent": 1500}
    assert output.recommended_savings_rate == 10
    assert output.investment_allocation == []
    assert output.summary == flows.ADJUST_BUDGET_APOLOGY


def test_categorization_fallback_is_uncategorized(scripted_model):
    model = scripted_model(error=RuntimeError("quota exceeded"))
    output = invoke(model, "suggest_categories", {"transactionDescription": "ACME 123"}).output
    assert [(s.category, s.confidence) for s in output.suggested_categories] == [("Uncategorized", 0.1)]


def test_schema_violating_response_falls_back_as_output_invalid(scripted_model):
    model = scripted_model(payload={"suggestedCategories": [{"category": "Dining", "confidence": 7}]})
    result = invoke(model, "suggest_categories", {"transactionDescription": "Starbucks Coffee"})

    assert result.outcome == "fallback"
    assert result.failure == "output_invalid"
    assert result.output.suggested_categories[0].category == "Uncategorized"
    assert model.calls == 1


def test_non_json_response_falls_back(scripted_model):
    model = scripted_model(text="Sure! Your category is probably Dining.")
    result = invoke(model, "suggest_categories", {"transactionDescription": "Starbucks Coffee"})
    assert result.outcome == "fallback"
    assert result.failure == "output_invalid"


def test_chat_without_chart_is_accepted(scripted_model):
    model = scripted_model(payload={"answer": "Automate a transfer to savings each payday."})
    result = invoke(model, "financial_advice_chat", {"question": "How can I save more?"})

    assert result.outcome == "success"
    assert result.output.chart is None
    assert "#VISUALIZATIONS" not in model.prompts[0]


def test_chat_with_chart(scripted_model):
    model = scripted_model(payload={
        "answer": "Food is your largest expense.",
        "chart": {
            "type": "pie",
            "title": "Spending Breakdown",
            "data": [{"name": "Food", "value": 300}, {"name": "Transport", "value": 150, "fill": "#ff0000"}],
        },
    })
    output = run(flows.chat(
        FlowInvoker(model=model.model),
        "Show me my spending habits as a chart.",
        "Top Spending Categories: Food: $300, Transport: $150",
    ))
    assert output.chart.type == "pie"
    assert [p.name for p in output.chart.data] == ["Food", "Transport"]
    assert output.chart.data[1].fill == "#ff0000"


def test_chat_fallback_omits_chart(scripted_model):
    model = scripted_model(error=ConnectionError("network unreachable"))
    output = invoke(model, "financial_advice_chat", {"question": "Should I invest?"}).output
    assert output.answer == flows.CHAT_APOLOGY
    assert output.chart is None


def test_optimized_plan_within_income_is_accepted(scripted_model):
    model = scripted_model(payload=OPTIMIZED_PLAN)
    output = run(flows.optimize_budget(
        FlowInvoker(model=model.model),
        income=5000,
        current_spending={"Rent": 1500, "Groceries": 400},
        financial_goals={"Emergency Fund": 5000},
        current_savings_rate=10,
        risk_tolerance="medium",
    ))
    total = sum(output.optimized_spending.values()) + output.recommended_savings_rate / 100 * 5000
    assert total <= 5000
    assert output.summary == OPTIMIZED_PLAN["summary"]


def test_plan_exceeding_income_is_still_schema_valid(scripted_model):
    # Spending + savings within income is asked for in the prompt only.
    overspent_plan = dict(OPTIMIZED_PLAN, optimizedSpending={"Rent": 4000, "Groceries": 900}, recommendedSavingsRate=30)
    model = scripted_model(payload=overspent_plan)
    result = invoke(model, "optimize_budget", VALID_INPUTS["optimize_budget"])

    assert result.outcome == "success"
    output = result.output
    assert sum(output.optimized_spending.values()) + output.recommended_savings_rate / 100 * 5000 > 5000


def test_adjust_budget_api(scripted_model):
    model = scripted_model(payload={
        "adjustedSpending": {"Food": 400, "Rent": 1500},
        "recommendedSavingsRate": 15,
        "investmentAllocation": [{"assetClass": "Bonds", "percentage": 100, "rationale": "Medium risk"}],
        "summary": "Cut dining out by 100.",
    })
    output = run(flows.adjust_budget(
        FlowInvoker(model=model.model),
        income=5000,
        spending={"Food": 500, "Rent": 1500},
        goals={"Vacation": 2000},
        savings_rate=10,
        risk_tolerance="medium",
        lifestyle_events_notes="None",
    ))
    assert output.recommended_savings_rate == 15
    assert "Food: 500; Rent: 1500" in model.prompts[0]


def test_retryable_status_is_retried_then_falls_back(scripted_model):
    model = scripted_model(error=ModelHTTPError(status_code=503, model_name="test"))
    result = invoke(model, "financial_advice_chat", {"question": "Hi"}, max_attempts=3)
    assert model.calls == 3
    assert result.failure == "model_call_failed"


def test_non_retryable_status_is_not_retried(scripted_model):
    model = scripted_model(error=ModelHTTPError(status_code=400, model_name="test"))
    invoke(model, "financial_advice_chat", {"question": "Hi"}, max_attempts=3)
    assert model.calls == 1


def test_timeout_falls_back():
    from pydantic_ai.models.function import FunctionModel # type: ignore

    async def slow(messages, info):
        await asyncio.sleep(1)

    invoker = FlowInvoker(model=FunctionModel(slow), timeout=0.01)
    result = run(invoker.invoke(FLOWS["financial_advice_chat"], {"question": "Hi"}))
    assert result.outcome == "fallback"
    assert result.failure == "model_call_failed"
    assert result.output.answer == flows.CHAT_APOLOGY


def test_missing_model_falls_back():
    result = invoke(None, "adjust_budget", VALID_INPUTS["adjust_budget"])
    assert result.outcome == "fallback"
    assert result.failure == "model_call_failed"
    assert "ModelUnavailableError" in result.detail


def test_numeric_string_in_answer_falls_back_as_output_invalid(scripted_model):
    model = scripted_model(payload={"suggestedCategories": [{"category": "Dining", "confidence": "0.9"}]})
    result = invoke(model, "suggest_categories", {"transactionDescription": "Starbucks Coffee"})

    assert result.outcome == "fallback"
    assert result.failure == "output_invalid"
    assert result.output.suggested_categories[0].category == "Uncategorized"


def test_agent_construction_error_is_not_reported_as_model_failure(scripted_model, monkeypatch):
    def broken_agent(*args, **kwargs):
        raise TypeError("unexpected keyword argument")

    monkeypatch.setattr(flows, "Agent", broken_agent)
    model = scripted_model(payload={"answer": "hi"})

    with pytest.raises(TypeError):
        invoke(model, "financial_advice_chat", {"question": "Hi"})
    assert model.calls == 0
