from core import prompts
from core.schemas import (
    AdjustBudgetInput,
    FinancialAdviceChatbotInput,
    OptimizeBudgetInput,
    SuggestTransactionCategoriesInput,
)

ADJUST_INPUT = AdjustBudgetInput(
    income=5000,
    spending={"Food": 500, "Rent": 1500},
    goals={"Vacation": 2000, "Emergency Fund": 5000},
    savings_rate=10,
    risk_tolerance="medium",
    lifestyle_events_notes="Starting a new job",
)

OPTIMIZE_INPUT = OptimizeBudgetInput(
    income=5000,
    current_spending={"Rent": 1500, "Groceries": 400.5},
    financial_goals={"Emergency Fund": 5000},
    current_savings_rate=10,
    risk_tolerance="high",
)


def test_rendering_is_idempotent():
    assert prompts.render_prompt("adjust_budget", ADJUST_INPUT) == prompts.render_prompt("adjust_budget", ADJUST_INPUT)
    assert prompts.render_prompt("optimize_budget", OPTIMIZE_INPUT) == prompts.render_prompt("optimize_budget", OPTIMIZE_INPUT)


def test_adjust_budget_mapping_keeps_insertion_order_and_separator():
    prompt = prompts.render_adjust_budget_prompt(ADJUST_INPUT)
    assert "Food: 500; Rent: 1500" in prompt
    assert prompt.index("Food: 500") < prompt.index("Rent: 1500")
    assert "Vacation: 2000; Emergency Fund: 5000" in prompt
    assert "Current Savings Rate: 10%" in prompt


def test_optimize_budget_renders_bulleted_mappings():
    prompt = prompts.render_optimize_budget_prompt(OPTIMIZE_INPUT)
    assert "  - Rent: 1500\n  - Groceries: 400.5" in prompt
    assert "  - Emergency Fund: (Target: 5000)" in prompt
    assert "Lifestyle Events/Notes" not in prompt


def test_optimize_budget_includes_notes_when_given():
    with_notes = OPTIMIZE_INPUT.model_copy(update={"lifestyle_events_notes": "expecting a child"})
    prompt = prompts.render_optimize_budget_prompt(with_notes)
    assert "- Lifestyle Events/Notes: expecting a child" in prompt


def test_output_instructions_are_embedded():
    prompt = prompts.render_optimize_budget_prompt(OPTIMIZE_INPUT)
    assert "Do not use markdown like '*' or '-' for lists within string fields" in prompt
    assert "total optimized spending + savings should not exceed income" in prompt


def test_chat_without_context_has_no_chart_instructions():
    prompt = prompts.render_chatbot_prompt(FinancialAdviceChatbotInput(question="How can I save more?"))
    assert "User's Question: How can I save more?" in prompt
    assert "#VISUALIZATIONS" not in prompt
    assert "User's Financial Context" not in prompt
    assert "do not include a 'chart' field" in prompt


def test_chat_with_context_embeds_context_and_chart_instructions():
    prompt = prompts.render_chatbot_prompt(FinancialAdviceChatbotInput(
        question="Show me my spending breakdown chart",
        financial_context="Top Spending Categories:\n- Food: $300.00",
    ))
    assert "- Food: $300.00" in prompt
    assert "#VISUALIZATIONS" in prompt
    assert "Do not invent data." in prompt


def test_description_is_substituted_verbatim():
    prompt = prompts.render_suggest_categories_prompt(
        SuggestTransactionCategoriesInput(transaction_description="Starbucks {Coffee}")
    )
    assert "Transaction Description: Starbucks {Coffee}" in prompt


def test_every_placeholder_is_filled():
    rendered = {
        "suggest_categories": prompts.render_suggest_categories_prompt(
            SuggestTransactionCategoriesInput(transaction_description="Uber ride")
        ),
        "adjust_budget": prompts.render_adjust_budget_prompt(ADJUST_INPUT),
        "optimize_budget": prompts.render_optimize_budget_prompt(OPTIMIZE_INPUT),
        "financial_advice_chat": prompts.render_chatbot_prompt(
            FinancialAdviceChatbotInput(question="Hi", financial_context="ctx")
        ),
    }
    for flow_name, names in prompts.PLACEHOLDERS.items():
        assert names
        for name in names:
            assert "{" + name + "}" not in rendered[flow_name]


def test_format_number():
    assert prompts.format_number(500.0) == "500"
    assert prompts.format_number(0.25) == "0.25"
    assert prompts.format_number(7) == "7"
