# ================================================
# FILE: routers/planner_router.py
# ================================================
from fastapi import APIRouter, Depends, status, Body

from core import actions
from core.flows import FlowInvoker, get_flow_invoker
from core.schemas import AdjustBudgetInput, AdjustBudgetOutput, OptimizeBudgetInput, OptimizeBudgetOutput

router = APIRouter(
    prefix="/planner",
    tags=["Budget Planner"],
)

@router.post(
    "/optimize",
    response_model=OptimizeBudgetOutput,
    response_model_exclude_none=True,
    summary="Generate an optimized budget plan",
    description="Runs the budget optimizer flow: optimized spending, recommended savings rate, investment suggestions, "
                "actionable steps, warnings and goal analysis. If the AI fails, the current spending and savings rate "
                "are returned unchanged with an apology summary.",
    status_code=status.HTTP_200_OK
)
async def optimize_budget_endpoint(
    planner_input: OptimizeBudgetInput = Body(...),
    invoker: FlowInvoker = Depends(get_flow_invoker)
):
    print(f"Budget plan requested for income {planner_input.income} with {len(planner_input.current_spending)} spending categories.")
    return await actions.get_budget_plan_action(invoker, planner_input)


@router.post(
    "/adjust",
    response_model=AdjustBudgetOutput,
    summary="Recommend budget adjustments",
    description="Runs the budget adjustment flow: adjusted spending, recommended savings rate, investment allocation "
                "with rationale and a summary.",
    status_code=status.HTTP_200_OK
)
async def adjust_budget_endpoint(
    adjustment_input: AdjustBudgetInput = Body(...),
    invoker: FlowInvoker = Depends(get_flow_invoker)
):
    return await actions.get_budget_adjustment_action(invoker, adjustment_input)
