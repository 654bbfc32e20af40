# ================================================
# FILE: routers/budgets_router.py
# ================================================
from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException, Path, status, Body

import models
import services
from store import get_store

router = APIRouter(
    prefix="/budgets",
    tags=["Budgets"]
)

@router.get("",
            response_model=List[models.BudgetStatus],
            summary="List budgets with current spending",
            description="Each budget includes spending derived from the current Expense transactions of its category.")
async def list_budgets_route(store: Any = Depends(get_store)):
    return await services.list_budget_statuses(store=store)


@router.post("",
             response_model=models.BudgetStatus,
             status_code=status.HTTP_201_CREATED,
             summary="Create a category budget")
async def create_budget_route(
    budget_in: models.BudgetCreate,
    store: Any = Depends(get_store)
):
    try:
        return await services.create_budget(budget_in=budget_in, store=store)
    except HTTPException as http_exc:
        raise http_exc
    except Exception as e:
        print(f"Unexpected error in create_budget_route: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/{budget_id}",
            response_model=models.BudgetStatus,
            summary="Get a budget with current spending")
async def get_budget_route(
    budget_id: str = Path(..., title="The ID of the budget"),
    store: Any = Depends(get_store)
):
    budget = await services.fetch_budget_status(budget_id=budget_id, store=store)
    if not budget:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Budget with ID {budget_id} not found."
        )
    return budget


@router.put("/{budget_id}",
            response_model=models.BudgetStatus,
            summary="Update a budget",
            description="Only provided fields are changed.")
async def update_budget_route(
    budget_id: str = Path(..., title="The ID of the budget to update"),
    budget_update: models.BudgetUpdate = Body(...),
    store: Any = Depends(get_store)
):
    updated = await services.update_budget(budget_id=budget_id, budget_update=budget_update, store=store)
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Budget with ID {budget_id} not found for update."
        )
    return updated


@router.delete("/{budget_id}",
               status_code=status.HTTP_200_OK,
               summary="Delete a budget")
async def delete_budget_route(
    budget_id: str = Path(..., title="The ID of the budget to delete"),
    store: Any = Depends(get_store)
):
    success = await services.delete_budget(budget_id=budget_id, store=store)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Budget with ID {budget_id} not found for deletion."
        )
    return {"message": f"Budget with ID {budget_id} deleted successfully."}
