# ================================================
# FILE: routers/transactions_router.py
# ================================================
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status, Body

import models
import services
from core import actions
from core.flows import FlowInvoker, get_flow_invoker
from core.schemas import SuggestTransactionCategoriesOutput, TransactionType
from store import get_store

router = APIRouter(
    prefix="/transactions",
    tags=["Transactions"]
)

@router.get("",
            response_model=List[models.Transaction],
            summary="List transactions",
            description="Returns all transactions, newest first. Optionally filter by type and category.")
async def list_transactions_route(
    transaction_type: Optional[TransactionType] = Query(None, alias="type", description="Income or Expense"),
    category: Optional[str] = Query(None, description="Category name (case-insensitive)"),
    store: Any = Depends(get_store)
):
    return await services.list_transactions(store=store, transaction_type=transaction_type, category=category)


@router.post("",
             response_model=models.Transaction,
             status_code=status.HTTP_201_CREATED,
             summary="Record a transaction",
             description="Adds an income or expense. The id is generated and the transaction is placed first in the list.")
async def create_transaction_route(
    transaction_in: models.TransactionCreate,
    store: Any = Depends(get_store)
):
    try:
        return await services.create_transaction(transaction_in=transaction_in, store=store)
    except HTTPException as http_exc:
        raise http_exc
    except Exception as e:
        print(f"Unexpected error in create_transaction_route: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("/suggest_categories",
             response_model=SuggestTransactionCategoriesOutput,
             summary="Suggest categories for a transaction description",
             description="Asks the AI for up to 3 categories with confidence scores. "
                         "Falls back to a single 'Uncategorized' suggestion if the AI is unavailable.")
async def suggest_categories_route(
    request: models.CategorySuggestionRequest = Body(...),
    invoker: FlowInvoker = Depends(get_flow_invoker)
):
    return await actions.get_ai_category_suggestion_action(
        invoker, {"transactionDescription": request.description}
    )


@router.get("/{transaction_id}",
            response_model=models.Transaction,
            summary="Get a transaction")
async def get_transaction_route(
    transaction_id: str = Path(..., title="The ID of the transaction"),
    store: Any = Depends(get_store)
):
    transaction = await services.fetch_transaction(transaction_id=transaction_id, store=store)
    if not transaction:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Transaction with ID {transaction_id} not found."
        )
    return transaction


@router.put("/{transaction_id}",
            response_model=models.Transaction,
            summary="Update a transaction",
            description="Only provided fields are changed. Budget spending reflects the change on the next read.")
async def update_transaction_route(
    transaction_id: str = Path(..., title="The ID of the transaction to update"),
    transaction_update: models.TransactionUpdate = Body(...),
    store: Any = Depends(get_store)
):
    updated = await services.update_transaction(
        transaction_id=transaction_id, transaction_update=transaction_update, store=store
    )
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Transaction with ID {transaction_id} not found for update."
        )
    return updated


@router.delete("/{transaction_id}",
               status_code=status.HTTP_200_OK,
               summary="Delete a transaction")
async def delete_transaction_route(
    transaction_id: str = Path(..., title="The ID of the transaction to delete"),
    store: Any = Depends(get_store)
):
    success = await services.delete_transaction(transaction_id=transaction_id, store=store)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Transaction with ID {transaction_id} not found for deletion."
        )
    return {"message": f"Transaction with ID {transaction_id} deleted successfully."}
