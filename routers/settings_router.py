from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException, status, Body

import models
import services
from core.currency import CURRENCIES_LIST
from store import get_store

router = APIRouter(
    prefix="/settings",
    tags=["Settings"]
)

@router.get("/currencies",
            response_model=List[models.CurrencyOption],
            summary="List supported display currencies")
async def list_currencies_route():
    return [models.CurrencyOption(**c) for c in CURRENCIES_LIST]


@router.get("/currency",
            response_model=models.CurrencySetting,
            summary="Get the preferred display currency")
async def get_currency_route(store: Any = Depends(get_store)):
    return models.CurrencySetting(currency=await services.get_preferred_currency(store=store))


@router.put("/currency",
            response_model=models.CurrencySetting,
            summary="Set the preferred display currency",
            description="Used when formatting amounts, e.g. in the chatbot's financial context.")
async def set_currency_route(
    setting: models.CurrencySetting = Body(...),
    store: Any = Depends(get_store)
):
    currency = await services.set_preferred_currency(currency=setting.currency, store=store)
    if not currency:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported currency '{setting.currency}'."
        )
    return models.CurrencySetting(currency=currency)
