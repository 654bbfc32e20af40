from typing import Any
from fastapi import APIRouter, Depends

import models
import services
from store import get_store

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"]
)

@router.get("/summary",
            response_model=models.DashboardSummary,
            summary="Income, expenses and budget alerts",
            description="All-time totals, per-category totals and the budgets above 80% of their limit.")
async def get_dashboard_summary_route(store: Any = Depends(get_store)):
    return await services.build_dashboard_summary(store=store)
