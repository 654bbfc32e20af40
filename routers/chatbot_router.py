# ================================================
# FILE: routers/chatbot_router.py
# ================================================
import time
from typing import Any

from fastapi import APIRouter, Depends, status, Body

import models
import services
from core import actions
from core.flows import FlowInvoker, get_flow_invoker
from store import get_store

router = APIRouter(
    prefix="/chatbot",
    tags=["Financial Advice Chatbot"],
)

@router.post(
    "/messages",
    response_model=models.ChatMessage,
    response_model_exclude_none=True,
    summary="Ask the financial advice chatbot",
    description="Answers a financial question, using a summary of the stored transactions as context unless "
                "`includeFinancialContext` is false. The reply may carry chart data.",
    status_code=status.HTTP_200_OK
)
async def send_chat_message_endpoint(
    chat_request: models.ChatRequest = Body(...),
    store: Any = Depends(get_store),
    invoker: FlowInvoker = Depends(get_flow_invoker)
):
    financial_context = None
    if chat_request.include_financial_context:
        financial_context = services.generate_financial_context(store.transactions, store.currency)

    bot_response = await actions.get_chatbot_response_action(invoker, {
        "question": chat_request.question,
        "financialContext": financial_context,
    })

    timestamp = int(time.time() * 1000)
    return models.ChatMessage(
        id=f"{timestamp}-ai",
        text=bot_response.answer,
        sender="ai",
        timestamp=timestamp,
        chart=bot_response.chart,
    )
