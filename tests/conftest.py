import os

os.environ.setdefault("GEMINI_API_KEY", "")
os.environ.setdefault("SEED_DEMO_DATA", "false")

from typing import Any, List, Optional

import pytest
from fastapi.testclient import TestClient
from pydantic_ai.messages import ModelResponse, TextPart, ToolCallPart, UserPromptPart # type: ignore
from pydantic_ai.models.function import AgentInfo, FunctionModel # type: ignore

from core.flows import FlowInvoker, get_flow_invoker
from main import app
from store import FinanceStore, get_store


class ScriptedModel:
    """
    A FunctionModel that answers every call the same way and records the prompts it received.

    Exactly one of `payload` (returned as the output tool call), `text` (returned as plain text)
    or `error` (raised) is used.
    """

    def __init__(self, payload: Any = None, text: Optional[str] = None, error: Optional[Exception] = None):
        self.payload = payload
        self.text = text
        self.error = error
        self.prompts: List[str] = []
        self.model = FunctionModel(self._respond)

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def _respond(self, messages, info: AgentInfo) -> ModelResponse:
        self.prompts.append("\n".join(
            part.content for message in messages for part in message.parts
            if isinstance(part, UserPromptPart)
        ))
        if self.error is not None:
            raise self.error
        if self.text is not None:
            return ModelResponse(parts=[TextPart(self.text)])
        return ModelResponse(parts=[ToolCallPart(info.output_tools[0].name, self.payload)])


@pytest.fixture
def scripted_model():
    return ScriptedModel


@pytest.fixture
def store():
    return FinanceStore()


@pytest.fixture
def demo_store():
    return FinanceStore.with_demo_data()


@pytest.fixture
def make_client():
    """Returns a factory building a TestClient over a given store and scripted model."""

    def _make(store: FinanceStore, model: Optional[ScriptedModel] = None) -> TestClient:
        invoker = FlowInvoker(model=model.model if model else None, timeout=5, max_attempts=1)
        app.dependency_overrides[get_store] = lambda: store
        app.dependency_overrides[get_flow_invoker] = lambda: invoker
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
