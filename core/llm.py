from typing import Any, Optional

from pydantic_ai.models import Model # type: ignore
from pydantic_ai.models.google import GoogleModel, GoogleModelSettings # type: ignore
from pydantic_ai.providers.google import GoogleProvider # type: ignore

import config

ai_model: Optional[Model] = None

model_settings = GoogleModelSettings(
    google_thinking_config={
        "include_thoughts": False,
        "thinking_budget": 0
    }
)


def get_ai_model() -> Optional[Any]:
    """
    Returns the shared Gemini model, creating it on first use.

    Returns None when GEMINI_API_KEY is not configured; flows invoked without a model
    answer with their fallback output instead of raising.
    The return type is hinted as 'Any' so the pydantic-ai model object stays out of
    FastAPI's OpenAPI schema generation.
    """
    global ai_model
    if ai_model is None:
        if not config.GEMINI_API_KEY:
            print("Error: GEMINI_API_KEY must be set in config.py or environment variables. AI flows will fall back.")
            return None
        try:
            ai_model = GoogleModel(config.GEMINI_MODEL, provider=GoogleProvider(api_key=config.GEMINI_API_KEY))
            print(f"Gemini model '{config.GEMINI_MODEL}' initialized.")
        except Exception as e:
            print(f"Error initializing Gemini model '{config.GEMINI_MODEL}': {e}")
            return None
    return ai_model


def init_ai_model():
    """
    Initializes the Gemini model. Can be called at application startup.
    """
    if ai_model is None:
        get_ai_model()
    print("AI model initialization check complete.")
