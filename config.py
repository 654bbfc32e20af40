import os
from dotenv import load_dotenv

load_dotenv()

GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# Seconds before a single model call is abandoned and the flow falls back.
AI_TIMEOUT_SECONDS: float = float(os.getenv("AI_TIMEOUT_SECONDS", "30"))
AI_MAX_ATTEMPTS: int = int(os.getenv("AI_MAX_ATTEMPTS", "2"))

SEED_DEMO_DATA: bool = os.getenv("SEED_DEMO_DATA", "true").lower() in ("1", "true", "yes")
DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "USD")

APP_VERSION = "0.3.0"
APP_TITLE = "FinGenie API"
APP_DESCRIPTION = "Personal finance API: transactions, category budgets, AI budget planning and a financial-advice chatbot."

if not GEMINI_API_KEY:
    print("CRITICAL ERROR: GEMINI_API_KEY is not set. AI flows will answer with their fallback responses.")

print(f"Config loaded: GEMINI_MODEL={GEMINI_MODEL}, AI_TIMEOUT_SECONDS={AI_TIMEOUT_SECONDS}, AI_MAX_ATTEMPTS={AI_MAX_ATTEMPTS}")
