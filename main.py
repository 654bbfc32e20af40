from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import APP_TITLE, APP_DESCRIPTION, APP_VERSION
from core.exceptions import InputValidationError
from core.llm import init_ai_model
from routers import transactions_router, budgets_router, dashboard_router, planner_router, chatbot_router, settings_router
from store import init_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    print("Application startup: Initializing resources...")
    init_store()
    init_ai_model()
    print("Application startup complete.")
    yield


app = FastAPI(
    title=APP_TITLE,
    description=APP_DESCRIPTION,
    version=APP_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InputValidationError)
async def input_validation_error_handler(request: Request, exc: InputValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "flow": exc.flow_name, "violations": exc.violations},
    )


app.include_router(transactions_router.router)
app.include_router(budgets_router.router)
app.include_router(dashboard_router.router)
app.include_router(planner_router.router)
app.include_router(chatbot_router.router)
app.include_router(settings_router.router)


@app.get("/", summary="Root Endpoint", tags=["General"])
async def read_root():
    return {
        "message": f"Welcome to the {APP_TITLE}",
        "version": APP_VERSION,
        "documentation": "/docs"
    }

if __name__ == "__main__":
    print(f"Starting Uvicorn server for {APP_TITLE} on http://127.0.0.1:8000")
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
