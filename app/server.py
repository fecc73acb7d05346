import logging

from fastapi import FastAPI

from app.config import settings
from app.services.error_log import ErrorLog

logger = logging.getLogger(__name__)

app = FastAPI(title="Quiz Learning Plan Service")

# One error log per process, shared by reference through app.state
app.state.error_log = ErrorLog(capacity=settings.error_log_capacity)

# Import and register routes
from app.routes.learning_plan import router as learning_plan_router
from app.routes.quiz import router as quiz_router
from app.routes.errors import router as errors_router

app.include_router(learning_plan_router)
app.include_router(quiz_router)
app.include_router(errors_router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
