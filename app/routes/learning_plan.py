"""Learning plan endpoint: AI study plan and follow-up quiz from missed questions.

Served at the hosted-function path the quiz results view calls. CORS headers
are set here rather than by middleware so the preflight and error responses
match what the browser client expects exactly.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from app.models.quiz import LearningPlanRequest, LearningPlanResponse
from app.routes.deps import get_error_log
from app.services.ai_client import build_text_generator
from app.services.error_log import ErrorLog
from app.services.errors import ConfigurationError, InvalidRequest
from app.services.learning_plan_generator import generate_learning_plan

logger = logging.getLogger(__name__)

router = APIRouter(tags=["learning-plan"])

LEARNING_PLAN_PATH = "/functions/v1/generate-learning-plan"

ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST",
    "Access-Control-Allow-Headers": ALLOW_HEADERS,
}
SUCCESS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": ALLOW_HEADERS,
}
ERROR_HEADERS = {
    "Access-Control-Allow-Origin": "*",
}

INVALID_BODY_MESSAGE = "Invalid request body. Expected 'incorrectAnswers' array."


# ── Helpers ──────────────────────────────────────────────────────────

def _error(status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=ERROR_HEADERS)


async def _parse_body(request: Request) -> LearningPlanRequest:
    try:
        payload = await request.json()
    except (ValueError, RecursionError) as exc:
        # ValueError covers bad JSON and bad encodings; RecursionError deep nesting
        raise InvalidRequest(INVALID_BODY_MESSAGE) from exc

    if not isinstance(payload, dict):
        raise InvalidRequest(INVALID_BODY_MESSAGE)

    try:
        return LearningPlanRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidRequest(INVALID_BODY_MESSAGE) from exc


# ── Endpoints ────────────────────────────────────────────────────────

@router.options(LEARNING_PLAN_PATH)
async def learning_plan_preflight():
    return PlainTextResponse("ok", headers=PREFLIGHT_HEADERS)


@router.post(LEARNING_PLAN_PATH, response_model=LearningPlanResponse)
async def create_learning_plan(request: Request, error_log: ErrorLog = Depends(get_error_log)):
    """
    Generate a learning plan and follow-up quiz.

    Body: {"incorrectAnswers": ["question text", ...]}
    Returns: {"learningPlan": "<html>", "newQuizQuestions": [...]}
    """
    try:
        body = await _parse_body(request)
    except InvalidRequest as exc:
        logger.info("Rejected learning plan request: %s", exc.__cause__ or exc)
        return _error(400, {"error": INVALID_BODY_MESSAGE})

    try:
        generator = build_text_generator()
    except ConfigurationError as exc:
        logger.error("Learning plan unavailable: %s", exc)
        error_log.log(exc, source="learning-plan")
        return _error(500, {"error": str(exc)})

    try:
        result = await generate_learning_plan(body.incorrectAnswers, generator, error_log=error_log)
    except Exception as exc:
        logger.error("Error in generate-learning-plan: %s", exc, exc_info=True)
        error_log.log(exc, context={"incorrect_answers": len(body.incorrectAnswers)}, source="learning-plan")
        return _error(500, {
            "error": "Internal server error",
            "details": str(exc) or type(exc).__name__,
        })

    return JSONResponse(content=result.to_response(), headers=SUCCESS_HEADERS)
