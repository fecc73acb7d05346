"""Quiz endpoints: CSV import preview, attempt analysis, and results report."""

import logging
from urllib.parse import quote

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from app.models.quiz import (
    CSVImportRequest,
    CSVImportResponse,
    QuizAnalysis,
    QuizAttemptRequest,
)
from app.services.csv_import import parse_quiz_csv
from app.services.quiz_results import analyze_attempt, build_results_report

logger = logging.getLogger(__name__)

router = APIRouter(tags=["quiz"])


# ── Helpers ──────────────────────────────────────────────────────────

def _analyze(body: QuizAttemptRequest) -> dict:
    if not body.questions:
        raise HTTPException(status_code=400, detail="Quiz has no questions")
    try:
        return analyze_attempt([q.model_dump() for q in body.questions], body.answers)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


# ── Admin: quiz authoring ────────────────────────────────────────────

@router.post("/api/quizzes/import-csv", response_model=CSVImportResponse)
async def import_quiz_csv(body: CSVImportRequest):
    """
    Parse an uploaded quiz CSV into questions for review before saving.

    Format: Question,Option1,Option2,Option3,Option4,CorrectAnswer[,Category]
    """
    result = parse_quiz_csv(body.csv_text, default_category=body.default_category)

    if not result.questions:
        raise HTTPException(status_code=400, detail="No valid questions found in CSV")

    return {
        "questions": result.questions,
        "skipped_lines": result.skipped_lines,
        "count": len(result.questions),
    }


# ── Results ──────────────────────────────────────────────────────────

@router.post("/api/quiz-results/analyze", response_model=QuizAnalysis)
async def analyze_quiz_attempt(body: QuizAttemptRequest):
    """Score an attempt and list the missed questions for the learning plan."""
    return _analyze(body)


@router.post("/api/quiz-results/report")
async def quiz_results_report(body: QuizAttemptRequest):
    """Download the plain-text results report for an attempt."""
    analysis = _analyze(body)
    content, filename = build_results_report(
        body.quiz_title,
        analysis,
        completed_at=body.completed_at,
        time_taken=body.time_taken,
    )
    return PlainTextResponse(
        content,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )
