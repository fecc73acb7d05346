"""
quiz_results.py - Quiz attempt analysis and the downloadable results report

Scores an attempt question by question, groups performance by category, and
collects the missed questions that feed the learning-plan generator.
"""

import logging
import math
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

STRONG_AREA_THRESHOLD = 80
WEAK_AREA_THRESHOLD = 60


def _percent(correct: int, total: int) -> int:
    """Whole-number percentage, halves rounded up."""
    if total == 0:
        return 0
    return math.floor(correct / total * 100 + 0.5)


def analyze_attempt(questions: List[Dict[str, Any]], answers: List[Optional[int]]) -> Dict[str, Any]:
    """
    Score an attempt.

    Args:
        questions: Quiz questions with options, correct_answer and category.
        answers: Selected option index per question (None = unanswered).
            Shorter than ``questions`` means the rest were left unanswered.

    Returns:
        dict with score, total_questions, percentage, answers,
        category_performance, strong_areas, weak_areas, incorrect_answers
    """
    if len(answers) > len(questions):
        raise ValueError(
            f"Got {len(answers)} answers for {len(questions)} questions"
        )

    detailed = []
    category_stats: Dict[str, Dict[str, int]] = {}

    for index, q in enumerate(questions):
        user_answer = answers[index] if index < len(answers) else None
        is_correct = user_answer is not None and user_answer == q["correct_answer"]
        category = q.get("category") or "General"

        stats = category_stats.setdefault(category, {"correct": 0, "total": 0})
        stats["total"] += 1
        if is_correct:
            stats["correct"] += 1

        detailed.append({
            "question": q["question"],
            "options": list(q["options"]),
            "user_answer": user_answer,
            "correct_answer": q["correct_answer"],
            "is_correct": is_correct,
            "category": category,
        })

    performance = [
        {
            "category": category,
            "correct": stats["correct"],
            "total": stats["total"],
            "percentage": _percent(stats["correct"], stats["total"]),
        }
        for category, stats in category_stats.items()
    ]

    score = sum(1 for a in detailed if a["is_correct"])

    return {
        "score": score,
        "total_questions": len(questions),
        "percentage": _percent(score, len(questions)),
        "answers": detailed,
        "category_performance": performance,
        "strong_areas": [c for c in performance if c["percentage"] >= STRONG_AREA_THRESHOLD],
        "weak_areas": [c for c in performance if c["percentage"] < WEAK_AREA_THRESHOLD],
        "incorrect_answers": [a["question"] for a in detailed if not a["is_correct"]],
    }


def _report_date(completed_at: Optional[str]) -> date:
    if completed_at:
        try:
            return datetime.fromisoformat(completed_at.replace("Z", "+00:00")).date()
        except ValueError:
            logger.warning("Unparseable completed_at %r, using today", completed_at)
    return date.today()


def report_filename(quiz_title: str, report_date: date) -> str:
    slug = re.sub(r"\s+", "-", quiz_title.strip()).lower()
    return f"quiz-results-{slug}-{report_date.isoformat()}.txt"


def build_results_report(
    quiz_title: str,
    analysis: Dict[str, Any],
    completed_at: Optional[str] = None,
    time_taken: Optional[int] = None,
) -> tuple[str, str]:
    """Render the plain-text results report. Returns (content, filename)."""
    report_date = _report_date(completed_at)
    lines = [
        "Quiz Results Report",
        "==================",
        "",
        f"Quiz: {quiz_title}",
        f"Date: {report_date.isoformat()}",
    ]
    if time_taken is not None:
        lines.append(f"Time Taken: {time_taken // 60}:{time_taken % 60:02d}")
    lines += [
        "",
        "Overall Performance",
        "------------------",
        f"Score: {analysis['score']}/{analysis['total_questions']} ({analysis['percentage']}%)",
        "",
    ]

    if analysis["answers"]:
        lines += ["Detailed Question Analysis", "-------------------------"]
        for i, answer in enumerate(analysis["answers"], start=1):
            options = answer["options"]
            lines.append("")
            lines.append(f"Question {i}: {'✓ CORRECT' if answer['is_correct'] else '✗ INCORRECT'}")
            lines.append(f"Q: {answer['question']}")
            lines.append(f"Category: {answer['category']}")
            user_answer = answer["user_answer"]
            if user_answer is not None and 0 <= user_answer < len(options):
                lines.append(f"Your Answer: {options[user_answer]}")
            else:
                lines.append("Your Answer: Not answered")
            lines.append(f"Correct Answer: {options[answer['correct_answer']]}")
            lines.append("-" * 40)

    lines += ["", "Category Performance", "-------------------"]
    for c in analysis["category_performance"]:
        lines.append(f"{c['category']}: {c['correct']}/{c['total']} ({c['percentage']}%)")

    lines += ["", f"Strong Areas (≥{STRONG_AREA_THRESHOLD}%)", "------------------"]
    if analysis["strong_areas"]:
        lines += [f"• {c['category']} ({c['percentage']}%)" for c in analysis["strong_areas"]]
    else:
        lines.append("None identified")

    lines += ["", f"Areas for Improvement (<{WEAK_AREA_THRESHOLD}%)", "---------------------------"]
    if analysis["weak_areas"]:
        lines += [f"• {c['category']} ({c['percentage']}%)" for c in analysis["weak_areas"]]
    else:
        lines.append("None identified")

    lines += ["", "Recommendations", "--------------"]
    if analysis["weak_areas"]:
        lines.append("Focus on improving: " + ", ".join(c["category"] for c in analysis["weak_areas"]))
    else:
        lines.append("Great job! Keep up the excellent work across all categories.")

    return "\n".join(lines) + "\n", report_filename(quiz_title, report_date)
