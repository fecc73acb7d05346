"""
learning_plan_generator.py - Personalized learning plan and follow-up quiz

Takes the questions a user answered incorrectly and makes two sequential model
calls: one for an HTML learning plan, one for a short multiple-choice quiz
built only from that plan. The model is trusted for prose but not for
structure: the quiz response is cleaned and validated locally, and anything
that does not validate is replaced by a built-in question bank.
"""

import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from app.services.ai_client import TextGenerator
from app.services.error_log import ErrorLog
from app.services.errors import UpstreamParseFailure
from app.services.prompts import load_prompt

logger = logging.getLogger(__name__)

MAX_FOLLOW_UP_QUESTIONS = 5
OPTIONS_PER_QUESTION = 4

# Generic study-habit questions used when the model's quiz can't be used.
# The first three match the long-standing bank; the last two let a
# five-question request still be filled.
FALLBACK_QUESTIONS: List[Dict[str, Any]] = [
    {
        "question": "Which of these is a good study habit?",
        "options": [
            "Review material regularly and take practice tests",
            "Only study the night before an exam",
            "Memorize without understanding concepts",
            "Skip reviewing incorrect answers",
        ],
        "correct_answer": 0,
    },
    {
        "question": "What is the best approach when you make mistakes on a quiz?",
        "options": [
            "Ignore them and move on",
            "Analyze the mistakes and understand the concepts",
            "Just memorize the correct answers",
            "Avoid similar topics in the future",
        ],
        "correct_answer": 1,
    },
    {
        "question": "How should you approach learning new concepts?",
        "options": [
            "Rush through to cover more material",
            "Focus only on memorization",
            "Take time to understand and practice applications",
            "Skip the difficult parts",
        ],
        "correct_answer": 2,
    },
    {
        "question": "When is the best time to revisit a topic you found difficult?",
        "options": [
            "Never, once is enough",
            "Only right before the final exam",
            "Whenever you happen to remember it",
            "A few days later, and again at spaced intervals",
        ],
        "correct_answer": 3,
    },
    {
        "question": "What helps most when a concept still feels unclear after reading?",
        "options": [
            "Explaining it in your own words or working through an example",
            "Re-reading the same paragraph many times",
            "Moving on and hoping it makes sense later",
            "Copying the definition word for word",
        ],
        "correct_answer": 0,
    },
]

_LEADING_FENCE_RE = re.compile(r"^\s*```(?:json)?[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\n?```\s*$")


@dataclass
class LearningPlanResult:
    learning_plan: str
    new_quiz_questions: List[Dict[str, Any]] = field(default_factory=list)
    used_fallback: bool = False

    def to_response(self) -> Dict[str, Any]:
        return {
            "learningPlan": self.learning_plan,
            "newQuizQuestions": self.new_quiz_questions,
        }


def question_count(num_incorrect: int) -> int:
    """Half the number of incorrect answers, rounded up, capped at five."""
    return min(math.ceil(num_incorrect / 2), MAX_FOLLOW_UP_QUESTIONS)


def build_learning_plan_prompt(incorrect_answers: List[str]) -> str:
    template = load_prompt("learning_plan.yaml")["user_template"]
    numbered = "\n".join(f"{i}. {q}" for i, q in enumerate(incorrect_answers, start=1))
    return template.format(incorrect_answers=numbered)


def build_quiz_prompt(learning_plan: str, count: int) -> str:
    template = load_prompt("follow_up_quiz.yaml")["user_template"]
    return template.format(learning_plan=learning_plan, question_count=count)


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` fence, a trailing ``` fence and outer whitespace."""
    text = _LEADING_FENCE_RE.sub("", text, count=1)
    text = _TRAILING_FENCE_RE.sub("", text, count=1)
    return text.strip()


def _is_valid_question(q: Any) -> bool:
    if not isinstance(q, dict):
        return False
    question = q.get("question")
    if not isinstance(question, str) or not question.strip():
        return False
    options = q.get("options")
    if not isinstance(options, list) or len(options) != OPTIONS_PER_QUESTION:
        return False
    if not all(isinstance(o, str) for o in options):
        return False
    answer = q.get("correct_answer")
    # bool is an int subclass; true/false is not an index
    if isinstance(answer, bool) or not isinstance(answer, int):
        return False
    return 0 <= answer < OPTIONS_PER_QUESTION


def parse_quiz_response(raw: str, count: int) -> List[Dict[str, Any]]:
    """Parse and validate the model's quiz JSON.

    Returns exactly ``count`` questions. Raises UpstreamParseFailure when the
    text isn't JSON, has no non-empty ``quiz`` list, holds fewer than
    ``count`` items, or any item is malformed. A batch is accepted whole or
    not at all.
    """
    cleaned = strip_code_fences(raw or "")
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise UpstreamParseFailure(f"Quiz response is not valid JSON: {exc}") from exc

    quiz = parsed.get("quiz") if isinstance(parsed, dict) else None
    if not isinstance(quiz, list) or not quiz:
        raise UpstreamParseFailure("Invalid quiz structure")

    for q in quiz:
        if not _is_valid_question(q):
            raise UpstreamParseFailure("Invalid question structure")

    if len(quiz) < count:
        raise UpstreamParseFailure(f"Expected {count} questions, got {len(quiz)}")

    return [
        {
            "question": q["question"],
            "options": list(q["options"]),
            "correct_answer": q["correct_answer"],
        }
        for q in quiz[:count]
    ]


def fallback_questions(count: int) -> List[Dict[str, Any]]:
    return [
        {**q, "options": list(q["options"])}
        for q in FALLBACK_QUESTIONS[:count]
    ]


async def generate_learning_plan(
    incorrect_answers: List[str],
    generator: TextGenerator,
    error_log: Optional[ErrorLog] = None,
) -> LearningPlanResult:
    """
    Build a learning plan and follow-up quiz for a set of missed questions.

    Args:
        incorrect_answers: Descriptions of the questions the user got wrong.
        generator: Text-generation capability, called once or twice.
        error_log: Optional log that receives quiz parse failures.

    Returns:
        LearningPlanResult. Model or network errors propagate; a bad quiz
        response never does.
    """
    learning_plan = await generator.generate_text(build_learning_plan_prompt(incorrect_answers))

    count = question_count(len(incorrect_answers))
    if count == 0:
        # Nothing to practise, so the quiz call is skipped entirely
        logger.info("No incorrect answers supplied, skipping follow-up quiz generation")
        return LearningPlanResult(learning_plan=learning_plan)

    raw_quiz = await generator.generate_text(build_quiz_prompt(learning_plan, count))

    try:
        questions = parse_quiz_response(raw_quiz, count)
    except UpstreamParseFailure as exc:
        logger.warning("Failed to parse quiz JSON: %s", exc)
        logger.warning("Raw response: %s", raw_quiz)
        if error_log is not None:
            error_log.log(exc, context={"raw_response": raw_quiz}, source="learning-plan")
        return LearningPlanResult(
            learning_plan=learning_plan,
            new_quiz_questions=fallback_questions(count),
            used_fallback=True,
        )

    logger.info("Generated learning plan with %d follow-up questions", len(questions))
    return LearningPlanResult(learning_plan=learning_plan, new_quiz_questions=questions)
