"""Tests for quiz attempt analysis and the results report."""

from datetime import date

import pytest

from app.services.quiz_results import analyze_attempt, build_results_report, report_filename


def _q(text, correct, category="General"):
    return {
        "question": text,
        "options": ["w", "x", "y", "z"],
        "correct_answer": correct,
        "category": category,
    }


QUESTIONS = [
    _q("What is 2+2?", 1, "Math"),
    _q("What is 3*3?", 2, "Math"),
    _q("Capital of France?", 0, "Geography"),
    _q("Capital of Spain?", 3, "Geography"),
    _q("Largest ocean?", 1, "Geography"),
]


class TestAnalyzeAttempt:

    def test_scores_and_categories(self):
        analysis = analyze_attempt(QUESTIONS, [1, 2, 0, 1, None])

        assert analysis["score"] == 3
        assert analysis["total_questions"] == 5
        assert analysis["percentage"] == 60
        assert analysis["category_performance"] == [
            {"category": "Math", "correct": 2, "total": 2, "percentage": 100},
            {"category": "Geography", "correct": 1, "total": 3, "percentage": 33},
        ]
        assert [c["category"] for c in analysis["strong_areas"]] == ["Math"]
        assert [c["category"] for c in analysis["weak_areas"]] == ["Geography"]

    def test_incorrect_answers_include_unanswered(self):
        analysis = analyze_attempt(QUESTIONS, [1, 2, 0, 1, None])
        assert analysis["incorrect_answers"] == ["Capital of Spain?", "Largest ocean?"]

    def test_short_answer_list_counts_as_unanswered(self):
        analysis = analyze_attempt(QUESTIONS, [1])
        assert analysis["score"] == 1
        assert analysis["answers"][4]["user_answer"] is None
        assert analysis["answers"][4]["is_correct"] is False
        assert len(analysis["incorrect_answers"]) == 4

    def test_too_many_answers(self):
        with pytest.raises(ValueError):
            analyze_attempt(QUESTIONS[:1], [0, 1])

    def test_percentage_rounds_half_up(self):
        questions = [_q("a", 0), _q("b", 0), _q("c", 0), _q("d", 0), _q("e", 0), _q("f", 0), _q("g", 0), _q("h", 0)]
        # 5/8 = 62.5%
        analysis = analyze_attempt(questions, [0, 0, 0, 0, 0, 1, 1, 1])
        assert analysis["percentage"] == 63

    def test_missing_category_is_general(self):
        q = _q("a", 0)
        q["category"] = ""
        analysis = analyze_attempt([q], [0])
        assert analysis["category_performance"][0]["category"] == "General"

    def test_boundaries(self):
        # 4/5 = 80% is strong; 3/5 = 60% is neither strong nor weak
        strong = [_q(str(i), 0, "S") for i in range(5)]
        middle = [_q(str(i), 0, "M") for i in range(5)]
        analysis = analyze_attempt(strong + middle, [0, 0, 0, 0, 1] + [0, 0, 0, 1, 1])
        assert [c["category"] for c in analysis["strong_areas"]] == ["S"]
        assert analysis["weak_areas"] == []


class TestResultsReport:

    def test_report_sections(self):
        analysis = analyze_attempt(QUESTIONS, [1, 2, 0, 1, None])
        content, filename = build_results_report(
            "General  Knowledge", analysis,
            completed_at="2025-07-09T10:15:00Z", time_taken=125,
        )

        assert content.startswith("Quiz Results Report\n==================\n")
        assert "Quiz: General  Knowledge" in content
        assert "Date: 2025-07-09" in content
        assert "Time Taken: 2:05" in content
        assert "Score: 3/5 (60%)" in content
        assert "Question 1: ✓ CORRECT" in content
        assert "Question 4: ✗ INCORRECT" in content
        assert "Q: Capital of Spain?\nCategory: Geography\nYour Answer: x\n" in content
        assert "Your Answer: Not answered" in content
        assert "Correct Answer: z" in content
        assert "Geography: 1/3 (33%)" in content
        assert "• Math (100%)" in content
        assert "Focus on improving: Geography" in content
        assert filename == "quiz-results-general-knowledge-2025-07-09.txt"

    def test_all_correct_report(self):
        analysis = analyze_attempt(QUESTIONS[:2], [1, 2])
        content, _ = build_results_report("Math", analysis, completed_at="2025-01-02")
        assert "Great job! Keep up the excellent work across all categories." in content
        assert "Time Taken" not in content

    def test_report_filename(self):
        assert report_filename(" My Quiz ", date(2025, 1, 31)) == "quiz-results-my-quiz-2025-01-31.txt"
