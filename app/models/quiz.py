from pydantic import BaseModel, Field, field_validator
from typing import Optional


class FollowUpQuestion(BaseModel):
    question: str
    options: list[str]
    correct_answer: int


class LearningPlanRequest(BaseModel):
    incorrectAnswers: list[str]

    @field_validator("incorrectAnswers", mode="before")
    @classmethod
    def _strings_only(cls, value):
        # Reject coercion: every element must already be a string
        if isinstance(value, list) and not all(isinstance(v, str) for v in value):
            raise ValueError("incorrectAnswers must contain only strings")
        return value


class LearningPlanResponse(BaseModel):
    learningPlan: str
    newQuizQuestions: list[FollowUpQuestion] = []


class QuizQuestion(BaseModel):
    question: str
    options: list[str] = Field(min_length=4, max_length=4)
    correct_answer: int = Field(ge=0, le=3)
    category: str = "General"


class CSVImportRequest(BaseModel):
    csv_text: str
    default_category: str = "General"


class CSVImportResponse(BaseModel):
    questions: list[QuizQuestion] = []
    skipped_lines: list[int] = []
    count: int = 0


class QuizAttemptRequest(BaseModel):
    quiz_title: str = "Quiz"
    questions: list[QuizQuestion]
    # Selected option index per question, None when unanswered
    answers: list[Optional[int]] = []
    completed_at: Optional[str] = None
    # Seconds spent on the attempt
    time_taken: Optional[int] = None


class DetailedAnswer(BaseModel):
    question: str
    options: list[str]
    user_answer: Optional[int] = None
    correct_answer: int
    is_correct: bool
    category: str


class CategoryPerformance(BaseModel):
    category: str
    correct: int
    total: int
    percentage: int


class QuizAnalysis(BaseModel):
    score: int
    total_questions: int
    percentage: int
    answers: list[DetailedAnswer] = []
    category_performance: list[CategoryPerformance] = []
    strong_areas: list[CategoryPerformance] = []
    weak_areas: list[CategoryPerformance] = []
    incorrect_answers: list[str] = []


class ClientErrorReport(BaseModel):
    message: str
    stack: Optional[str] = None
    context: Optional[dict] = None
