import json

import pytest
from fastapi.testclient import TestClient

from app.server import app
import app.routes.learning_plan as learning_plan_route

PLAN_HTML = "<h2>Arithmetic</h2><p>Addition combines two numbers.</p>"


def quiz_json(count: int, **overrides) -> str:
    """A well-formed quiz response with ``count`` questions."""
    quiz = []
    for i in range(count):
        q = {
            "question": f"Model question {i + 1}?",
            "options": ["A", "B", "C", "D"],
            "correct_answer": i % 4,
        }
        q.update(overrides)
        quiz.append(q)
    return json.dumps({"quiz": quiz})


class FakeTextGenerator:
    """Returns scripted completions in order and records every prompt."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts: list[str] = []

    async def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def error_log():
    log = app.state.error_log
    log.clear()
    yield log
    log.clear()


@pytest.fixture
def client(error_log):
    return TestClient(app)


@pytest.fixture
def use_generator(monkeypatch):
    """Route the learning-plan endpoint to a scripted generator."""

    def _use(*responses) -> FakeTextGenerator:
        fake = FakeTextGenerator(*responses)
        monkeypatch.setattr(learning_plan_route, "build_text_generator", lambda: fake)
        return fake

    return _use
