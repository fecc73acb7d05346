"""Error types raised by the learning-plan pipeline."""


class LearningPlanError(Exception):
    """Base class for learning-plan failures."""


class InvalidRequest(LearningPlanError):
    """The request body is missing or does not hold an incorrectAnswers array."""


class ConfigurationError(LearningPlanError):
    """The upstream model credential is not configured."""


class UpstreamParseFailure(LearningPlanError):
    """The model's quiz response could not be parsed or validated.

    Always recovered inside the generator by switching to the fallback bank.
    """
