import logging

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Model used for both learning-plan calls. Provider is picked from the name.
    model_name: str = "gemini-2.5-flash"
    google_api_key: str = ""
    # Only needed when model_name routes to OpenAI or Anthropic
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    # Upper bound for a single model call, in seconds
    ai_timeout_seconds: float = 60.0
    # Number of entries kept by the in-process error log
    error_log_capacity: int = 50
    # When set, reading or clearing the error log requires X-Admin-Secret
    admin_secret: str = ""
    # Environment: "dev" (default) or "prod"
    env: str = "dev"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def log_level(self) -> int:
        """DEBUG while developing, INFO in prod."""
        return logging.DEBUG if self.env == "dev" else logging.INFO


def _load_settings() -> Settings:
    """Load settings.

    Missing API keys are not fatal here: the learning-plan endpoint reports
    them per request so the rest of the service keeps working.
    """
    return Settings()


settings = _load_settings()
