from functools import lru_cache
from pathlib import Path

import yaml

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"


@lru_cache(maxsize=None)
def load_prompt(name: str) -> dict:
    """Load a prompt YAML file from app/prompts."""
    with open(PROMPTS_DIR / name, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)
