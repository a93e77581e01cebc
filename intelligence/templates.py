# intelligence/templates.py

from functools import lru_cache
from pathlib import Path

PROMPTS_DIR = Path(__file__).parent / "prompts"


@lru_cache(maxsize=None)
def load_prompt_template(name: str) -> str:
    """
    Loads a prompt template like:
    intelligence/prompts/solve.txt

    Templates use str.format placeholders, so literal braces are doubled.
    """
    path = PROMPTS_DIR / f"{name}.txt"

    if not path.exists():
        raise FileNotFoundError(f"Missing prompt template: {path}")

    return path.read_text(encoding="utf-8").strip()
