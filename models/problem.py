from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ProblemMode(str, Enum):
    """
    Problem category chosen before any input.
    The value is the label the tutor sees inside prompts.
    """
    LIMITS = "Limites"
    DERIVATIVES = "Derivadas"
    INTEGRALS = "Integrais"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw) -> "ProblemMode":
        """
        Accepts the enum name (any case) or the display label.
        Raises ValueError for anything else.
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            raise ValueError(f"Unknown mode: {raw!r}")

        key = raw.strip()
        for mode in cls:
            if key.upper() == mode.name or key.lower() == mode.value.lower():
                return mode
        raise ValueError(f"Unknown mode: {raw!r}")


@dataclass(frozen=True)
class ProblemInput:
    """
    What the user submitted: editor LaTeX and/or a data-URL photo.
    """
    text: str = ""
    image: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.text.strip() and not self.image

    def describe(self) -> str:
        # follow-ups only see the text, so flag that a photo was part of it
        return self.text + (" [Com Imagem]" if self.image else "")
