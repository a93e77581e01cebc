from dataclasses import dataclass
from typing import Literal

Role = Literal["user", "model"]

ROLE_LABELS = {
    "user": "Aluno",
    "model": "Professor",
}


@dataclass(frozen=True)
class ConversationTurn:
    role: Role
    content: str

    @property
    def label(self) -> str:
        return ROLE_LABELS[self.role]

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}
