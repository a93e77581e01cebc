from dataclasses import dataclass
from typing import Literal, Tuple, Union

Purpose = Literal["solve", "follow_up"]


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class ImagePart:
    """
    Inline image, still base64 text. Decoding happens at send time.
    """
    media_type: str
    data: str


Part = Union[TextPart, ImagePart]


@dataclass(frozen=True)
class RequestPayload:
    """
    One logical model request: ordered parts plus which call profile to use.
    """
    purpose: Purpose
    parts: Tuple[Part, ...]

    @property
    def text_parts(self) -> Tuple[TextPart, ...]:
        return tuple(p for p in self.parts if isinstance(p, TextPart))

    @property
    def image_parts(self) -> Tuple[ImagePart, ...]:
        return tuple(p for p in self.parts if isinstance(p, ImagePart))

    @property
    def text(self) -> str:
        return "".join(p.text for p in self.text_parts)
