# intelligence/prompt_builder.py

import re
from typing import Iterable, Optional, Tuple

from intelligence.templates import load_prompt_template
from models.conversation import ConversationTurn
from models.problem import ProblemMode
from models.request import ImagePart, RequestPayload, TextPart

DEFAULT_MEDIA_TYPE = "image/jpeg"

DATA_URL_RE = re.compile(r"^data:(.+);base64,(.+)$")


def parse_image_data_url(image: str) -> Tuple[str, str]:
    """
    Split a `data:<mediaType>;base64,<payload>` string.

    Never fails:
    - malformed prefix but a comma present -> text after the first comma
    - no comma at all -> the whole string
    Media type falls back to image/jpeg in both cases.
    """
    match = DATA_URL_RE.match(image)
    if match:
        return match.group(1), match.group(2)

    _, sep, tail = image.partition(",")
    if sep:
        return DEFAULT_MEDIA_TYPE, tail.split(",", 1)[0]
    return DEFAULT_MEDIA_TYPE, image


def build_solve_request(
    mode: ProblemMode,
    text: str,
    image: Optional[str] = None,
) -> RequestPayload:
    parts = []

    if image:
        media_type, data = parse_image_data_url(image)
        parts.append(ImagePart(media_type=media_type, data=data))

    prompt = load_prompt_template("solve").format(mode=mode.label)
    if text:
        prompt += f"\n\nTexto/Equação fornecida pelo usuário: {text}"

    parts.append(TextPart(text=prompt))
    return RequestPayload(purpose="solve", parts=tuple(parts))


def render_transcript(history: Iterable[ConversationTurn]) -> str:
    return "".join(f"{turn.label}: {turn.content}\n" for turn in history)


def build_follow_up_request(
    original_problem: str,
    original_solution: str,
    history: Iterable[ConversationTurn],
    question: str,
) -> RequestPayload:
    context = (
        f"Contexto do Problema Original:\n{original_problem}\n\n"
        f"Solução Apresentada:\n{original_solution}\n\n"
    )

    transcript = render_transcript(history)
    if transcript:
        context += "Histórico da Conversa:\n" + transcript

    prompt = load_prompt_template("follow_up").format(question=question)

    return RequestPayload(
        purpose="follow_up",
        parts=(TextPart(text=context + "\n\n" + prompt),),
    )
