# intelligence/client.py

import base64
import logging
import os

from google import genai

from models.request import ImagePart, RequestPayload, TextPart

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

# Low temperature for precise math. Follow-ups use the service defaults.
SOLVE_TEMPERATURE = 0.2

CALL_PROFILES = {
    "solve": {
        "config": {"temperature": SOLVE_TEMPERATURE},
        "empty_reply": "Não foi possível gerar uma solução.",
        "error_reply": (
            "Desculpe, ocorreu um erro ao tentar resolver o problema. "
            "Verifique sua conexão ou tente novamente."
        ),
    },
    "follow_up": {
        "config": None,
        "empty_reply": "Não entendi sua dúvida, pode reformular?",
        "error_reply": "Erro ao processar sua dúvida.",
    },
}


def create_genai_client(api_key=None) -> genai.Client:
    key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    if not key:
        logger.warning("GEMINI_API_KEY is not set. Gemini calls will fail.")
    return genai.Client(api_key=key)


def to_genai_contents(payload: RequestPayload) -> list[dict]:
    parts = []
    for part in payload.parts:
        if isinstance(part, ImagePart):
            parts.append({
                "inline_data": {
                    "mime_type": part.media_type,
                    "data": base64.b64decode(part.data),
                }
            })
        elif isinstance(part, TextPart):
            parts.append({"text": part.text})
        else:
            raise TypeError(f"Unsupported request part: {part!r}")

    return [{"role": "user", "parts": parts}]


class InferenceClient:
    """
    Single best-effort call to Gemini per request.

    invoke() never raises: failures and empty replies become the fixed
    user-facing strings of the call profile.
    """

    def __init__(self, genai_client, model: str | None = None):
        self.genai_client = genai_client
        self.model = model or os.getenv("GEMINI_MODEL", DEFAULT_MODEL)

    def invoke(self, payload: RequestPayload) -> str:
        profile = CALL_PROFILES[payload.purpose]

        try:
            kwargs = {
                "model": self.model,
                "contents": to_genai_contents(payload),
            }
            if profile["config"]:
                kwargs["config"] = dict(profile["config"])

            response = self.genai_client.models.generate_content(**kwargs)
            text = getattr(response, "text", None)
        except Exception:
            logger.exception(f"Gemini {payload.purpose} call failed")
            return profile["error_reply"]

        if not text:
            logger.warning(f"Gemini returned no text for {payload.purpose} call")
            return profile["empty_reply"]

        return text
