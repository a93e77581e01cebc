import logging
from typing import Optional

from intelligence.prompt_builder import build_follow_up_request, build_solve_request
from models.problem import ProblemInput, ProblemMode
from session.context import SessionContext

logger = logging.getLogger(__name__)

SOLVE_FAILED_REPLY = "Erro ao calcular. Tente novamente."
FOLLOW_UP_FAILED_REPLY = "Erro ao responder. Tente novamente."


class SessionError(ValueError):
    """A command was issued in a state that cannot accept it."""


class SessionController:
    """
    Drives one tutoring session:
    submit -> solution -> follow-ups, until reset or go_back.

    Every outcome of a model call lands in the session as display text,
    errors included. Invalid commands (empty input, call in flight) are
    ignored and return None.
    """

    def __init__(self, inference_client, mode: Optional[ProblemMode] = None):
        self.client = inference_client
        self.ctx = SessionContext(mode=mode)

    # -------------------------------------------------
    # Commands
    # -------------------------------------------------

    def select_mode(self, mode: ProblemMode):
        self.ctx.clear_problem()
        self.ctx.mode = mode
        logger.info(f"Mode selected: {mode.name}")

    def submit_problem(self, problem: ProblemInput) -> Optional[str]:
        ctx = self.ctx
        if ctx.mode is None:
            raise SessionError("Select a mode before submitting a problem.")

        if problem.is_empty():
            logger.debug("Ignoring empty submission")
            return None
        if ctx.busy:
            logger.warning(f"Ignoring submission while {ctx.state.value}")
            return None

        ctx.clear_problem()
        ctx.last_problem = problem
        ctx.solving = True
        generation = ctx.generation
        logger.info(
            f"Solving {ctx.mode.name} problem "
            f"(text={len(problem.text)} chars, image={bool(problem.image)})"
        )

        try:
            payload = build_solve_request(ctx.mode, problem.text, problem.image)
            solution = self.client.invoke(payload)
        except Exception:
            logger.exception("Solve request failed outside the inference client")
            solution = SOLVE_FAILED_REPLY

        if not ctx.is_current(generation):
            logger.info("Dropping solution for a problem that was cleared meanwhile")
            return None

        ctx.solution = solution
        ctx.solving = False
        return solution

    def send_follow_up(self, message: str) -> Optional[str]:
        ctx = self.ctx
        if not message or not message.strip():
            return None
        if ctx.solution is None or ctx.last_problem is None:
            logger.debug("Ignoring follow-up without a solution")
            return None
        if ctx.busy:
            logger.warning(f"Ignoring follow-up while {ctx.state.value}")
            return None

        # history is captured before the new turn; the question travels separately
        history = ctx.conversation.history()
        ctx.conversation.add_user(message)
        ctx.answering = True
        generation = ctx.generation

        try:
            payload = build_follow_up_request(
                ctx.last_problem.describe(),
                ctx.solution,
                history,
                message,
            )
            reply = self.client.invoke(payload)
        except Exception:
            logger.exception("Follow-up request failed outside the inference client")
            reply = FOLLOW_UP_FAILED_REPLY

        if not ctx.is_current(generation):
            logger.info("Dropping follow-up reply for a problem that was cleared meanwhile")
            return None

        ctx.conversation.add_model(reply)
        ctx.answering = False
        return reply

    def reset(self):
        self.ctx.clear_problem()
        logger.info("Session reset for a new problem")

    def go_back(self):
        self.ctx.clear_problem()
        self.ctx.mode = None
        logger.info("Session returned to mode selection")

    # -------------------------------------------------
    # Presentation view
    # -------------------------------------------------

    @property
    def mode(self):
        return self.ctx.mode

    @property
    def solution(self):
        return self.ctx.solution

    @property
    def turns(self):
        return self.ctx.conversation.history()

    @property
    def solving(self) -> bool:
        return self.ctx.solving

    @property
    def answering(self) -> bool:
        return self.ctx.answering

    def snapshot(self) -> dict:
        return self.ctx.snapshot()
