from enum import Enum

from session.conversation import Conversation


class SessionState(str, Enum):
    NO_MODE = "no_mode"
    IDLE = "idle"
    AWAITING_SOLUTION = "awaiting_solution"
    SOLUTION_READY = "solution_ready"
    AWAITING_FOLLOW_UP = "awaiting_follow_up"


class SessionContext:
    """
    Problem-scoped state.
    Must persist across turns, reset on every new problem.
    """

    def __init__(self, mode=None):
        self.mode = mode

        # ProblemInput of the last submission, used to give follow-ups context
        self.last_problem = None
        self.solution = None
        self.conversation = Conversation()

        # Busy flags, at most one of them is set
        self.solving = False
        self.answering = False

        # Bumped on every clear; replies from an older generation are dropped
        self.generation = 0

    @property
    def busy(self) -> bool:
        return self.solving or self.answering

    @property
    def state(self) -> SessionState:
        if self.mode is None:
            return SessionState.NO_MODE
        if self.solving:
            return SessionState.AWAITING_SOLUTION
        if self.solution is None:
            return SessionState.IDLE
        if self.answering:
            return SessionState.AWAITING_FOLLOW_UP
        return SessionState.SOLUTION_READY

    def clear_problem(self):
        self.last_problem = None
        self.solution = None
        self.conversation.clear()
        self.solving = False
        self.answering = False
        self.generation += 1

    def is_current(self, generation: int) -> bool:
        return self.generation == generation

    def snapshot(self) -> dict:
        return {
            "mode": self.mode.name if self.mode else None,
            "mode_label": self.mode.label if self.mode else None,
            "state": self.state.value,
            "solution": self.solution,
            "messages": [turn.to_dict() for turn in self.conversation],
            "solving": self.solving,
            "answering": self.answering,
        }
