from models.conversation import ConversationTurn


class Conversation:
    """
    Ordered follow-up thread for the active problem.
    Append-only until cleared.
    """

    def __init__(self):
        self._turns = []

    def add_user(self, content: str) -> ConversationTurn:
        return self._append(ConversationTurn(role="user", content=content))

    def add_model(self, content: str) -> ConversationTurn:
        return self._append(ConversationTurn(role="model", content=content))

    def _append(self, turn):
        self._turns.append(turn)
        return turn

    def history(self) -> tuple:
        return tuple(self._turns)

    def clear(self):
        self._turns = []

    def __len__(self):
        return len(self._turns)

    def __iter__(self):
        return iter(tuple(self._turns))
