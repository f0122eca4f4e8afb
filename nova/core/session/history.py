"""
Conversation history.

Ordered transcript of a session's turns, newest last. Rendering skips turns
that are still streaming or ended in an error, so prompts only ever see
finished exchanges.

Dependencies: nova.models.chat
System role: Prompt context from prior turns
"""

from nova.models.chat import ConversationTurn, Speaker, TurnStatus

SPEAKER_LABELS = {
    Speaker.USER: "User",
    Speaker.ASSISTANT: "Nova",
}


class ConversationHistory:
    """
    Append-only transcript of conversation turns.

    All mutations are synchronous, so on a single event loop each append is
    atomic with respect to other requests.
    """

    def __init__(self, max_turns: int | None = None) -> None:
        """
        Initialize an empty history.

        Args:
            max_turns: Most recent renderable turns included by render() (None = all)
        """
        self._turns: list[ConversationTurn] = []
        self._max_turns = max_turns

    @property
    def turns(self) -> list[ConversationTurn]:
        """Snapshot of every turn, including pending and errored ones."""
        return list(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def append(self, turn: ConversationTurn) -> ConversationTurn:
        self._turns.append(turn)
        return turn

    def begin_turn(self, question: str) -> ConversationTurn:
        """
        Record a question and reserve a pending assistant turn for its answer.

        Both turns stay pending, and out of render(), until the answer is
        completed or failed.

        Args:
            question: User question

        Returns:
            ConversationTurn: The pending assistant turn to complete or fail later
        """
        self.append(
            ConversationTurn(speaker=Speaker.USER, text=question, status=TurnStatus.PENDING)
        )
        return self.append(
            ConversationTurn(speaker=Speaker.ASSISTANT, status=TurnStatus.PENDING)
        )

    def complete(self, turn: ConversationTurn, text: str) -> None:
        turn.text = text
        self._settle(turn, TurnStatus.COMPLETE)

    def fail(self, turn: ConversationTurn, text: str = "") -> None:
        turn.text = text
        self._settle(turn, TurnStatus.ERROR)

    def _settle(self, turn: ConversationTurn, status: TurnStatus) -> None:
        # The question belongs to the same exchange as its answer
        turn.status = status
        for position, candidate in enumerate(self._turns):
            if candidate is turn:
                if position > 0:
                    question = self._turns[position - 1]
                    if question.speaker is Speaker.USER and question.status is TurnStatus.PENDING:
                        question.status = status
                break

    def renderable(self) -> list[ConversationTurn]:
        """Completed turns, limited to the configured window."""
        finished = [turn for turn in self._turns if turn.status is TurnStatus.COMPLETE]
        if self._max_turns is not None and self._max_turns > 0:
            return finished[-self._max_turns:]
        return finished

    def render(self) -> str:
        """
        Render completed turns as ``Label: text`` lines.

        Returns:
            str: Transcript text, empty string when nothing is renderable
        """
        lines = [
            f"{SPEAKER_LABELS[turn.speaker]}: {turn.text}" for turn in self.renderable()
        ]
        return "\n".join(lines)

    def clear(self) -> None:
        self._turns.clear()
