"""
Streaming relay schemas.

Outcome of relaying a token stream to the transport.

Dependencies: pydantic
System role: Streaming protocol schemas
"""

from enum import Enum

from pydantic import BaseModel


class RelayOutcome(str, Enum):
    """How a relayed stream ended."""

    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class RelaySummary(BaseModel):
    """
    Final state of a relayed stream.

    Attributes:
        outcome: Completion, failure or consumer cancellation
        text: Concatenation of every token delivered
        token_count: Number of tokens delivered
        error: Error message when outcome is FAILED
    """

    outcome: RelayOutcome
    text: str = ""
    token_count: int = 0
    error: str | None = None
