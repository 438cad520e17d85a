"""Human-in-the-loop decision models."""

from typing import Any, Literal

from pydantic import BaseModel

DecisionType = Literal["approve", "reject", "edit"]

ALLOWED_DECISIONS: tuple[DecisionType, ...] = ("approve", "reject", "edit")


class HITLDecision(BaseModel):
    """External decision for a paused tool call."""

    type: DecisionType
    payload: Any | None = None


class InterruptRequest(BaseModel):
    """A pause point waiting for an approve/reject/edit decision."""

    id: str
    tool_call: Any | None = None
    allowed_decisions: list[DecisionType] = list(ALLOWED_DECISIONS)
