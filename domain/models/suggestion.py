"""
Progression suggestion value objects.

A suggestion is one of four variants discriminated on ``action``:

- IncreaseSuggestion: add ``amount`` to the working weight
- DecreaseSuggestion: remove ``amount`` from the working weight
- MaintainSuggestion: keep the current weight
- UnknownSuggestion: not enough history to say anything

Examples:
    >>> s = IncreaseSuggestion(amount=2.5, reason="Try adding 2.5 kg.")
    >>> s.apply(60)
    62.5
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class _BaseSuggestion(BaseModel):
    reason: str = Field(default="", description="Human-readable explanation")

    def apply(self, weight: float) -> float:
        """Return the weight the user should attempt next."""
        return weight


class IncreaseSuggestion(_BaseSuggestion):
    """Add weight: the user hit target reps at a stable weight."""

    action: Literal["increase"] = "increase"
    amount: float = Field(..., gt=0)

    def apply(self, weight: float) -> float:
        return weight + self.amount


class DecreaseSuggestion(_BaseSuggestion):
    """Deload: the user missed target reps by more than two in both sessions."""

    action: Literal["decrease"] = "decrease"
    amount: float = Field(..., ge=0)

    def apply(self, weight: float) -> float:
        return weight - self.amount


class MaintainSuggestion(_BaseSuggestion):
    action: Literal["maintain"] = "maintain"


class UnknownSuggestion(_BaseSuggestion):
    """No classification possible (fewer than two qualifying sessions)."""

    action: Literal["unknown"] = "unknown"


Suggestion = Annotated[
    Union[IncreaseSuggestion, DecreaseSuggestion, MaintainSuggestion, UnknownSuggestion],
    Field(discriminator="action"),
]
