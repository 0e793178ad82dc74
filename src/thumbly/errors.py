from __future__ import annotations

from dataclasses import dataclass


class ThumblyError(Exception):
    """Base class for errors that are reported back to the user."""

    @property
    def message(self) -> str:
        return str(self)


@dataclass(frozen=True)
class FieldProblem:
    field: str
    message: str


class ValidationError(ThumblyError):
    """
    Malformed or out-of-range user input. Carries every offending field,
    not just the first one found.
    """

    def __init__(self, problems: list[FieldProblem]) -> None:
        self.problems = list(problems)
        super().__init__(", ".join(p.message for p in self.problems) or "Invalid input")

    @property
    def fields(self) -> list[str]:
        return [p.field for p in self.problems]


class GenerationError(ThumblyError):
    """The image model call failed, timed out, or returned no image."""


class DecodeError(ThumblyError):
    """An image could not be decoded for export compositing."""
