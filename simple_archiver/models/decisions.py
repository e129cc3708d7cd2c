"""
Module: decisions
Purpose: Conflict resolution choices and the prompt request shown to the user.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class ConflictChoice(Enum):
    """Closed set of answers a conflict prompt can commit to."""

    REPLACE = "replace"
    RENAME = "rename"
    MERGE = "merge"
    CANCEL = "cancel"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class ConflictPromptRequest:
    """Title, message and the 2-4 choices offered by one modal prompt."""

    title: str
    message: str
    choices: Tuple[ConflictChoice, ...]

    def __post_init__(self):
        if not 2 <= len(self.choices) <= 4:
            raise ValueError("A conflict prompt offers between 2 and 4 choices")
