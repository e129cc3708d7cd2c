"""
Module: prompts
Purpose: Conflict resolution prompts that pick a strategy for a collision.
"""

import sys
from typing import Callable, Optional, Protocol, TextIO

from .models.decisions import ConflictChoice, ConflictPromptRequest
from .utils import BOLD, COLOR_YELLOW, color_text, log_info


class ConflictPrompt(Protocol):
    """
    Asks the user how to resolve a collision.

    choose() blocks until one of request.choices is committed.
    """

    def choose(self, request: ConflictPromptRequest) -> ConflictChoice:
        ...


def match_choice(answer: str, choices: tuple[ConflictChoice, ...]) -> Optional[ConflictChoice]:
    """
    Resolve a typed answer to one of the offered choices.

    Accepts the 1-based position, the label, or the label's first letter when
    no other offered label shares it (case-insensitive). Returns None when
    nothing matches.
    """
    normalized = answer.strip().lower()
    if not normalized:
        return None
    if normalized.isdigit():
        index = int(normalized) - 1
        if 0 <= index < len(choices):
            return choices[index]
        return None
    for choice in choices:
        if normalized == choice.value:
            return choice
    initials = [choice for choice in choices if choice.value[0] == normalized]
    if len(initials) == 1:
        return initials[0]
    return None


class TerminalPrompt:
    """
    Interactive prompt on a terminal. EOF or Ctrl+C answers Cancel.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        reader: Optional[Callable[[str], str]] = None,
        use_color: bool = True,
    ):
        self.stream = stream or sys.stdout
        self.reader = reader
        self.use_color = use_color

    def _render(self, request: ConflictPromptRequest) -> None:
        print(color_text(request.title, BOLD, self.use_color), file=self.stream)
        print(request.message, file=self.stream)
        for position, choice in enumerate(request.choices, start=1):
            print(f"  [{position}] {choice.label}", file=self.stream)

    def choose(self, request: ConflictPromptRequest) -> ConflictChoice:
        self._render(request)
        labels = "/".join(choice.label for choice in request.choices)
        while True:
            try:
                answer = (self.reader or input)(f"Choose {labels}: ")
            except (EOFError, KeyboardInterrupt):
                print("", file=self.stream)
                log_info(f"Prompt '{request.title}' interrupted; cancelling")
                return ConflictChoice.CANCEL
            choice = match_choice(answer, request.choices)
            if choice is not None:
                log_info(f"Prompt '{request.title}' answered: {choice.value}")
                return choice
            print(
                color_text(f"Please answer one of: {labels}", COLOR_YELLOW, self.use_color),
                file=self.stream,
            )


class FixedPrompt:
    """
    Non-interactive prompt that always answers the same choice.

    Falls back to Cancel when the preset is not offered for a collision.
    """

    def __init__(self, choice: ConflictChoice):
        self.choice = choice

    def choose(self, request: ConflictPromptRequest) -> ConflictChoice:
        if self.choice in request.choices:
            log_info(f"Prompt '{request.title}' auto-answered: {self.choice.value}")
            return self.choice
        log_info(
            f"Prompt '{request.title}' does not offer {self.choice.value}; cancelling"
        )
        return ConflictChoice.CANCEL
