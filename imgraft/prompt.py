"""Prompt construction, including the transparent-mode system prompt."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from imgraft.errors import CodedError, ErrorCode

_TRANSPARENT_SYSTEM_PROMPT = """Generate a single isolated subject asset for compositing.

Use a solid pure green background.
Do not use gradients.
Do not use shadows on the background.

Do not include background objects, scenery, environment, text, borders, or frames.

Center the subject.
Keep the full silhouette visible and cleanly separated from the background.

Ensure strong color contrast between subject and background."""


class Role(str, Enum):
    """Role of a prompt part."""

    SYSTEM = "system"
    USER = "user"


@dataclass(frozen=True)
class Part:
    """One element of a prompt: a role and its text."""

    role: Role
    text: str


def system_prompt(transparent: bool) -> str:
    """Return the system prompt for the given mode; empty when not transparent."""
    return _TRANSPARENT_SYSTEM_PROMPT if transparent else ""


def build(user_prompt: str, transparent: bool) -> list[Part]:
    """Assemble the request parts; the system prompt comes first when present.

    Raises CodedError(INVALID_ARGUMENT) if the user prompt is blank.
    """
    if not user_prompt.strip():
        raise CodedError(ErrorCode.INVALID_ARGUMENT, "user prompt is required")
    parts: list[Part] = []
    system = system_prompt(transparent)
    if system:
        parts.append(Part(Role.SYSTEM, system))
    parts.append(Part(Role.USER, user_prompt))
    return parts