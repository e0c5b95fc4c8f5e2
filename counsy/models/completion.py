"""Result of a call to the LLM completion service"""
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Completed:
    """The model produced a non-empty reply"""
    text: str


@dataclass(frozen=True)
class Unavailable:
    """No reply: service not configured, failed, or returned nothing"""
    reason: str


CompletionResult = Union[Completed, Unavailable]
