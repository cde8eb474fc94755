"""
Outcome Models
==============

Explicit result values for operations that can legitimately fail.

Loading an animation has three expected outcomes, none of them exceptional:
    - Found: the value was produced
    - NotFound: no definition exists for the name (a valid answer)
    - LoadError: a definition exists but could not be read or parsed

Callers branch on the outcome type instead of catching exceptions.

Example:
    outcome = await service.prepare("spinner")

    if isinstance(outcome, NotFound):
        return 404
    if isinstance(outcome, LoadError):
        return 500
    animation = outcome.value
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Found(Generic[T]):
    """Successful outcome carrying the produced value."""

    value: T


@dataclass(frozen=True, slots=True)
class NotFound:
    """No definition exists for the requested name."""

    name: str


@dataclass(frozen=True, slots=True)
class LoadError:
    """A definition exists but could not be read, parsed or processed."""

    name: str
    reason: str


Outcome = Union[Found[T], NotFound, LoadError]
