"""
Presence modifiers and the shared policy for absent input.

Every validator consults ``resolve_absent`` before looking at a ``None``
input, so required/optional/nullable/default mean the same thing on a leaf,
on a container and on a combinator.
"""
from dataclasses import dataclass, replace
from typing import Any, Optional

from .result import IssueCode, Outcome


class _NoDefault:
    def __repr__(self) -> str:
        return 'NO_DEFAULT'


NO_DEFAULT = _NoDefault()


@dataclass(frozen=True)
class Presence:
    """How a node treats ``None`` input. ``required`` and ``optional`` exclude each other."""

    required: bool = False
    optional: bool = False
    nullable: bool = False
    default: Any = NO_DEFAULT

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    def as_required(self) -> 'Presence':
        return replace(self, required=True, optional=False)

    def as_optional(self) -> 'Presence':
        return replace(self, optional=True, required=False)

    def as_nullable(self) -> 'Presence':
        return replace(self, nullable=True)

    def with_default(self, value: Any) -> 'Presence':
        return replace(self, default=value)


def resolve_absent(presence: Presence, expected: str, fallthrough: bool = False) -> Optional[Outcome]:
    """
    Decide the outcome for a ``None`` input.

    Precedence is default, then optional, then nullable. With ``fallthrough``
    the caller gets ``None`` back instead of a failure unless ``required`` was
    set, and goes on to offer the input to its members.
    """
    if presence.has_default:
        return Outcome.success(presence.default)
    if presence.optional:
        return Outcome.success(None)
    if presence.nullable:
        return Outcome.success(None)
    if fallthrough and not presence.required:
        return None
    return Outcome.fail(
        f"Expected {expected}, received null",
        code=IssueCode.INVALID_TYPE,
        value=None
    )
