"""
Validation outcomes and the issues they carry.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from utils.exceptions import ValidationError
from .type_checking import type_name


class IssueCode:
    """Machine-readable issue codes."""

    INVALID_TYPE = 'invalid_type'
    TOO_SMALL = 'too_small'
    TOO_BIG = 'too_big'
    INVALID_STRING = 'invalid_string'
    INVALID_NUMBER = 'invalid_number'
    INVALID_DATE = 'invalid_date'
    INVALID_LITERAL = 'invalid_literal'
    INVALID_ENUM_VALUE = 'invalid_enum_value'
    UNRECOGNIZED_KEY = 'unrecognized_key'
    INVALID_ARITY = 'invalid_arity'
    INVALID_KEY = 'invalid_key'
    INVALID_UNION = 'invalid_union'
    INVALID_INTERSECTION = 'invalid_intersection'
    CUSTOM = 'custom'


def join_path(segment: str, path: str) -> str:
    """Prefix ``path`` with one location segment owned by the caller."""
    if not path:
        return segment
    if path.startswith('['):
        return segment + path
    return f"{segment}.{path}"


@dataclass(frozen=True)
class Issue:
    """A single validation problem at a location."""

    message: str
    code: str = IssueCode.CUSTOM
    path: str = ''
    value: Any = None

    def at(self, segment: str) -> 'Issue':
        """Return a copy located under ``segment``."""
        return replace(self, path=join_path(segment, self.path))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'message': self.message,
            'code': self.code,
            'received': self.value,
        }

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class Issues(Sequence):
    """Ordered, immutable collection of issues."""

    def __init__(self, issues=()):
        self._issues: Tuple[Issue, ...] = tuple(issues)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Issues(self._issues[index])
        return self._issues[index]

    def __len__(self) -> int:
        return len(self._issues)

    def __iter__(self) -> Iterator[Issue]:
        return iter(self._issues)

    def __eq__(self, other) -> bool:
        if isinstance(other, Issues):
            return self._issues == other._issues
        return NotImplemented

    def __repr__(self) -> str:
        return f"Issues({list(self._issues)!r})"

    def __str__(self) -> str:
        if not self._issues:
            return "No errors"
        if len(self._issues) == 1:
            return str(self._issues[0])
        lines = [f"{len(self._issues)} error(s):"]
        lines.extend(f"  - {issue}" for issue in self._issues)
        return "\n".join(lines)

    def first(self) -> Optional[Issue]:
        """First issue, or ``None`` when empty."""
        return self._issues[0] if self._issues else None

    def by_path(self, path: str) -> 'Issues':
        """Issues located exactly at ``path``."""
        return Issues(issue for issue in self._issues if issue.path == path)

    def has_path(self, path: str) -> bool:
        return any(issue.path == path for issue in self._issues)

    @property
    def paths(self) -> List[str]:
        return [issue.path for issue in self._issues]

    def to_list(self) -> List[Dict[str, Any]]:
        """Structured records suitable for JSON serialization."""
        return [issue.to_dict() for issue in self._issues]


@dataclass(frozen=True)
class Outcome:
    """Result of a ``validate`` call: a value on success, issues on failure."""

    ok: bool
    value: Any = None
    issues: Issues = field(default_factory=Issues)

    @classmethod
    def success(cls, value: Any) -> 'Outcome':
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, *issues: Issue) -> 'Outcome':
        if not issues:
            raise ValueError("a failed outcome needs at least one issue")
        return cls(ok=False, issues=Issues(issues))

    @classmethod
    def fail(cls, message: str, code: str = IssueCode.CUSTOM, value: Any = None) -> 'Outcome':
        """Failure with a single issue at the current location."""
        return cls.failure(Issue(message=message, code=code, value=value))

    @classmethod
    def type_mismatch(cls, expected: str, received: Any) -> 'Outcome':
        return cls.fail(
            f"Expected {expected}, received {type_name(received)}",
            code=IssueCode.INVALID_TYPE,
            value=received
        )

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> Any:
        """Return the value or raise ``ValidationError`` with every issue."""
        if self.ok:
            return self.value
        raise ValidationError(str(self.issues), issues=self.issues)
