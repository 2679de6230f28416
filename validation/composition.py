"""
Combinators over whole validators: union, intersection and lazy (recursive) schemas.
"""
from dataclasses import replace
from typing import Any, Callable, List

from utils.exceptions import SchemaDefinitionError
from utils.logging_config import get_logger
from .result import Issue, IssueCode, Outcome
from .validators import Validator

logger = get_logger(__name__)


def _check_members(members, kind: str):
    for i, member in enumerate(members, start=1):
        if not isinstance(member, Validator):
            raise SchemaDefinitionError(
                f"{kind} member {i} is not a validator: {member!r}",
                details={'position': i, 'type': type(member).__name__}
            )
    return tuple(members)


class UnionValidator(Validator):
    """
    Accepts a value if any member does.

    Members are tried in declaration order and the first success is returned
    as produced by that member. When all fail a single ``invalid_union`` issue
    summarizes every member's messages.
    """

    def __init__(self, *members: Validator):
        super().__init__()
        self.members = _check_members(members, 'Union')

    def validate(self, value: Any) -> Outcome:
        if value is None:
            settled = self._absent(fallthrough=True)
            if settled is not None:
                return settled

        if not self.members:
            return Outcome.fail(
                "Value did not match any union type: union has no members",
                IssueCode.INVALID_UNION,
                value
            )

        summaries: List[str] = []
        for i, member in enumerate(self.members, start=1):
            outcome = member.validate(value)
            if outcome.ok:
                return Outcome.success(outcome.value)
            messages = ", ".join(issue.message for issue in outcome.issues)
            summaries.append(f"Option {i}: {messages}")

        return Outcome.fail(
            f"Value did not match any union type. Errors: {'; '.join(summaries)}",
            IssueCode.INVALID_UNION,
            value
        )


class IntersectionValidator(Validator):
    """
    Accepts a value only if every member does, threading it through them.

    Each member receives the output of the last member that succeeded, so
    transforms compose with later checks. A failing member does not stop the
    chain; its issues are tagged with its position and collected.
    """

    def __init__(self, *members: Validator):
        super().__init__()
        self.members = _check_members(members, 'Intersection')

    def validate(self, value: Any) -> Outcome:
        if value is None:
            settled = self._absent(fallthrough=True)
            if settled is not None:
                return settled

        current = value
        issues: List[Issue] = []
        for i, member in enumerate(self.members, start=1):
            outcome = member.validate(current)
            if outcome.ok:
                current = outcome.value
            else:
                issues.extend(
                    replace(issue, message=f"Intersection validator {i}: {issue.message}")
                    for issue in outcome.issues
                )

        if issues:
            return Outcome.failure(*issues)
        return Outcome.success(current)


class LazyValidator(Validator):
    """
    Defers building a validator until validation time.

    The factory runs on every call and its result is not cached, which lets a
    schema refer to itself before it exists::

        tree = LazyValidator(lambda: ObjectValidator({
            'value': NumberValidator(),
            'children': ArrayValidator(tree).optional(),
        }))

    ``None`` input settled by the presence modifiers never reaches the factory.
    """

    def __init__(self, factory: Callable[[], Validator]):
        super().__init__()
        if not callable(factory):
            raise SchemaDefinitionError(
                f"Lazy factory must be callable, got {factory!r}",
                details={'type': type(factory).__name__}
            )
        self.factory = factory

    def resolve(self) -> Validator:
        """Build the wrapped validator."""
        validator = self.factory()
        if not isinstance(validator, Validator):
            logger.debug(f"Lazy factory {self.factory!r} returned {type(validator).__name__}")
            raise SchemaDefinitionError(
                f"Lazy factory must return a validator, got {validator!r}",
                details={'type': type(validator).__name__}
            )
        return validator

    def validate(self, value: Any) -> Outcome:
        if value is None:
            settled = self._absent(fallthrough=True)
            if settled is not None:
                return settled
        return self.resolve().validate(value)
