"""
Sequence and mapping combinators: arrays, tuples and records.
"""
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence

from utils.exceptions import SchemaDefinitionError
from .result import Issue, IssueCode, Outcome
from .type_checking import as_sequence, is_mapping
from .validators import Validator, check_length


def _check_validator(candidate: Any, role: str) -> Validator:
    if not isinstance(candidate, Validator):
        raise SchemaDefinitionError(
            f"{role} must be a validator, got {candidate!r}",
            details={'role': role, 'type': type(candidate).__name__}
        )
    return candidate


def _validate_items(items: Sequence[Any], validators, offset: int, result: List[Any], issues: List[Issue]):
    """Validate ``items`` pairwise, tagging issues with their absolute index."""
    for i, (item, validator) in enumerate(zip(items, validators), start=offset):
        outcome = validator.validate(item)
        if outcome.ok:
            result.append(outcome.value)
        else:
            issues.extend(issue.at(f"[{i}]") for issue in outcome.issues)


class ArrayValidator(Validator):
    """Validates a homogeneous sequence; every element is checked."""

    expected = "array"

    def __init__(self, element: Validator):
        super().__init__()
        self.element = _check_validator(element, 'Array element')
        self._min: Optional[int] = None
        self._max: Optional[int] = None
        self._nonempty = False

    def min(self, length: int) -> 'ArrayValidator':
        return self._evolve(_min=check_length(length, 'min'))

    def max(self, length: int) -> 'ArrayValidator':
        return self._evolve(_max=check_length(length, 'max'))

    def length(self, length: int) -> 'ArrayValidator':
        length = check_length(length, 'length')
        return self._evolve(_min=length, _max=length)

    def nonempty(self) -> 'ArrayValidator':
        return self._evolve(_nonempty=True)

    def _check_size(self, size: int, items: List[Any]) -> Optional[Outcome]:
        if self._nonempty and size == 0:
            return Outcome.fail("Array must not be empty", IssueCode.TOO_SMALL, items)
        if self._min is not None and size < self._min:
            return Outcome.fail(f"Array must contain at least {self._min} element(s)", IssueCode.TOO_SMALL, items)
        if self._max is not None and size > self._max:
            return Outcome.fail(f"Array must contain at most {self._max} element(s)", IssueCode.TOO_BIG, items)
        return None

    def validate(self, value: Any) -> Outcome:
        if value is None:
            return self._absent()
        items = as_sequence(value)
        if items is None:
            return Outcome.type_mismatch(self.expected, value)

        failed = self._check_size(len(items), items)
        if failed is not None:
            return failed

        result: List[Any] = []
        issues: List[Issue] = []
        _validate_items(items, [self.element] * len(items), 0, result, issues)

        if issues:
            return Outcome.failure(*issues)
        return Outcome.success(result)


class TupleValidator(Validator):
    """
    Validates a fixed-arity sequence position by position.

    Without a rest validator the length must match exactly; with one, extra
    trailing elements are checked against it.
    """

    expected = "tuple (array)"

    def __init__(self, *items: Validator, rest: Optional[Validator] = None):
        super().__init__()
        self.items = tuple(_check_validator(item, f"Tuple item {i}") for i, item in enumerate(items))
        self._rest = _check_validator(rest, 'Tuple rest') if rest is not None else None

    def rest(self, validator: Validator) -> 'TupleValidator':
        return self._evolve(_rest=_check_validator(validator, 'Tuple rest'))

    def validate(self, value: Any) -> Outcome:
        if value is None:
            return self._absent()
        elements = as_sequence(value)
        if elements is None:
            return Outcome.type_mismatch(self.expected, value)

        expected_len, actual_len = len(self.items), len(elements)
        if self._rest is None and actual_len != expected_len:
            return Outcome.fail(
                f"Expected tuple of length {expected_len}, received length {actual_len}",
                IssueCode.INVALID_ARITY,
                elements
            )
        if self._rest is not None and actual_len < expected_len:
            return Outcome.fail(
                f"Expected tuple of at least length {expected_len}, received length {actual_len}",
                IssueCode.INVALID_ARITY,
                elements
            )

        result: List[Any] = []
        issues: List[Issue] = []
        _validate_items(elements[:expected_len], self.items, 0, result, issues)
        if self._rest is not None:
            tail = elements[expected_len:]
            _validate_items(tail, [self._rest] * len(tail), expected_len, result, issues)

        if issues:
            return Outcome.failure(*issues)
        return Outcome.success(result)


class RecordValidator(Validator):
    """
    Validates a mapping whose keys and values each share one validator.

    A key that fails, or validates to something other than a string, is
    reported under ``key(<original key>)`` and its value is skipped.
    """

    expected = "record (object)"

    def __init__(self, key: Validator, value: Validator):
        super().__init__()
        self.key_validator = _check_validator(key, 'Record key')
        self.value_validator = _check_validator(value, 'Record value')

    def validate(self, value: Any) -> Outcome:
        if value is None:
            return self._absent()
        if not is_mapping(value):
            return Outcome.type_mismatch(self.expected, value)

        result: Dict[str, Any] = {}
        issues: List[Issue] = []

        for raw_key, raw_value in value.items():
            key_segment = f"key({raw_key})"
            key_outcome = self.key_validator.validate(raw_key)
            if not key_outcome.ok:
                issues.extend(
                    replace(issue, code=IssueCode.INVALID_KEY).at(key_segment)
                    for issue in key_outcome.issues
                )
                continue

            validated_key = key_outcome.value
            if not isinstance(validated_key, str):
                issues.append(Issue(
                    message="Record key must be a string",
                    code=IssueCode.INVALID_KEY,
                    path=key_segment,
                    value=validated_key
                ))
                continue

            value_outcome = self.value_validator.validate(raw_value)
            if not value_outcome.ok:
                issues.extend(issue.at(validated_key) for issue in value_outcome.issues)
            else:
                result[validated_key] = value_outcome.value

        if issues:
            return Outcome.failure(*issues)
        return Outcome.success(result)
