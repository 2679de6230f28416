"""
Object validation against a per-field schema.
"""
from typing import Any, Dict, Mapping

from utils.exceptions import SchemaDefinitionError
from utils.logging_config import get_logger
from .result import Issue, IssueCode, Outcome
from .type_checking import is_mapping
from .validators import Validator

logger = get_logger(__name__)

STRICT = 'strict'
PASSTHROUGH = 'passthrough'
STRIP = 'strip'
UNKNOWN_FIELD_POLICIES = (STRICT, PASSTHROUGH, STRIP)

Schema = Dict[str, Validator]


def _check_schema(schema: Mapping[str, Validator]) -> Dict[str, Validator]:
    fields = dict(schema)
    for name, validator in fields.items():
        if not isinstance(name, str):
            raise SchemaDefinitionError(
                f"Field names must be strings, got {name!r}",
                details={'field': repr(name)}
            )
        if not isinstance(validator, Validator):
            raise SchemaDefinitionError(
                f"Field '{name}' is not a validator: {validator!r}",
                details={'field': name, 'type': type(validator).__name__}
            )
    return fields


class ObjectValidator(Validator):
    """
    Validates a mapping field by field.

    Every schema field is checked, absent fields are validated as ``None``
    and all field issues are collected before the result is decided. Keys not
    in the schema follow the unknown-field policy:

    - ``strict``: each one is reported as an issue
    - ``passthrough``: copied into the result unchanged
    - ``strip``: dropped (default)
    """

    expected = "object"

    def __init__(self, schema: Mapping[str, Validator], unknown_fields: str = STRIP):
        super().__init__()
        if unknown_fields not in UNKNOWN_FIELD_POLICIES:
            raise SchemaDefinitionError(
                f"unknown_fields must be one of {UNKNOWN_FIELD_POLICIES}, got {unknown_fields!r}",
                details={'allowed': list(UNKNOWN_FIELD_POLICIES), 'actual': unknown_fields}
            )
        self._schema = _check_schema(schema)
        self.unknown_fields = unknown_fields

    @property
    def shape(self) -> Schema:
        """Copy of the field map."""
        return dict(self._schema)

    def strict(self) -> 'ObjectValidator':
        return self._evolve(unknown_fields=STRICT)

    def passthrough(self) -> 'ObjectValidator':
        return self._evolve(unknown_fields=PASSTHROUGH)

    def strip(self) -> 'ObjectValidator':
        return self._evolve(unknown_fields=STRIP)

    def extend(self, schema: Mapping[str, Validator]) -> 'ObjectValidator':
        """New validator with extra fields; same-named fields are replaced."""
        merged = dict(self._schema)
        merged.update(_check_schema(schema))
        return self._evolve(_schema=merged)

    def validate(self, value: Any) -> Outcome:
        if value is None:
            return self._absent()
        if not is_mapping(value):
            return Outcome.type_mismatch(self.expected, value)

        result: Dict[str, Any] = {}
        issues = []

        for name, field_validator in self._schema.items():
            outcome = field_validator.validate(value.get(name))
            if not outcome.ok:
                issues.extend(issue.at(name) for issue in outcome.issues)
            elif outcome.value is not None:
                result[name] = outcome.value

        for key, raw in value.items():
            if key in self._schema:
                continue
            if self.unknown_fields == STRICT:
                logger.debug(f"Rejected unknown field: {key!r}")
                issues.append(Issue(
                    message="Unknown field",
                    code=IssueCode.UNRECOGNIZED_KEY,
                    path=str(key),
                    value=raw
                ))
            elif self.unknown_fields == PASSTHROUGH:
                result[key] = raw

        if issues:
            return Outcome.failure(*issues)
        return Outcome.success(result)
