"""
Validator contract and the leaf (scalar) validators.

Every validator exposes ``validate(value) -> Outcome``. Builder methods never
mutate the receiver; they return a configured copy, so one node can be reused
in several schemas without later calls leaking into earlier ones.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional, Tuple
import copy
import math
import re
from fractions import Fraction

from utils.exceptions import SchemaDefinitionError
from utils.logging_config import get_logger
from .formats import STRING_FORMATS, parse_date, to_datetime
from .presence import Presence, resolve_absent
from .result import IssueCode, Outcome
from .type_checking import coerce_number, format_number, is_bool, values_equal

logger = get_logger(__name__)

MAX_SAFE_INTEGER = 2 ** 53 - 1


def _is_multiple(num, step) -> bool:
    if isinstance(num, int) and isinstance(step, int):
        return num % step == 0
    if isinstance(num, float) and not math.isfinite(num):
        return False
    # Fractions keep ints beyond float range exact; the tolerance absorbs float steps like 0.1.
    remainder = abs(Fraction(num) % Fraction(step))
    return remainder <= 1e-10 or abs(remainder - abs(step)) <= 1e-10


def _canonical(value: Any) -> Any:
    if is_bool(value):
        return bool(value)
    number = coerce_number(value)
    return value if number is None else number


@dataclass(frozen=True)
class Refinement:
    """A caller-supplied predicate and the message reported when it fails."""

    check: Callable[[Any], bool]
    message: str


class Validator:
    """Base validator class."""

    #: Category named in "Expected <category>, received ..." messages.
    expected = "value"

    def __init__(self):
        self._presence = Presence()
        self._refinements: Tuple[Refinement, ...] = ()

    @property
    def presence(self) -> Presence:
        return self._presence

    def validate(self, value: Any) -> Outcome:
        """Check ``value`` and return an ``Outcome``; never raises for bad data."""
        raise NotImplementedError

    def __call__(self, value: Any) -> Outcome:
        """Allow validator to be called as a function."""
        return self.validate(value)

    def parse(self, value: Any) -> Any:
        """Return the validated value or raise ``ValidationError``."""
        outcome = self.validate(value)
        if not outcome.ok:
            logger.debug(
                f"{self.__class__.__name__} rejected input with {len(outcome.issues)} issue(s)",
                extra={'issues': outcome.issues.to_list()}
            )
        return outcome.unwrap()

    def required(self):
        """Reject ``None`` input. Clears ``optional``."""
        return self._evolve(_presence=self._presence.as_required())

    def optional(self):
        """Accept ``None`` input as ``None``. Clears ``required``."""
        return self._evolve(_presence=self._presence.as_optional())

    def nullable(self):
        """Accept ``None`` input as ``None``."""
        return self._evolve(_presence=self._presence.as_nullable())

    def default(self, value: Any):
        """Return ``value`` verbatim for ``None`` input."""
        return self._evolve(_presence=self._presence.with_default(value))

    def _evolve(self, **changes):
        clone = copy.copy(self)
        clone.__dict__.update(changes)
        return clone

    def _absent(self, fallthrough: bool = False) -> Optional[Outcome]:
        return resolve_absent(self._presence, self.expected, fallthrough)

    def _refined(self, check: Callable[[Any], bool], message: str):
        if not callable(check):
            raise SchemaDefinitionError(
                "Refinement check must be callable",
                details={'validator': self.__class__.__name__}
            )
        refinements = self._refinements + (Refinement(check, message),)
        return self._evolve(_refinements=refinements)

    def _run_refinements(self, value: Any) -> Optional[Outcome]:
        for refinement in self._refinements:
            if not refinement.check(value):
                return Outcome.fail(refinement.message, code=IssueCode.CUSTOM, value=value)
        return None


def check_length(length: int, name: str) -> int:
    if isinstance(length, bool) or not isinstance(length, int) or length < 0:
        raise SchemaDefinitionError(
            f"{name} must be a non-negative integer, got {length!r}",
            details={'argument': name, 'value': length}
        )
    return length


class StringValidator(Validator):
    """Validates strings, with optional normalizing transforms."""

    expected = "string"

    def __init__(self):
        super().__init__()
        self._min: Optional[int] = None
        self._max: Optional[int] = None
        self._length: Optional[int] = None
        self._formats: Tuple[str, ...] = ()
        self._pattern = None
        self._starts_with: Optional[str] = None
        self._ends_with: Optional[str] = None
        self._contains: Optional[str] = None
        self._trim = False
        self._lowercase = False
        self._uppercase = False

    def min(self, length: int) -> 'StringValidator':
        return self._evolve(_min=check_length(length, 'min'))

    def max(self, length: int) -> 'StringValidator':
        return self._evolve(_max=check_length(length, 'max'))

    def length(self, length: int) -> 'StringValidator':
        return self._evolve(_length=check_length(length, 'length'))

    def _format(self, name: str) -> 'StringValidator':
        if name in self._formats:
            return self
        return self._evolve(_formats=self._formats + (name,))

    def email(self) -> 'StringValidator':
        return self._format('email')

    def url(self) -> 'StringValidator':
        return self._format('url')

    def uuid(self) -> 'StringValidator':
        return self._format('uuid')

    def ip(self) -> 'StringValidator':
        return self._format('ip')

    def ipv4(self) -> 'StringValidator':
        return self._format('ipv4')

    def ipv6(self) -> 'StringValidator':
        return self._format('ipv6')

    def base64(self) -> 'StringValidator':
        return self._format('base64')

    def hex(self) -> 'StringValidator':
        return self._format('hex')

    def cuid(self) -> 'StringValidator':
        return self._format('cuid')

    def cuid2(self) -> 'StringValidator':
        return self._format('cuid2')

    def ulid(self) -> 'StringValidator':
        return self._format('ulid')

    def nanoid(self) -> 'StringValidator':
        return self._format('nanoid')

    def regex(self, pattern) -> 'StringValidator':
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise SchemaDefinitionError(
                f"Invalid regular expression: {e}",
                details={'pattern': str(pattern)}
            )
        return self._evolve(_pattern=compiled)

    def starts_with(self, prefix: str) -> 'StringValidator':
        return self._evolve(_starts_with=prefix)

    def ends_with(self, suffix: str) -> 'StringValidator':
        return self._evolve(_ends_with=suffix)

    def contains(self, substring: str) -> 'StringValidator':
        return self._evolve(_contains=substring)

    def trim(self) -> 'StringValidator':
        return self._evolve(_trim=True)

    def to_lowercase(self) -> 'StringValidator':
        return self._evolve(_lowercase=True)

    def to_uppercase(self) -> 'StringValidator':
        return self._evolve(_uppercase=True)

    def refine(self, check: Callable[[str], bool], message: str) -> 'StringValidator':
        return self._refined(check, message)

    def validate(self, value: Any) -> Outcome:
        if value is None:
            return self._absent()
        if not isinstance(value, str):
            return Outcome.type_mismatch(self.expected, value)

        text = value
        if self._trim:
            text = text.strip()
        if self._lowercase:
            text = text.lower()
        if self._uppercase:
            text = text.upper()

        if self._length is not None and len(text) != self._length:
            code = IssueCode.TOO_SMALL if len(text) < self._length else IssueCode.TOO_BIG
            return Outcome.fail(f"String must be exactly {self._length} characters", code, text)
        if self._min is not None and len(text) < self._min:
            return Outcome.fail(f"String must be at least {self._min} characters", IssueCode.TOO_SMALL, text)
        if self._max is not None and len(text) > self._max:
            return Outcome.fail(f"String must be at most {self._max} characters", IssueCode.TOO_BIG, text)

        for name, (predicate, message) in STRING_FORMATS.items():
            if name in self._formats and not predicate(text):
                return Outcome.fail(message, IssueCode.INVALID_STRING, text)

        if self._pattern is not None and self._pattern.search(text) is None:
            return Outcome.fail("String does not match required pattern", IssueCode.INVALID_STRING, text)
        if self._starts_with is not None and not text.startswith(self._starts_with):
            return Outcome.fail(f"String must start with '{self._starts_with}'", IssueCode.INVALID_STRING, text)
        if self._ends_with is not None and not text.endswith(self._ends_with):
            return Outcome.fail(f"String must end with '{self._ends_with}'", IssueCode.INVALID_STRING, text)
        if self._contains is not None and self._contains not in text:
            return Outcome.fail(f"String must contain '{self._contains}'", IssueCode.INVALID_STRING, text)

        failed = self._run_refinements(text)
        if failed is not None:
            return failed
        return Outcome.success(text)


class NumberValidator(Validator):
    """Validates numbers after coercing them to the canonical ``int``/``float``."""

    expected = "number"

    def __init__(self):
        super().__init__()
        self._min = None
        self._max = None
        self._multiple_of = None
        self._int = False
        self._positive = False
        self._negative = False
        self._nonnegative = False
        self._nonpositive = False
        self._finite = False
        self._safe = False

    @staticmethod
    def _bound(value: Any, name: str):
        number = coerce_number(value)
        if number is None:
            raise SchemaDefinitionError(
                f"{name} must be a number, got {value!r}",
                details={'argument': name}
            )
        return number

    def min(self, value) -> 'NumberValidator':
        return self._evolve(_min=self._bound(value, 'min'))

    def max(self, value) -> 'NumberValidator':
        return self._evolve(_max=self._bound(value, 'max'))

    def int(self) -> 'NumberValidator':
        return self._evolve(_int=True)

    def positive(self) -> 'NumberValidator':
        return self._evolve(_positive=True)

    def negative(self) -> 'NumberValidator':
        return self._evolve(_negative=True)

    def nonnegative(self) -> 'NumberValidator':
        return self._evolve(_nonnegative=True)

    def nonpositive(self) -> 'NumberValidator':
        return self._evolve(_nonpositive=True)

    def finite(self) -> 'NumberValidator':
        return self._evolve(_finite=True)

    def safe(self) -> 'NumberValidator':
        return self._evolve(_safe=True)

    def multiple_of(self, value) -> 'NumberValidator':
        step = self._bound(value, 'multiple_of')
        if step == 0:
            raise SchemaDefinitionError("multiple_of must be non-zero")
        return self._evolve(_multiple_of=step)

    def refine(self, check: Callable[[Any], bool], message: str) -> 'NumberValidator':
        return self._refined(check, message)

    def validate(self, value: Any) -> Outcome:
        if value is None:
            return self._absent()
        num = coerce_number(value)
        if num is None:
            return Outcome.type_mismatch(self.expected, value)

        if self._finite and isinstance(num, float) and not math.isfinite(num):
            return Outcome.fail("Number must be finite", IssueCode.INVALID_NUMBER, num)
        if self._int and (isinstance(num, float) and not num.is_integer()):
            return Outcome.fail("Number must be an integer", IssueCode.INVALID_NUMBER, num)
        if self._safe and abs(num) > MAX_SAFE_INTEGER:
            return Outcome.fail("Number must be within safe integer range", IssueCode.INVALID_NUMBER, num)
        if self._min is not None and num < self._min:
            return Outcome.fail(f"Number must be at least {format_number(self._min)}", IssueCode.TOO_SMALL, num)
        if self._max is not None and num > self._max:
            return Outcome.fail(f"Number must be at most {format_number(self._max)}", IssueCode.TOO_BIG, num)
        if self._positive and num <= 0:
            return Outcome.fail("Number must be positive", IssueCode.TOO_SMALL, num)
        if self._negative and num >= 0:
            return Outcome.fail("Number must be negative", IssueCode.TOO_BIG, num)
        if self._nonnegative and num < 0:
            return Outcome.fail("Number must be non-negative", IssueCode.TOO_SMALL, num)
        if self._nonpositive and num > 0:
            return Outcome.fail("Number must be non-positive", IssueCode.TOO_BIG, num)
        if self._multiple_of is not None and not _is_multiple(num, self._multiple_of):
            return Outcome.fail(
                f"Number must be a multiple of {format_number(self._multiple_of)}",
                IssueCode.INVALID_NUMBER,
                num
            )

        failed = self._run_refinements(num)
        if failed is not None:
            return failed
        return Outcome.success(num)


class BooleanValidator(Validator):
    """Validates booleans."""

    expected = "boolean"

    def validate(self, value: Any) -> Outcome:
        if value is None:
            return self._absent()
        if not is_bool(value):
            return Outcome.type_mismatch(self.expected, value)
        return Outcome.success(bool(value))


class DateValidator(Validator):
    """Validates dates given as ``datetime``/``date`` objects or date strings."""

    expected = "date"

    def __init__(self):
        super().__init__()
        self._min: Optional[datetime] = None
        self._max: Optional[datetime] = None
        self._future = False
        self._past = False

    @staticmethod
    def _bound(value: Any, name: str) -> datetime:
        bound = to_datetime(value)
        if bound is None and isinstance(value, str):
            bound = parse_date(value)
        if bound is None:
            raise SchemaDefinitionError(
                f"{name} must be a date, got {value!r}",
                details={'argument': name}
            )
        return bound

    def min(self, value) -> 'DateValidator':
        return self._evolve(_min=self._bound(value, 'min'))

    def max(self, value) -> 'DateValidator':
        return self._evolve(_max=self._bound(value, 'max'))

    def future(self) -> 'DateValidator':
        return self._evolve(_future=True)

    def past(self) -> 'DateValidator':
        return self._evolve(_past=True)

    def refine(self, check: Callable[[datetime], bool], message: str) -> 'DateValidator':
        return self._refined(check, message)

    def validate(self, value: Any) -> Outcome:
        if value is None:
            return self._absent()

        moment = to_datetime(value)
        if moment is None:
            if not isinstance(value, str):
                return Outcome.type_mismatch(self.expected, value)
            moment = parse_date(value)
            if moment is None:
                return Outcome.fail(f"Invalid date string: {value!r}", IssueCode.INVALID_DATE, value)

        now = datetime.now(timezone.utc)
        if self._future and not moment > now:
            return Outcome.fail("Date must be in the future", IssueCode.TOO_SMALL, moment)
        if self._past and not moment < now:
            return Outcome.fail("Date must be in the past", IssueCode.TOO_BIG, moment)
        if self._min is not None and moment < self._min:
            return Outcome.fail(f"Date must be at or after {self._min.isoformat()}", IssueCode.TOO_SMALL, moment)
        if self._max is not None and moment > self._max:
            return Outcome.fail(f"Date must be at or before {self._max.isoformat()}", IssueCode.TOO_BIG, moment)

        failed = self._run_refinements(moment)
        if failed is not None:
            return failed
        return Outcome.success(moment)


class LiteralValidator(Validator):
    """Accepts exactly one value, compared with numeric-aware equality."""

    def __init__(self, expected_value: Any):
        super().__init__()
        self.expected_value = expected_value

    @property
    def expected(self) -> str:
        return f"literal value {self.expected_value!r}"

    def validate(self, value: Any) -> Outcome:
        if value is None:
            return self._absent()
        if values_equal(value, self.expected_value):
            return Outcome.success(_canonical(value))
        return Outcome.fail(
            f"Invalid literal value. Expected {self.expected_value!r}, received {value!r}",
            IssueCode.INVALID_LITERAL,
            value
        )


class EnumValidator(Validator):
    """Accepts one of a fixed set of values."""

    expected = "enum value"

    def __init__(self, values: Iterable[Any]):
        super().__init__()
        self.values = tuple(values)

    def validate(self, value: Any) -> Outcome:
        if value is None:
            return self._absent()
        for allowed in self.values:
            if values_equal(value, allowed):
                return Outcome.success(_canonical(value))
        return Outcome.fail(
            f"Invalid enum value. Expected one of: {list(self.values)!r}, received: {value!r}",
            IssueCode.INVALID_ENUM_VALUE,
            value
        )


class AnyValidator(Validator):
    """Accepts every value. ``None`` is rejected only after ``required()``."""

    def validate(self, value: Any) -> Outcome:
        if value is None:
            settled = self._absent(fallthrough=True)
            if settled is not None:
                return settled
        return Outcome.success(value)


class UnknownValidator(AnyValidator):
    """Like ``AnyValidator``; marks values the caller must inspect before use."""
    pass
