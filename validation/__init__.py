"""
Schema validation engine for schemaguard.
"""
from .result import (
    Issue,
    Issues,
    IssueCode,
    Outcome,
    join_path
)
from .presence import (
    NO_DEFAULT,
    Presence,
    resolve_absent
)
from .type_checking import (
    coerce_number,
    type_name,
    values_equal
)
from .validators import (
    Validator,
    Refinement,
    StringValidator,
    NumberValidator,
    BooleanValidator,
    DateValidator,
    LiteralValidator,
    EnumValidator,
    AnyValidator,
    UnknownValidator
)
from .schema import (
    Schema,
    ObjectValidator,
    STRICT,
    PASSTHROUGH,
    STRIP
)
from .containers import (
    ArrayValidator,
    TupleValidator,
    RecordValidator
)
from .composition import (
    UnionValidator,
    IntersectionValidator,
    LazyValidator
)

__all__ = [
    'Issue',
    'Issues',
    'IssueCode',
    'Outcome',
    'join_path',
    'NO_DEFAULT',
    'Presence',
    'resolve_absent',
    'coerce_number',
    'type_name',
    'values_equal',
    'Validator',
    'Refinement',
    'StringValidator',
    'NumberValidator',
    'BooleanValidator',
    'DateValidator',
    'LiteralValidator',
    'EnumValidator',
    'AnyValidator',
    'UnknownValidator',
    'Schema',
    'ObjectValidator',
    'STRICT',
    'PASSTHROUGH',
    'STRIP',
    'ArrayValidator',
    'TupleValidator',
    'RecordValidator',
    'UnionValidator',
    'IntersectionValidator',
    'LazyValidator',
]
