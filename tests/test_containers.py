"""Tests for array, tuple and record combinators."""
import pytest
import numpy as np
from utils.exceptions import SchemaDefinitionError
from validation import (
    ArrayValidator,
    TupleValidator,
    RecordValidator,
    ObjectValidator,
    StringValidator,
    NumberValidator,
    BooleanValidator,
    AnyValidator,
    Validator,
    Outcome
)


class KeyLength(Validator):
    """Key validator producing a non-string."""

    def validate(self, value):
        return Outcome.success(len(value))


class TestArray:
    """Tests for ArrayValidator."""

    def test_valid_array(self):
        """Test element outputs are collected in order."""
        outcome = ArrayValidator(StringValidator().trim()).validate([' a', 'b '])
        assert outcome.value == ['a', 'b']

    def test_accepts_tuple_and_ndarray(self):
        """Test sequence inputs other than list."""
        assert ArrayValidator(NumberValidator()).validate((1, 2)).value == [1, 2]
        assert ArrayValidator(NumberValidator()).validate(np.array([1, 2])).value == [1, 2]

    def test_rejects_string(self):
        """Test strings are not arrays."""
        outcome = ArrayValidator(StringValidator()).validate("abc")
        assert outcome.issues[0].message == "Expected array, received string"

    def test_collects_element_issues(self):
        """Test every failing element is reported at its index."""
        outcome = ArrayValidator(NumberValidator().min(0)).validate([1, -1, 'x', 2, -5])
        assert outcome.issues.paths == ['[1]', '[2]', '[4]']

    def test_nested_index_path(self):
        """Test element sub-paths compose."""
        schema = ArrayValidator(ObjectValidator({'email': StringValidator().email()}))
        outcome = schema.validate([{'email': 'a@b.co'}, {'email': 'bad'}])
        assert outcome.issues.paths == ['[1].email']

    def test_length_constraints(self):
        """Test length checks produce one whole-array issue."""
        validator = ArrayValidator(NumberValidator()).min(2).max(3)
        outcome = validator.validate([1])
        assert len(outcome.issues) == 1
        assert outcome.issues[0].path == ''
        assert outcome.issues[0].message == "Array must contain at least 2 element(s)"
        assert validator.validate([1, 2, 3, 4]).issues[0].message == "Array must contain at most 3 element(s)"
        assert validator.validate([1, 2]).ok

    def test_length_checked_before_elements(self):
        """Test element issues are not reported when the length is wrong."""
        outcome = ArrayValidator(NumberValidator()).length(2).validate(['a'])
        assert outcome.issues.paths == ['']

    def test_nonempty(self):
        """Test nonempty."""
        assert ArrayValidator(AnyValidator()).nonempty().validate([]).issues[0].message == "Array must not be empty"

    def test_element_must_be_validator(self):
        """Test construction rejects non-validators."""
        with pytest.raises(SchemaDefinitionError):
            ArrayValidator('string')


class TestTuple:
    """Tests for TupleValidator."""

    def test_valid_tuple(self):
        """Test positional validation."""
        validator = TupleValidator(StringValidator(), NumberValidator(), BooleanValidator())
        assert validator.validate(['a', 1, True]).value == ['a', 1, True]

    def test_exact_length(self):
        """Test arity mismatch is one issue."""
        validator = TupleValidator(StringValidator(), NumberValidator())
        outcome = validator.validate(['a', 1, 2])
        assert len(outcome.issues) == 1
        assert outcome.issues[0].message == "Expected tuple of length 2, received length 3"
        assert outcome.issues[0].code == 'invalid_arity'

    def test_collects_positional_issues(self):
        """Test every failing position is reported."""
        outcome = TupleValidator(StringValidator(), NumberValidator()).validate([1, 'x'])
        assert outcome.issues.paths == ['[0]', '[1]']

    def test_rest_elements(self):
        """Test rest validates trailing elements with absolute indices."""
        validator = TupleValidator(StringValidator()).rest(NumberValidator())
        assert validator.validate(['a', 1, 2, 3]).value == ['a', 1, 2, 3]
        outcome = validator.validate(['a', 1, 'x', 3, 'y'])
        assert outcome.issues.paths == ['[2]', '[4]']

    def test_rest_minimum_length(self):
        """Test rest still needs every positional element."""
        validator = TupleValidator(StringValidator(), StringValidator(), rest=NumberValidator())
        outcome = validator.validate(['a'])
        assert outcome.issues[0].message == "Expected tuple of at least length 2, received length 1"

    def test_rejects_non_sequence(self):
        """Test type mismatch."""
        outcome = TupleValidator(StringValidator()).validate({'a': 1})
        assert outcome.issues[0].message == "Expected tuple (array), received object"


class TestRecord:
    """Tests for RecordValidator."""

    def test_valid_record(self):
        """Test keys and values are validated."""
        validator = RecordValidator(StringValidator(), NumberValidator())
        assert validator.validate({'a': 1, 'b': 2}).value == {'a': 1, 'b': 2}

    def test_collects_value_issues(self):
        """Test three bad values give three issues."""
        validator = RecordValidator(StringValidator(), NumberValidator().min(0))
        outcome = validator.validate({'a': 10, 'b': -5, 'c': 'x', 'd': -10})
        assert len(outcome.issues) == 3
        assert outcome.issues.paths == ['b', 'c', 'd']

    def test_key_failure_skips_value(self):
        """Test an invalid key is reported and its value not checked."""
        validator = RecordValidator(StringValidator().min(3), NumberValidator())
        outcome = validator.validate({'ab': 'not a number', 'abc': 1})
        assert len(outcome.issues) == 1
        assert outcome.issues[0].path == 'key(ab)'
        assert outcome.issues[0].code == 'invalid_key'

    def test_non_string_key_input(self):
        """Test non-string keys fail the string key validator."""
        outcome = RecordValidator(StringValidator(), AnyValidator()).validate({1: 'x'})
        assert outcome.issues.paths == ['key(1)']

    def test_transformed_key(self):
        """Test values are stored and reported under the validated key."""
        validator = RecordValidator(StringValidator().to_uppercase(), NumberValidator())
        assert validator.validate({'a': 1}).value == {'A': 1}
        assert validator.validate({'b': 'x'}).issues.paths == ['B']

    def test_key_must_produce_string(self):
        """Test a key validator returning a non-string rejects the entry."""
        outcome = RecordValidator(KeyLength(), AnyValidator()).validate({'abc': 1})
        assert not outcome.ok
        assert outcome.issues[0].message == "Record key must be a string"
        assert outcome.issues[0].path == 'key(abc)'
        assert outcome.issues[0].value == 3

    def test_rejects_non_mapping(self):
        """Test type mismatch."""
        outcome = RecordValidator(StringValidator(), AnyValidator()).validate([1])
        assert outcome.issues[0].message == "Expected record (object), received array"
