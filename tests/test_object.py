"""Tests for the object combinator."""
import logging
import pytest
from collections import OrderedDict
from utils.exceptions import SchemaDefinitionError
from validation import (
    ObjectValidator,
    StringValidator,
    NumberValidator,
    ArrayValidator,
    AnyValidator,
    RecordValidator
)


def user_schema():
    return ObjectValidator({
        'name': StringValidator().min(2),
        'email': StringValidator().email(),
        'age': NumberValidator().min(18).optional(),
    })


class TestObjectBasics:
    """Tests for basic object validation."""

    def test_valid_object(self):
        """Test a valid object passes with its fields."""
        outcome = user_schema().validate({'name': 'Ann', 'email': 'ann@example.com', 'age': 30})
        assert outcome.ok
        assert outcome.value == {'name': 'Ann', 'email': 'ann@example.com', 'age': 30}

    def test_rejects_non_mapping(self):
        """Test non-mappings fail with a type mismatch."""
        outcome = user_schema().validate(['a'])
        assert outcome.issues[0].message == "Expected object, received array"
        assert outcome.issues[0].path == ''

    def test_rejects_none(self):
        """Test None fails unless a presence modifier allows it."""
        assert user_schema().validate(None).issues[0].message == "Expected object, received null"

    def test_accepts_any_mapping(self):
        """Test mapping types other than dict."""
        data = OrderedDict([('name', 'Ann'), ('email', 'ann@example.com')])
        assert user_schema().validate(data).ok

    def test_missing_required_field(self):
        """Test an absent required field is reported at its path."""
        outcome = user_schema().validate({'name': 'Ann'})
        assert not outcome.ok
        assert outcome.issues.paths == ['email']
        assert outcome.issues[0].message == "Expected string, received null"

    def test_optional_absent_field_is_omitted(self):
        """Test optional fields that resolve to None stay out of the result."""
        outcome = user_schema().validate({'name': 'Ann', 'email': 'ann@example.com'})
        assert outcome.ok
        assert 'age' not in outcome.value

    def test_default_field_is_filled(self):
        """Test defaulted fields appear in the result."""
        schema = ObjectValidator({'role': StringValidator().default('member')})
        assert schema.validate({}).value == {'role': 'member'}

    def test_collects_all_field_issues(self):
        """Test every failing field is reported."""
        outcome = user_schema().validate({'name': 'A', 'email': 'bad', 'age': 10})
        assert sorted(outcome.issues.paths) == ['age', 'email', 'name']

    def test_transformed_values_in_result(self):
        """Test field outputs replace inputs."""
        schema = ObjectValidator({'tag': StringValidator().trim().to_lowercase()})
        assert schema.validate({'tag': '  Hello '}).value == {'tag': 'hello'}


class TestUnknownFields:
    """Tests for unknown-field policies."""

    data = {'name': 'Ann', 'email': 'ann@example.com', 'extra': 1, 'other': 'x'}

    def test_strip_is_default(self):
        """Test unknown keys are dropped by default."""
        outcome = user_schema().validate(self.data)
        assert outcome.ok
        assert set(outcome.value) == {'name', 'email'}

    def test_strict_reports_each_unknown_key(self):
        """Test strict mode fails on unknown keys."""
        outcome = user_schema().strict().validate(self.data)
        assert not outcome.ok
        assert sorted(outcome.issues.paths) == ['extra', 'other']
        assert all(issue.message == "Unknown field" for issue in outcome.issues)
        assert outcome.issues.by_path('extra')[0].value == 1
        assert outcome.issues[0].code == 'unrecognized_key'

    def test_strict_rejections_are_logged(self, caplog):
        """Test unknown keys are logged at debug level."""
        with caplog.at_level(logging.DEBUG, logger='validation.schema'):
            user_schema().strict().validate(self.data)
        assert "Rejected unknown field: 'extra'" in caplog.text

    def test_passthrough_keeps_unknown_keys(self):
        """Test passthrough copies unknown values verbatim."""
        nested = {'deep': [1, 2]}
        outcome = user_schema().passthrough().validate(dict(self.data, nested=nested))
        assert outcome.ok
        assert outcome.value['extra'] == 1
        assert outcome.value['nested'] is nested

    def test_strip_after_strict(self):
        """Test policies can be switched back."""
        assert user_schema().strict().strip().validate(self.data).ok

    def test_key_set_property(self):
        """Test result keys are successful non-null fields plus retained unknowns."""
        schema = ObjectValidator({
            'a': NumberValidator(),
            'b': NumberValidator().optional(),
            'c': AnyValidator(),
        }).passthrough()
        outcome = schema.validate({'a': 1, 'c': None, 'z': 0})
        assert set(outcome.value) == {'a', 'z'}

    def test_invalid_policy(self):
        """Test an unknown policy name fails at build time."""
        with pytest.raises(SchemaDefinitionError):
            ObjectValidator({}, unknown_fields='ignore')

    def test_non_validator_field(self):
        """Test schema values must be validators."""
        with pytest.raises(SchemaDefinitionError):
            ObjectValidator({'a': str})


class TestObjectPaths:
    """Tests for nested path composition."""

    def test_nested_object_path(self):
        """Test a nested field path."""
        schema = ObjectValidator({'user': ObjectValidator({'email': StringValidator().email()})})
        outcome = schema.validate({'user': {'email': 'bad'}})
        assert len(outcome.issues) == 1
        assert outcome.issues[0].path == 'user.email'

    def test_array_inside_object_path(self):
        """Test an index path under a field."""
        schema = ObjectValidator({'user': ObjectValidator({'tags': ArrayValidator(StringValidator())})})
        outcome = schema.validate({'user': {'tags': ['a', 'b', 3]}})
        assert outcome.issues.paths == ['user.tags[2]']

    def test_record_inside_object_path(self):
        """Test record keys compose under fields."""
        schema = ObjectValidator({'scores': RecordValidator(StringValidator(), NumberValidator())})
        outcome = schema.validate({'scores': {'math': 'A'}})
        assert outcome.issues.paths == ['scores.math']


class TestObjectBuilders:
    """Tests for object builder methods."""

    def test_extend(self):
        """Test extend adds and replaces fields without touching the original."""
        base = ObjectValidator({'id': NumberValidator()})
        extended = base.extend({'name': StringValidator()})
        assert set(extended.shape) == {'id', 'name'}
        assert set(base.shape) == {'id'}
        assert not extended.validate({'id': 1}).ok

    def test_policy_builders_return_copies(self):
        """Test strict() leaves the original untouched."""
        base = user_schema()
        strict = base.strict()
        assert base.unknown_fields == 'strip'
        assert strict.unknown_fields == 'strict'
