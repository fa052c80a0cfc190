"""
Unit tests for the must-be validator.

Includes property-based testing with hypothesis for comparator semantics.
"""

import re
from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from be_valid import (
    BLANK,
    PRESENT,
    ConfigurationError,
    DataRecord,
    Field,
    Method,
    MustBeValidator,
    configure,
)
from be_valid.testing import disabled_rules

fixture_settings = settings(suppress_health_check=[HealthCheck.function_scoped_fixture])


def _check(make_record, field, parameters, **values):
    record = make_record(**values)
    valid = MustBeValidator(field, parameters).validate(record.read_attribute(field), record)
    return valid, record


class TestBlank:
    """Tests for the blank directive"""

    def test_empty_string_passes(self, make_record):
        valid, record = _check(make_record, "name", {"blank": True}, name="")
        assert valid is True
        assert record.errors.is_empty()

    def test_nil_passes(self, make_record):
        valid, record = _check(make_record, "name", {"blank": True}, name=None)
        assert valid is True
        assert record.errors.is_empty()

    def test_value_fails(self, make_record):
        valid, record = _check(make_record, "name", {"blank": True}, name="foo")
        assert valid is False
        assert record.errors.full_messages() == ["Name must be blank."]


class TestPresent:
    """Tests for the present directive"""

    def test_value_passes(self, make_record):
        valid, record = _check(make_record, "name", {"present": True}, name="foo")
        assert valid is True
        assert record.errors.is_empty()

    def test_nil_fails(self, make_record):
        valid, record = _check(make_record, "name", {"present": True}, name=None)
        assert valid is False
        assert record.errors.full_messages() == ["Name must be present."]

    def test_empty_string_fails(self, make_record):
        _, record = _check(make_record, "name", {"present": True}, name="")
        assert record.errors.full_messages() == ["Name must be present."]

    def test_zero_is_present(self, make_record):
        valid, record = _check(make_record, "salary", {"present": True}, salary=0)
        assert valid is True
        assert record.errors.is_empty()

    @fixture_settings
    @given(st.integers() | st.floats(allow_nan=False))
    def test_property_numbers_are_present(self, number):
        """Property test: no number is ever blank"""
        record = DataRecord(record_id="R1", raw_payload={"salary": str(number)}, processed_payload={"salary": number})
        assert MustBeValidator("salary", {"present": True}).validate(number, record)


class TestComparators:
    """Tests for equality and ordering comparators"""

    def test_equal_to_passes(self, make_record):
        valid, _ = _check(make_record, "name", {"equal_to": "foo"}, name="foo")
        assert valid is True

    def test_equal_to_fails(self, make_record):
        _, record = _check(make_record, "name", {"equal_to": "foo"}, name="bar")
        assert record.errors["name"] == ["must be equal to foo."]

    def test_equal_to_fails_on_nil_value(self, make_record):
        _, record = _check(make_record, "name", {"equal_to": "foo"}, name=None)
        assert record.errors["name"] == ["must be equal to foo."]

    def test_equal_to_other_field(self, make_record):
        valid, _ = _check(make_record, "name", {"equal_to": Field("email")}, name="foo", email="foo")
        assert valid is True
        _, record = _check(make_record, "name", {"equal_to": Field("email")}, name="bar", email="foo")
        assert record.errors["name"] == ["must be equal to email."]

    def test_greater_than(self, make_record):
        assert _check(make_record, "salary", {"greater_than": 10}, salary=11)[0] is True
        _, record = _check(make_record, "salary", {"greater_than": 10}, salary=10)
        assert record.errors["salary"] == ["must be greater than 10."]

    def test_greater_than_nil_value_fails(self, make_record):
        _, record = _check(make_record, "salary", {"greater_than": 10}, name=None)
        assert record.errors["salary"] == ["must be greater than 10."]

    def test_greater_than_other_field(self, make_record):
        parameters = {"greater_than": Field("bonus")}
        assert _check(make_record, "salary", parameters, salary=20, bonus=10)[0] is True
        _, record = _check(make_record, "salary", parameters, salary=0, bonus=10)
        assert record.errors["salary"] == ["must be greater than bonus."]

    def test_unset_operand_field_passes(self, make_record):
        valid, record = _check(make_record, "salary", {"greater_than": Field("bonus")}, salary=0, bonus=None)
        assert valid is True
        assert record.errors.is_empty()

    def test_greater_or_equal_to(self, make_record):
        parameters = {"greater_or_equal_to": 10}
        assert _check(make_record, "salary", parameters, salary=11)[0] is True
        assert _check(make_record, "salary", parameters, salary=10)[0] is True
        _, record = _check(make_record, "salary", parameters, salary=None)
        assert record.errors["salary"] == ["must be greater or equal to 10."]

    def test_greater_or_equal_to_other_field(self, make_record):
        parameters = {"greater_or_equal_to": Field("bonus")}
        _, record = _check(make_record, "salary", parameters, salary=0, bonus=10)
        assert record.errors["salary"] == ["must be greater or equal to bonus."]

    def test_less_or_equal_to(self, make_record):
        parameters = {"less_or_equal_to": Field("bonus")}
        assert _check(make_record, "salary", parameters, salary=2, bonus=10)[0] is True
        assert _check(make_record, "salary", parameters, salary=10, bonus=10)[0] is True
        _, record = _check(make_record, "salary", parameters, salary=20, bonus=10)
        assert record.errors["salary"] == ["must be less or equal to bonus."]

    def test_less_than(self, make_record):
        assert _check(make_record, "salary", {"less_than": 10}, salary=9)[0] is True
        _, record = _check(make_record, "salary", {"less_than": 10}, salary=10)
        assert record.errors["salary"] == ["must be less than 10."]

    def test_not_equal_to(self, make_record):
        assert _check(make_record, "salary", {"not_equal_to": 10}, salary=9)[0] is True
        _, record = _check(make_record, "salary", {"not_equal_to": 10}, salary=10)
        assert record.errors["salary"] == ["must be not equal to 10."]

    def test_not_equal_to_nil_value_passes(self, make_record):
        valid, record = _check(make_record, "salary", {"not_equal_to": 10}, salary=None)
        assert valid is True
        assert record.errors.is_empty()

    def test_not_equal_to_other_field(self, make_record):
        parameters = {"not_equal_to": Field("bonus")}
        _, record = _check(make_record, "salary", parameters, salary=10, bonus=10)
        assert record.errors["salary"] == ["must be not equal to bonus."]
        assert _check(make_record, "salary", parameters, salary=20, bonus=10)[0] is True

    def test_callable_operand(self, make_record):
        parameters = {"greater_than": lambda record: record.read_attribute("bonus") * 2}
        assert _check(make_record, "salary", parameters, salary=21, bonus=10)[0] is True
        _, record = _check(make_record, "salary", parameters, salary=20, bonus=10)
        assert record.errors["salary"] == ["must be greater than 20."]

    def test_first_satisfied_comparator_passes_rule(self, make_record):
        parameters = {"greater_than": 10, "less_than": 20}
        assert _check(make_record, "salary", parameters, salary=5)[0] is True

    def test_failing_comparators_compose_message(self, make_record):
        parameters = {"less_than": 5, "greater_than": 10}
        _, record = _check(make_record, "salary", parameters, salary=7)
        assert record.errors["salary"] == ["must be less than 5 greater than 10."]

    def test_incomparable_types_fail(self, make_record):
        _, record = _check(make_record, "name", {"greater_than": 10}, name="foo")
        assert record.errors["name"] == ["must be greater than 10."]

    @fixture_settings
    @given(st.integers(), st.integers())
    def test_property_greater_than_matches_python(self, value, operand):
        """Property test: greater_than passes exactly when value > operand"""
        record = DataRecord(record_id="R1", processed_payload={"salary": value})
        valid = MustBeValidator("salary", {"greater_than": operand}).validate(value, record)
        assert valid is (value > operand)
        assert record.errors.is_empty() is valid


class TestMatching:
    """Tests for the matching directive"""

    def test_matching_passes(self, make_record):
        parameters = {"matching": re.compile(r"strange.*love")}
        assert _check(make_record, "name", parameters, name="strangelove")[0] is True
        assert _check(make_record, "name", parameters, name="strange love")[0] is True

    def test_matching_fails_with_pattern_literal(self, make_record):
        _, record = _check(make_record, "name", {"matching": re.compile(r"strange.*love")}, name="foo")
        assert record.errors.full_messages() == ["Name must be matching /strange.*love/."]

    def test_string_pattern(self, make_record):
        _, record = _check(make_record, "name", {"matching": "^[a-z]+$"}, name="Foo")
        assert record.errors["name"] == ["must be matching /^[a-z]+$/."]

    def test_matches_text_form_of_value(self, make_record):
        assert _check(make_record, "salary", {"matching": r"^\d+$"}, salary=42)[0] is True


class TestMembership:
    """Tests for one_of, not_any_of and only_from"""

    def test_one_of_passes(self, make_record):
        assert _check(make_record, "bonus", {"one_of": [1, 2, 3]}, bonus=2)[0] is True

    def test_one_of_fails_with_values(self, make_record):
        _, record = _check(make_record, "bonus", {"one_of": [1, 2, 3], "show_values": True}, bonus=7)
        assert record.errors["bonus"] == [": '7' is not a valid value. Valid values: 1, 2, 3."]

    def test_one_of_without_values(self, make_record):
        _, record = _check(make_record, "bonus", {"one_of": [1, 2, 3], "show_values": False}, bonus=7)
        assert record.errors["bonus"] == [": '7' is not a valid value."]

    def test_one_of_nested_values_are_flattened(self, make_record):
        parameters = {"one_of": [["a", "b"], ["c", ("d", "e")]]}
        assert _check(make_record, "letters", parameters, letters="d")[0] is True
        _, record = _check(make_record, "letters", parameters, letters="z")
        assert record.errors["letters"] == [": 'z' is not a valid value. Valid values: a, b, c, d, e."]

    def test_not_any_of(self, make_record):
        parameters = {"not_any_of": ["admin", "root"]}
        assert _check(make_record, "name", parameters, name="beyonce")[0] is True
        _, record = _check(make_record, "name", parameters, name="root")
        assert record.errors["name"] == [": 'root' is not a valid value. Invalid values: admin, root."]

    def test_only_from_sequence(self, make_record):
        parameters = {"only_from": ["a", "b", "c"]}
        assert _check(make_record, "letters", parameters, letters=["a", "c"])[0] is True
        _, record = _check(make_record, "letters", parameters, letters=["a", "x"])
        assert record.errors["letters"] == [": a, x is not a valid value. Valid values: a, b, c."]

    def test_only_from_wraps_scalar(self, make_record):
        parameters = {"only_from": ["a", "b"], "show_values": False}
        assert _check(make_record, "letters", parameters, letters="a")[0] is True
        _, record = _check(make_record, "letters", parameters, letters="z")
        assert record.errors["letters"] == [": z is not a valid value."]

    def test_one_of_range(self, make_record):
        parameters = {"one_of": range(1, 4)}
        assert _check(make_record, "bonus", parameters, bonus=2)[0] is True
        _, record = _check(make_record, "bonus", parameters, bonus=7)
        assert record.errors["bonus"] == [": '7' is not a valid value. Valid values: 1, 2, 3."]

    def test_not_any_of_dict_keys(self, make_record):
        parameters = {"not_any_of": {"admin": 1, "root": 0}.keys(), "show_values": False}
        assert _check(make_record, "name", parameters, name="beyonce")[0] is True
        assert _check(make_record, "name", parameters, name="root")[0] is False

    def test_only_from_range(self, make_record):
        parameters = {"only_from": range(5)}
        assert _check(make_record, "slots", parameters, slots=(0, 4))[0] is True
        _, record = _check(make_record, "slots", parameters, slots=(4, 9))
        assert record.errors["slots"] == [": 4, 9 is not a valid value. Valid values: 0, 1, 2, 3, 4."]

    @fixture_settings
    @given(st.integers(min_value=-50, max_value=50))
    def test_property_not_any_of_complements_one_of(self, value):
        """Property test: not_any_of fails exactly where one_of passes"""
        allowed = [1, 2, 3]
        record = DataRecord(record_id="R1", processed_payload={"bonus": value})
        one_of = MustBeValidator("bonus", {"one_of": allowed}).validate(value, record)
        not_any_of = MustBeValidator("bonus", {"not_any_of": allowed}).validate(value, record)
        assert one_of is not not_any_of


class TestDateBounds:
    """Tests for before/after delegated to the date bound evaluator"""

    def test_before_literal_fails(self, make_record):
        _, record = _check(make_record, "birthday", {"before": date(2020, 1, 1)}, birthday=date(2021, 1, 1))
        assert record.errors["birthday"] == [
            ": 2021-01-01 is not a valid value. Date cannot be after 2020-01-01."
        ]

    def test_before_is_inclusive(self, make_record):
        assert _check(make_record, "birthday", {"before": date(2020, 1, 1)}, birthday=date(2020, 1, 1))[0] is True

    def test_after_field_reference(self, make_record):
        parameters = {"after": Field("naming_day")}
        _, record = _check(make_record, "birthday", parameters, birthday=date(2020, 1, 1), naming_day=date(2020, 2, 1))
        assert record.errors["birthday"] == [
            ": 2020-01-01 is not a valid value. Date cannot be before naming_day."
        ]

    def test_before_field_holding_iso_text(self, make_record):
        parameters = {"before": Field("naming_day")}
        _, record = _check(make_record, "birthday", parameters, birthday=date(2021, 1, 1), naming_day="2020-01-01")
        assert record.errors["birthday"] == [
            ": 2021-01-01 is not a valid value. Date cannot be after naming_day."
        ]

    def test_aware_value_against_naive_bound_fails(self, make_record):
        parameters = {"before": datetime(2020, 1, 1), "time": True}
        birthday = datetime(2021, 1, 1, tzinfo=timezone.utc)
        valid, record = _check(make_record, "birthday", parameters, birthday=birthday)
        assert valid is False
        assert record.errors.count() == 1

    def test_after_failure_overwrites_before_failure(self, make_record):
        parameters = {"before": date(2020, 1, 1), "after": date(2022, 1, 1)}
        _, record = _check(make_record, "birthday", parameters, birthday=date(2021, 1, 1))
        assert record.errors["birthday"] == [
            ": 2021-01-01 is not a valid value. Date cannot be before 2022-01-01."
        ]


class TestWhen:
    """Tests for conditional applicability"""

    def test_condition_met_reports_clause(self, make_record):
        parameters = {"present": True, "when": {"salary": PRESENT}}
        _, record = _check(make_record, "email", parameters, email=None, salary=10)
        assert record.errors["email"] == ["must be present when salary is present."]

    def test_condition_not_met_passes(self, make_record):
        parameters = {"present": True, "when": {"salary": PRESENT}}
        valid, record = _check(make_record, "email", parameters, email=None, salary=None)
        assert valid is True
        assert record.errors.is_empty()

    def test_blank_condition(self, make_record):
        parameters = {"present": True, "when": {"salary": BLANK}}
        _, record = _check(make_record, "email", parameters, email="", salary=None)
        assert record.errors["email"] == ["must be present when salary is blank."]

    def test_equality_conditions_joined(self, make_record):
        parameters = {"greater_than": 10, "when": {"name": "beyonce", "bonus": 3}}
        _, record = _check(make_record, "salary", parameters, salary=5, name="beyonce", bonus=3)
        assert record.errors["salary"] == ["must be greater than 10 when name = beyonce and bonus = 3."]

    def test_sequence_condition(self, make_record):
        parameters = {"greater_than": 10, "when": {"bonus": [1, [2, 3]]}}
        assert _check(make_record, "salary", parameters, salary=5, bonus=7)[0] is True
        _, record = _check(make_record, "salary", parameters, salary=5, bonus=3)
        assert record.errors["salary"] == ["must be greater than 10 when bonus = 3."]

    def test_pattern_condition(self, make_record):
        parameters = {"present": True, "when": {"name": re.compile("^bey")}}
        assert _check(make_record, "email", parameters, email=None, name="jay")[0] is True
        _, record = _check(make_record, "email", parameters, email=None, name="beyonce")
        assert record.errors["email"] == ["must be present when name = beyonce."]

    def test_method_condition(self, make_record):
        premium = SimpleNamespace(is_premium=lambda: True)
        regular = SimpleNamespace(is_premium=lambda: False)
        parameters = {"present": True, "when": {"status": Method("is_premium")}}
        assert _check(make_record, "email", parameters, email=None, status=regular)[0] is True
        valid, _ = _check(make_record, "email", parameters, email=None, status=premium)
        assert valid is False

    def test_empty_when_always_applies(self, make_record):
        _, record = _check(make_record, "salary", {"greater_than": 10, "when": {}}, salary=5)
        assert record.errors["salary"] == ["must be greater than 10."]

    def test_range_condition(self, make_record):
        parameters = {"greater_than": 10, "when": {"bonus": range(1, 4)}}
        assert _check(make_record, "salary", parameters, salary=5, bonus=7)[0] is True
        _, record = _check(make_record, "salary", parameters, salary=5, bonus=2)
        assert record.errors["salary"] == ["must be greater than 10 when bonus = 2."]

    @pytest.mark.parametrize("conditions", [[], "", "salary"])
    def test_empty_non_mapping_when_raises(self, make_record, conditions):
        with pytest.raises(ConfigurationError):
            _check(make_record, "salary", {"greater_than": 10, "when": conditions}, salary=5)

    def test_when_must_be_mapping(self, make_record):
        with pytest.raises(ConfigurationError):
            _check(make_record, "salary", {"greater_than": 10, "when": ["salary"]}, salary=5)


class TestOptions:
    """Tests for message override, rule names and configuration errors"""

    def test_no_directive_raises(self, make_record):
        with pytest.raises(ConfigurationError):
            _check(make_record, "salary", {}, salary=5)

    def test_only_presentation_options_raise(self, make_record):
        with pytest.raises(ConfigurationError):
            _check(make_record, "salary", {"message": "nope", "rule_name": "x"}, salary=5)

    def test_disabled_rule_without_directives_passes(self, make_record):
        configure().disable("salary_floor")
        assert _check(make_record, "salary", {"rule_name": "salary_floor"}, salary=5)[0] is True

    def test_message_override(self, make_record):
        _, record = _check(make_record, "salary", {"greater_than": 10, "message": "is too low"}, salary=5)
        assert record.errors["salary"] == ["is too low"]

    def test_rule_name_in_metadata(self, make_record):
        _, record = _check(make_record, "salary", {"greater_than": 10, "rule_name": "salary_floor"}, salary=5)
        assert record.errors.entries[0].metadata == {"rule_name": "salary_floor"}

    def test_disabled_rule_passes(self, make_record):
        parameters = {"greater_than": 10, "rule_name": "salary_floor"}
        assert _check(make_record, "salary", parameters, salary=5)[0] is False

        configure().disable("salary_floor")
        valid, record = _check(make_record, "salary", parameters, salary=5)
        assert valid is True
        assert record.errors.is_empty()

    def test_disabled_rules_helper_restores(self, make_record):
        parameters = {"greater_than": 10, "rule_name": "salary_floor"}
        with disabled_rules("salary_floor"):
            assert _check(make_record, "salary", parameters, salary=5)[0] is True
        assert _check(make_record, "salary", parameters, salary=5)[0] is False

    def test_notice_rule_goes_to_warnings(self, make_record):
        configure().notice_rules.append("salary_floor")
        _, record = _check(make_record, "salary", {"greater_than": 10, "rule_name": "salary_floor"}, salary=5)
        assert record.errors.is_empty()
        assert record.warnings["salary"] == ["must be greater than 10."]

    def test_error_level_option(self, make_record):
        _, record = _check(make_record, "salary", {"greater_than": 10, "error_level": "warnings"}, salary=5)
        assert record.errors.is_empty()
        assert record.warnings.count() == 1
