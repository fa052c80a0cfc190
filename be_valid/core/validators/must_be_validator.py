"""
MustBeValidator - general purpose "must be" comparator validator.

Evaluates a set of directives against one field:

    MustBeValidator("salary", {"greater_than": 10})
    MustBeValidator("bonus", {"one_of": [1, 2, 3]})
    MustBeValidator("birthday", {"before": TODAY})
    MustBeValidator("email", {"present": True, "when": {"salary": PRESENT}})

Escape conditions and satisfied comparisons make the whole rule pass at
once. Otherwise the failure message is composed as directives are checked
and a single error is added to the record.
"""

import operator
from collections.abc import Mapping
from re import Pattern
from typing import Any, Callable

from be_valid.exceptions import ConfigurationError
from be_valid.observability.logger import get_logger

from .base_validator import BaseValidator, Record, is_blank, is_present
from .date_validator import AFTER, BEFORE, evaluate_bound
from .messages import Message
from .operands import (
    BLANK,
    PRESENT,
    Field,
    Method,
    as_pattern,
    as_sequence,
    describe_operand,
    flatten,
    is_collection,
    join_values,
    resolve_operand,
)

logger = get_logger(__name__)


def _matches(value: Any, pattern: Any) -> bool:
    return as_pattern(pattern).search(str(value)) is not None


MATCHERS: dict[str, Callable[[Any, Any], bool]] = {
    "equal_to": operator.eq,
    "greater_than": operator.gt,
    "greater_or_equal_to": operator.ge,
    "less_than": operator.lt,
    "less_or_equal_to": operator.le,
    "not_equal_to": operator.ne,
    "matching": _matches,
}

DIRECTIVES = frozenset(MATCHERS) | {"blank", "present", "one_of", "not_any_of", "only_from", BEFORE, AFTER}


class MustBeValidator(BaseValidator):
    """
    Validates a field against comparison directives.

    Parameters:
    - blank / present: Pass as soon as the value is blank / present
    - one_of: Allowed values (nested sequences are flattened)
    - not_any_of: Forbidden values
    - only_from: Every element of the value must be allowed
    - before / after: Date bounds, see DateValidator
    - equal_to, not_equal_to, greater_than, greater_or_equal_to, less_than,
      less_or_equal_to, matching: Comparisons against a literal, a Field or
      a callable(record)
    - when: Field -> condition mapping; the rule only applies when all hold
    - show_values: Append allowed/forbidden values to the message (default True)
    - message: Override for the whole message
    - rule_name: Identifier for disabling the rule through configuration
    - error_level: Record attribute holding the error collection to write to
    """

    def validate(self, value: Any, record: Record) -> bool:
        """
        Validate the value against every configured directive.

        Returns:
            True if the rule passes or does not apply, False if an error was added

        Raises:
            ConfigurationError: If no directive is configured or `when` is
                not a mapping
        """
        options = self.parameters

        # Disabled rules are skipped before their options are looked at
        if self.config.is_disabled(self.rule_name):
            logger.debug(f"Rule '{self.rule_name}' is disabled, skipping {self.field_name}")
            return True

        if not DIRECTIVES.intersection(options):
            raise ConfigurationError(
                f"must_be rule for '{self.field_name}' requires at least one comparison directive"
            )

        message = Message()

        # Escape conditions
        if options.get("blank"):
            if is_blank(value):
                return True
            message.append(" blank")

        if options.get("present"):
            if is_present(value):
                return True
            message.append(" present")

        # Membership; each collection is flattened once per call
        collections = {
            key: flatten(options[key])
            for key in ("one_of", "not_any_of", "only_from")
            if options.get(key) is not None
        }
        value_text = "" if value is None else value

        if "one_of" in collections:
            if value in collections["one_of"]:
                return True
            message.replace(f": '{value_text}' is not a valid value")

        if "not_any_of" in collections:
            if value not in collections["not_any_of"]:
                return True
            message.replace(f": '{value_text}' is not a valid value")

        if "only_from" in collections:
            elements = as_sequence(value)
            if all(element in collections["only_from"] for element in elements):
                return True
            message.replace(f": {join_values(elements)} is not a valid value")

        # Date bounds
        if self._check_bounds(value, record, message):
            return True

        # Comparators, in the order they were configured
        for key, operand in options.items():
            if key not in MATCHERS:
                continue
            resolved = resolve_operand(record, operand)
            if self._compare(key, value, resolved):
                return True
            shown = operand if isinstance(operand, Field) else resolved
            if key == "matching" and not isinstance(shown, Field):
                shown = as_pattern(shown)
            message.append(f" {key.replace('_', ' ')} {describe_operand(shown)}")

        # Conditions; a rule whose conditions do not hold does not apply
        if options.get("when") is not None:
            clauses = self._when_clauses(record)
            if clauses is None:
                return True
            if clauses:
                message.append(" when " + " and ".join(clauses))

        if options.get("show_values", True):
            if "one_of" in collections:
                message.append(f". Valid values: {join_values(collections['one_of'])}")
            if "only_from" in collections:
                message.append(f". Valid values: {join_values(collections['only_from'])}")
            if "not_any_of" in collections:
                message.append(f". Invalid values: {join_values(collections['not_any_of'])}")

        text = options.get("message") or message.finish()
        self.error_collection(record).add(self.field_name, text, rule_name=self.rule_name)
        logger.debug(
            f"Rule failed for {self.field_name}: {text}",
            extra={"rule_name": self.rule_name, "field_name": self.field_name},
        )
        return False

    def _check_bounds(self, value: Any, record: Record, message: Message) -> bool:
        """
        Run the before/after directives. A failing bound replaces the
        message, so when both fail the `after` message is the one reported.
        """
        original_value = record.read_attribute_before_type_cast(self.field_name)
        with_time = bool(self.parameters.get("time"))
        for direction in (BEFORE, AFTER):
            bound = self.parameters.get(direction)
            if bound is None:
                continue
            failure = evaluate_bound(record, value, original_value, bound, direction, with_time)
            if failure is None:
                return True
            message.replace(failure)
        return False

    def _compare(self, key: str, value: Any, resolved: Any) -> bool:
        """Apply one comparator; a missing operand counts as satisfied."""
        if resolved is None:
            return True
        if value is not None:
            try:
                if MATCHERS[key](value, resolved):
                    return True
            except TypeError as e:
                logger.debug(f"Cannot compare {self.field_name} {key} {describe_operand(resolved)}: {e}")
        return key == "not_equal_to" and value != resolved

    def _when_clauses(self, record: Record) -> list[str] | None:
        """
        Check the `when` conditions.

        Returns:
            Message clauses when every condition holds, None when the rule
            does not apply to this record
        """
        conditions = self.parameters["when"]
        if not isinstance(conditions, Mapping):
            raise ConfigurationError(
                f"Invalid 'when' option for '{self.field_name}': must be a mapping of field to condition"
            )

        clauses = []
        for field, condition in conditions.items():
            current = record.read_attribute(field)
            if isinstance(condition, Pattern):
                holds = current is not None and condition.search(str(current)) is not None
            elif is_collection(condition):
                holds = current in flatten(condition)
            elif condition is BLANK:
                holds = is_blank(current)
            elif condition is PRESENT:
                holds = is_present(current)
            elif isinstance(condition, Method):
                holds = current is not None and condition.call(current)
            elif isinstance(condition, Field):
                holds = current == condition.resolve(record)
            else:
                holds = condition == current

            if not holds:
                logger.debug(f"Condition on '{field}' not met, rule for {self.field_name} does not apply")
                return None

            if condition is BLANK or condition is PRESENT:
                clauses.append(f"{field} is {condition}")
            else:
                clauses.append(f"{field} = {'' if current is None else current}")
        return clauses

    @property
    def rule_type(self) -> str:
        return "must_be"
