"""
DateValidator - validates dates against before/after bounds.

Also provides evaluate_bound(), the bound check the must-be validator
delegates its `before` and `after` directives to.
"""

from datetime import date, datetime, time, timedelta
from typing import Any

from be_valid.exceptions import ConfigurationError
from be_valid.observability.logger import get_logger

from .base_validator import BaseValidator, Record, is_blank
from .operands import NOW, TODAY, Field, is_callable_operand

logger = get_logger(__name__)

# Leniency on NOW for clocks that drift between hosts
NOW_GRACE_PERIOD = timedelta(seconds=60)

BEFORE = "before"
AFTER = "after"

# direction -> (sentinel clause, literal clause)
_BOUND_CLAUSES = {
    AFTER: ("Date cannot be in the past", "Date cannot be before"),
    BEFORE: ("Date cannot be in the future", "Date cannot be after"),
}


def parse_iso_date(text: str) -> date:
    """
    Parse an ISO date ("2020-01-01") or datetime ("2020-01-01T10:30:00").

    Raises:
        ConfigurationError: If the text is neither
    """
    try:
        if "T" in text or ":" in text:
            return datetime.fromisoformat(text)
        return date.fromisoformat(text)
    except ValueError:
        raise ConfigurationError(f"Invalid date bound '{text}'")


def _as_bound_date(resolved: Any, bound: Any) -> Any:
    """Coerce what a Field or callable bound produced into a date."""
    if isinstance(resolved, date) or is_blank(resolved):
        return resolved
    if isinstance(resolved, str):
        return parse_iso_date(resolved.strip())
    raise ConfigurationError(
        f"Date bound {bound!r} resolved to {resolved!r}, expected a date, datetime or ISO date string"
    )


def resolve_bound(record: Record, bound: Any, value: Any = None, direction: str = BEFORE) -> Any:
    """
    Resolve a bound option to a concrete date or datetime.

    NOW is widened by NOW_GRACE_PERIOD on the side being checked, so a value
    stamped slightly off the local clock still satisfies it. Field and
    callable bounds may produce ISO date strings, which are parsed.

    Returns None when the bound refers to an attribute the record does not
    have or that is unset.
    """
    if bound is TODAY:
        return date.today()
    if bound is NOW:
        tzinfo = value.tzinfo if isinstance(value, datetime) else None
        now = datetime.now(tzinfo)
        return now - NOW_GRACE_PERIOD if direction == AFTER else now + NOW_GRACE_PERIOD
    if isinstance(bound, date):
        return bound
    if isinstance(bound, Field):
        if not record.has_attribute(bound.name):
            return None
        return _as_bound_date(bound.resolve(record), bound)
    if is_callable_operand(bound):
        return _as_bound_date(bound(record), bound)
    raise ConfigurationError(
        f"Invalid date bound {bound!r}: expected a date, datetime, Field, NOW, TODAY or callable"
    )


def _align_precision(bound: date, value: date, with_time: bool) -> tuple[date, date]:
    """Bring bound and value to the same precision before comparing."""
    if not with_time and isinstance(bound, datetime):
        bound = bound.date()
    if isinstance(bound, datetime):
        if not isinstance(value, datetime):
            value = datetime.combine(value, time.min, tzinfo=bound.tzinfo)
        # A naive side is read in the other side's timezone
        elif bound.tzinfo is None and value.tzinfo is not None:
            bound = bound.replace(tzinfo=value.tzinfo)
        elif value.tzinfo is None and bound.tzinfo is not None:
            value = value.replace(tzinfo=bound.tzinfo)
    elif isinstance(value, datetime):
        value = value.date()
    return bound, value


def _describe_bound(record: Record, bound: Any, direction: str) -> str:
    sentinel_clause, literal_clause = _BOUND_CLAUSES[direction]
    if bound is NOW or bound is TODAY:
        return f" {sentinel_clause}"
    if isinstance(bound, Field):
        return f" {literal_clause} {bound.name}"
    if is_callable_operand(bound):
        return f" {literal_clause} {bound(record)}"
    return f" {literal_clause} {bound}"


def evaluate_bound(
    record: Record,
    value: Any,
    original_value: Any,
    bound: Any,
    direction: str,
    with_time: bool = False,
) -> str | None:
    """
    Check a value against one side of a date bound. Bounds are inclusive.

    Args:
        record: Record used to resolve Field and callable bounds
        value: Typed value (date or datetime)
        original_value: Value as received, quoted in the failure message
        bound: Literal date/datetime, Field, NOW, TODAY or callable(record)
        direction: "before" or "after"
        with_time: Compare with time of day instead of whole dates

    Returns:
        None when the value satisfies the bound, else the failure message
        (without the trailing period)
    """
    if direction not in _BOUND_CLAUSES:
        raise ConfigurationError(f"Unknown bound direction '{direction}'")

    resolved = resolve_bound(record, bound, value, direction)
    # Nothing to compare against
    if is_blank(resolved):
        return None

    # Blank and non-date values fall through to the failure message
    if isinstance(value, date) and not is_blank(value):
        resolved, value = _align_precision(resolved, value, with_time)
        if direction == AFTER and value >= resolved:
            return None
        if direction == BEFORE and value <= resolved:
            return None

    original_text = "" if original_value is None else original_value
    message = f": {original_text} is not a valid value."
    return message + _describe_bound(record, bound, direction)


class DateValidator(BaseValidator):
    """
    Validates that a field holds a date within optional bounds.

    Parameters:
    - after: Lower bound (inclusive); date, datetime, Field, NOW, TODAY or callable
    - before: Upper bound (inclusive); same kinds as `after`
    - time: Compare with time of day instead of whole dates
    - allow_blank: Accept a missing value when the original input was blank
    - message: Override for the unparseable-date message
    - after_message / before_message: Overrides for the bound messages
    - error_level: Record attribute holding the error collection to write to
    - rule_name: Identifier for disabling the rule through configuration
    """

    def validate(self, value: Any, record: Record) -> bool:
        """
        Validate the date and its bounds.

        A value of None means the original input could not be parsed as a
        date. Non-date values are left to other validators.
        """
        if self.config.is_disabled(self.rule_name):
            logger.debug(f"Rule '{self.rule_name}' is disabled, skipping {self.field_name}")
            return True

        original_value = record.read_attribute_before_type_cast(self.field_name)
        errors = self.error_collection(record)
        with_time = bool(self.parameters.get("time"))

        # None means the original input did not parse as a date
        if value is None:
            if is_blank(original_value) and self.parameters.get("allow_blank"):
                return True
            original_text = "" if original_value is None else original_value
            if with_time:
                message = (
                    f": {original_text} is not a valid value. "
                    "Value must be a date in YYYY-MM-DD or YYYY-MM-DD HH:MM:SS format."
                )
            else:
                message = f": {original_text} is not a valid value. Value must be a date in YYYY-MM-DD."
            errors.add(self.field_name, self.parameters.get("message") or message, rule_name=self.rule_name)
            return False

        if not isinstance(value, date):
            return True

        # Each failing bound adds its own entry
        valid = True
        for direction in (AFTER, BEFORE):
            bound = self.parameters.get(direction)
            if bound is None:
                continue
            failure = evaluate_bound(record, value, original_value, bound, direction, with_time)
            if failure is None:
                continue
            override = self.parameters.get(f"{direction}_message")
            errors.add(self.field_name, override or f"{failure}.", rule_name=self.rule_name)
            logger.debug(f"Date rule failed for {self.field_name}: {failure}")
            valid = False

        return valid

    @property
    def rule_type(self) -> str:
        return "date"
