"""
ValidationResult model representing the outcome of validating a record (ephemeral).
"""

from pydantic import BaseModel, Field, field_validator


class ValidationResult(BaseModel):
    """
    Outcome of running the rule engine over one record.

    Attributes:
        record_id: Which record was validated
        passed: Overall validation status
        passed_rules: Rules that succeeded
        failed_rules: Error-level rules that failed
        warnings: Warning-level or notice rules that failed
        skipped_rules: Rules disabled through the configuration registry
        messages: Full error messages, in the order they were added
    """

    record_id: str
    passed: bool
    passed_rules: list[str] = Field(default_factory=list)
    failed_rules: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    skipped_rules: list[str] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)

    @field_validator("failed_rules")
    @classmethod
    def check_passed_consistency(cls, v, info):
        """Validate that passed=True implies failed_rules is empty."""
        if info.data.get("passed") and len(v) > 0:
            raise ValueError("passed=True but failed_rules is not empty")
        return v

    model_config = {
        "json_schema_extra": {
            "example": {
                "record_id": "USR0000001",
                "passed": False,
                "passed_rules": ["name_present"],
                "failed_rules": ["salary_floor"],
                "warnings": ["bonus_allowed_values"],
                "skipped_rules": [],
                "messages": ["Salary must be greater than 10."],
            }
        }
    }
