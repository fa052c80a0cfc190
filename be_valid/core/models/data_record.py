"""
DataRecord model: the record a validator reads attributes from and writes
errors to.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from .error_entry import Errors


class DataRecord(BaseModel):
    """
    A single unit of data being validated (ephemeral, never persisted).

    Attributes:
        record_id: Unique identifier for the record (business key)
        source_id: Which source this came from
        raw_payload: Original values as received (usually text)
        processed_payload: Values after type conversion; falls back to raw_payload
        errors: Failed error-level rules
        warnings: Failed warning-level rules and notice rules
        validation_status: "pending", "valid" or "invalid"
        processing_timestamp: When the record entered validation
        batch_id: Batch identifier for grouping
    """

    record_id: str = Field(..., min_length=1)
    source_id: str | None = None
    raw_payload: dict[str, Any] = Field(default_factory=dict)
    processed_payload: dict[str, Any] | None = None
    errors: Errors = Field(default_factory=Errors)
    warnings: Errors = Field(default_factory=Errors)
    validation_status: Literal["pending", "valid", "invalid"] = "pending"
    processing_timestamp: datetime = Field(default_factory=datetime.now)
    batch_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "record_id": "USR0000001",
                "source_id": "signup_form",
                "raw_payload": {"name": "beyonce", "salary": "11", "birthday": "2019-06-01"},
                "processed_payload": {"name": "beyonce", "salary": 11, "birthday": "2019-06-01"},
                "validation_status": "pending",
            }
        },
    }

    @property
    def payload(self) -> dict[str, Any]:
        return self.processed_payload if self.processed_payload is not None else self.raw_payload

    def has_attribute(self, name: str) -> bool:
        return name in self.payload or name in self.raw_payload

    def read_attribute(self, name: str) -> Any:
        """Current (typed) value of an attribute, None when unset."""
        return self.payload.get(name)

    def read_attribute_before_type_cast(self, name: str) -> Any:
        """Value as originally received, before any conversion."""
        if name in self.raw_payload:
            return self.raw_payload[name]
        return self.payload.get(name)

    def error_collection(self, name: str) -> Errors:
        collection = getattr(self, name, None)
        if not isinstance(collection, Errors):
            raise AttributeError(f"DataRecord has no error collection named '{name}'")
        return collection
