"""
Pytest configuration and fixtures for be-valid tests
"""
from typing import Any, Generator

import pytest

from be_valid import Configuration, DataRecord, reset_config


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )


# =======================
# CONFIGURATION FIXTURES
# =======================

@pytest.fixture(autouse=True)
def fresh_config() -> Generator[Configuration, None, None]:
    """
    Give every test an empty process-wide configuration

    Yields:
        The process-wide Configuration
    """
    yield reset_config()
    reset_config()


# =======================
# RECORD FIXTURES
# =======================

def build_record(**values: Any) -> DataRecord:
    """
    Build a record whose raw payload is the text form of its typed values
    """
    raw = {name: (None if value is None else str(value)) for name, value in values.items()}
    return DataRecord(record_id="USR0000001", raw_payload=raw, processed_payload=values)


@pytest.fixture
def make_record():
    """
    Factory fixture for DataRecord instances

    Returns:
        Callable taking field values as keyword arguments
    """
    return build_record


@pytest.fixture(scope="session")
def rules_yaml() -> str:
    """
    YAML rule file covering must_be and date rules
    """
    return """
rules:
  salary:
    - type: must_be
      name: salary_above_bonus
      params:
        greater_than: {field: bonus}
  bonus:
    - type: must_be
      name: bonus_allowed
      severity: warning
      params:
        one_of: [1, 2, 3]
  birthday:
    - type: date
      name: birthday_in_past
      params:
        before: today
        allow_blank: true
  email:
    - type: must_be
      params:
        present: true
        when:
          salary: {is: present}
  name:
    - type: must_be
      params:
        matching: "^[a-z]+$"
"""
