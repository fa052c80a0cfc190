"""
Exceptions raised for mistakes in rule declarations.

Failed business rules are never exceptions; they are appended to the
record's error collection.
"""


class ConfigurationError(ValueError):
    """Raised when a rule is declared with missing or malformed options."""
    pass
