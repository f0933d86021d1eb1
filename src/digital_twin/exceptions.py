"""Digital twin exception hierarchy.

All package-specific exceptions inherit from DigitalTwinError. The parser
and the schema introspector never raise; these cover the evaluator side.
"""


class DigitalTwinError(Exception):
    """Base exception for all digital twin errors."""


class RetryExhaustedError(DigitalTwinError):
    """All retry attempts failed."""

    def __init__(
        self, attempts: int, last_diagnosis: str, last_result: object = None
    ) -> None:
        self.attempts = attempts
        self.last_diagnosis = last_diagnosis
        self.last_result = last_result
        super().__init__(
            f"All {attempts} retry attempts failed. Last diagnosis: {last_diagnosis}"
        )


class UpdateFormatError(DigitalTwinError):
    """Raised when a proposed update cannot be read in strict mode."""

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"Invalid update at index {index}: {reason}")
