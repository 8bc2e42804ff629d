"""Custom exceptions for the collision detector."""
from typing import Iterable, List


class CpaCoreError(Exception):
    """Base collision detector exception."""


class ConfigurationError(CpaCoreError, ValueError):
    """Raised when engine configuration violates one or more constraints.

    All violations are collected into ``errors`` and joined into one message.
    """

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        super().__init__("Configuration errors: " + ", ".join(self.errors))
