"""
Limit enforcement errors.
"""

from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from .enforcer import LimitDecision


class LimitError(Exception):
    """Base class for limit enforcement errors."""

    code = "LIMIT_ERROR"
    status_code = 500


class LimitExceededError(LimitError):
    """The requested amount would exceed the plan ceiling."""

    code = "LIMIT_EXCEEDED"
    status_code = 403

    def __init__(self, decision: "LimitDecision"):
        super().__init__("Subscription limit reached for this action")
        self.decision = decision


class UnsupportedLimitError(LimitError):
    """The limit key has no registered definition or usage source."""

    code = "LIMIT_NOT_IMPLEMENTED"
    status_code = 501

    def __init__(self, limit_key: str):
        super().__init__(f"Unsupported limit key: {limit_key}")
        self.limit_key = limit_key


class BrandNotFoundError(LimitError):
    """The brand scoping a limit check does not exist."""

    code = "BRAND_NOT_FOUND"
    status_code = 404

    def __init__(self, brand_id: UUID | str):
        super().__init__(f"Brand not found: {brand_id}")
        self.brand_id = brand_id
