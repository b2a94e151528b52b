"""
Usage schemas.

Serialized in camelCase to match the limit decision payload.
"""

from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from workspace_access.limits import LimitDecision, LimitScope


class UsageResponse(BaseModel):
    """Current usage of one limit key; ``limit``/``remaining`` are null when unlimited."""
    model_config = ConfigDict(populate_by_name=True)

    limit_key: str = Field(serialization_alias="limitKey")
    plan: str
    scope: LimitScope
    scope_id: UUID | None = Field(default=None, serialization_alias="scopeId")
    current: int
    limit: int | None
    remaining: int | None
    is_unlimited: bool = Field(serialization_alias="isUnlimited")

    @classmethod
    def from_decision(
        cls,
        decision: LimitDecision,
        scope: LimitScope,
        scope_id: UUID | None,
    ) -> "UsageResponse":
        payload = decision.to_payload()
        return cls(
            limit_key=decision.limit_key,
            plan=payload["plan"],
            scope=scope,
            scope_id=scope_id,
            current=decision.current,
            limit=payload["limit"],
            remaining=payload["remaining"],
            is_unlimited=decision.is_unlimited,
        )
