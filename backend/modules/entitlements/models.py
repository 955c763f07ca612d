"""
Entitlement module data models.

A Requirement says what a route or region needs; a Decision says whether
the current identity meets it and, if not, why.
"""

from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field, field_validator

from modules.profiles.models import Role


class DecisionOutcome(str, Enum):
    """Result of evaluating a requirement."""

    ALLOW = "allow"
    DENY = "deny"
    PENDING = "pending"                  # Identity still loading
    UNAUTHENTICATED = "unauthenticated"  # Nobody signed in


class Requirement(BaseModel):
    """
    Access requirement. Every part that is set must hold.

    An empty requirement admits any signed-in user.
    """

    allowed_roles: frozenset[str] = Field(default_factory=frozenset)
    allowed_plans: frozenset[str] = Field(default_factory=frozenset)
    premium: bool = False

    model_config = {"frozen": True}

    @field_validator("allowed_roles", "allowed_plans", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, (str, Role)):
            value = [value]
        normalized = set()
        for item in value:
            text = str(item.value if isinstance(item, Enum) else item).strip().lower()
            if text:
                normalized.add(text)
        return frozenset(normalized)

    @classmethod
    def of(
        cls,
        roles: Optional[Iterable[Any]] = None,
        plans: Optional[Iterable[str]] = None,
        premium: bool = False,
    ) -> "Requirement":
        return cls(allowed_roles=roles, allowed_plans=plans, premium=premium)

    @property
    def is_empty(self) -> bool:
        return not self.allowed_roles and not self.allowed_plans and not self.premium


class Decision(BaseModel):
    """Outcome of an access check, with the facts it was made on."""

    outcome: DecisionOutcome
    reason: str = ""
    current_role: Optional[Role] = None
    current_plan: Optional[str] = None
    required_roles: list[str] = Field(default_factory=list)
    required_plans: list[str] = Field(default_factory=list)
    premium_required: bool = False
    unmet: list[str] = Field(
        default_factory=list,
        description="Parts of the requirement that failed: role, plan, premium",
    )

    model_config = {"frozen": True}

    @property
    def allowed(self) -> bool:
        return self.outcome == DecisionOutcome.ALLOW
