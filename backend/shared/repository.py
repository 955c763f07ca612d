"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

from typing import Any, Optional, TypeVar, Generic

from postgrest.exceptions import APIError
from supabase import Client


T = TypeVar("T")

# Postgres error code for unique_violation
UNIQUE_VIOLATION = "23505"


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class PlanRepository(BaseRepository[Plan]):
            async def get_by_id(self, plan_id: str) -> Optional[Plan]:
                result = self._db.table("plans").select("*").eq("id", plan_id).execute()
                row = self._first(result)
                return Plan.model_validate(row) if row else None
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    @staticmethod
    def _first(result: Any) -> Optional[dict[str, Any]]:
        """Return the first row of a query result, or None when empty."""
        if not result.data:
            return None
        return result.data[0]

    @staticmethod
    def _is_unique_violation(error: APIError) -> bool:
        """Whether a PostgREST error was raised by a unique constraint."""
        return str(getattr(error, "code", "")) == UNIQUE_VIOLATION
