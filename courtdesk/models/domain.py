# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models - pure data structures, NO FastAPI dependency.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UserProfile(BaseModel):
    """Read-only view of the signed-in user, owned by the auth provider."""
    email: str = Field(..., min_length=1, max_length=255)
    name: Optional[str] = Field(default=None, max_length=255)

    @property
    def fallback_name(self) -> str:
        return self.name or self.email


class AuthState(BaseModel):
    """Authentication snapshot handed to the route guard and the resolver."""
    user: Optional[UserProfile] = None
    is_authenticated: bool = False
    is_loading: bool = False


ANONYMOUS = AuthState()
LOADING = AuthState(is_loading=True)

TASK_STATUSES = ("todo", "in-progress", "review", "done")
PROJECT_STATUSES = ("planning", "active", "on-hold", "completed", "cancelled")
PRIORITIES = ("low", "medium", "high", "urgent")
