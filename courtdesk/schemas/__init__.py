# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas - API contract definitions.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from courtdesk.models.domain import PRIORITIES, PROJECT_STATUSES, TASK_STATUSES


def _check_choice(value: Optional[str], choices: tuple[str, ...], label: str) -> Optional[str]:
    if value is None:
        return value
    value = value.lower().strip()
    if value not in choices:
        raise ValueError(f"{label} must be one of {choices}")
    return value


# ── Auth ──

class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=255)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()


class UserOut(BaseModel):
    email: str
    name: Optional[str] = None


class LoginResponse(BaseModel):
    token: str
    user: UserOut
    expires_at: str
    message: str


class SessionResponse(BaseModel):
    user: Optional[UserOut] = None
    is_authenticated: bool
    is_loading: bool


# ── eCourts ──

class AdvocateSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    search_type: str = Field(default="number", alias="searchType")
    court_type: str = Field(default="district", alias="courtType")
    advocate_number: Optional[str] = Field(default=None, alias="advocateNumber")
    advocate_name: Optional[str] = Field(default=None, alias="advocateName")
    state: Optional[str] = None
    year: Optional[str] = None
    complex: Optional[str] = None

    @field_validator("year", mode="before")
    @classmethod
    def year_as_text(cls, v):
        return str(v) if v is not None else v


# ── Team ──

class TeamMemberCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    role: str = Field(default="associate", min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v


class TeamMemberUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    role: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)


class TeamMemberOut(BaseModel):
    id: str
    name: str
    role: str
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: str
    updated_at: str


# ── Tasks ──

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = Field(default=None, max_length=5000)
    status: str = Field(default="todo")
    priority: str = Field(default="medium")
    assignee_id: Optional[str] = None
    project_id: Optional[str] = None
    due_date: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("status")
    @classmethod
    def check_status(cls, v: str) -> str:
        return _check_choice(v, TASK_STATUSES, "status")

    @field_validator("priority")
    @classmethod
    def check_priority(cls, v: str) -> str:
        return _check_choice(v, PRIORITIES, "priority")


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = Field(default=None, max_length=5000)
    status: Optional[str] = None
    priority: Optional[str] = None
    assignee_id: Optional[str] = None
    project_id: Optional[str] = None
    due_date: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("status")
    @classmethod
    def check_status(cls, v: Optional[str]) -> Optional[str]:
        return _check_choice(v, TASK_STATUSES, "status")

    @field_validator("priority")
    @classmethod
    def check_priority(cls, v: Optional[str]) -> Optional[str]:
        return _check_choice(v, PRIORITIES, "priority")


# ── Projects ──

class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = Field(default=None, max_length=5000)
    client_name: Optional[str] = Field(default=None, max_length=255)
    status: str = Field(default="planning")
    priority: str = Field(default="medium")
    assignee_ids: List[str] = Field(default_factory=list)
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @field_validator("status")
    @classmethod
    def check_status(cls, v: str) -> str:
        return _check_choice(v, PROJECT_STATUSES, "status")

    @field_validator("priority")
    @classmethod
    def check_priority(cls, v: str) -> str:
        return _check_choice(v, PRIORITIES, "priority")


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = Field(default=None, max_length=5000)
    client_name: Optional[str] = Field(default=None, max_length=255)
    status: Optional[str] = None
    priority: Optional[str] = None
    assignee_ids: Optional[List[str]] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @field_validator("status")
    @classmethod
    def check_status(cls, v: Optional[str]) -> Optional[str]:
        return _check_choice(v, PROJECT_STATUSES, "status")

    @field_validator("priority")
    @classmethod
    def check_priority(cls, v: Optional[str]) -> Optional[str]:
        return _check_choice(v, PRIORITIES, "priority")
