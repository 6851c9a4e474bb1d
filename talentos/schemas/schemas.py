"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List, Dict
from datetime import datetime
from decimal import Decimal

from talentos.db.models import EmployeeStatus
from talentos.utils.normalize import EMAIL_PATTERN


# ============================================================
# AUTH SCHEMAS
# ============================================================

class LoginRequest(BaseModel):
    email: str
    document_number: str = Field(..., min_length=1)

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    employee_id: int
    name: str


# ============================================================
# EMPLOYEE SCHEMAS
# ============================================================

class EmployeeCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    document_number: str = Field(..., min_length=1, max_length=50)
    # Only "@" and "." are checked here; the service strips accents
    email: str
    position: str = Field(..., min_length=1, max_length=150)
    salary: Decimal = Field(Decimal("0"), ge=0)
    join_date: Optional[datetime] = None
    date_of_birth: Optional[datetime] = None
    address: Optional[str] = None
    status: EmployeeStatus = EmployeeStatus.Active
    professional_profile: Optional[str] = None
    education_level: Optional[str] = None
    contact_phone: Optional[str] = None
    department_id: Optional[int] = None
    department: Optional[str] = None

    @field_validator("email")
    @classmethod
    def email_has_at_and_dot(cls, v: str) -> str:
        if not EMAIL_PATTERN.match(v.strip()):
            raise ValueError("Email must contain @ and .")
        return v

    @field_validator("document_number", "position")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @model_validator(mode="after")
    def department_given(self):
        if self.department_id is None and not (self.department or "").strip():
            raise ValueError("department_id or department is required")
        return self


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    document_number: str
    email: str
    position: str
    salary: Decimal
    join_date: datetime
    date_of_birth: Optional[datetime] = None
    address: Optional[str] = None
    status: EmployeeStatus
    professional_profile: Optional[str] = None
    education_level: Optional[str] = None
    contact_phone: Optional[str] = None
    department_id: int
    department_name: str


# ============================================================
# CATALOG SCHEMAS
# ============================================================

class DimensionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


# ============================================================
# IMPORT SCHEMAS
# ============================================================

class ImportResult(BaseModel):
    success_count: int = 0
    error_count: int = 0
    errors: List[str] = []

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.error_count = len(self.errors)


# ============================================================
# DASHBOARD SCHEMAS
# ============================================================

class DashboardStats(BaseModel):
    total_employees: int = 0
    active_employees: int = 0
    employees_on_vacation: int = 0
    employees_by_department: Dict[str, int] = {}

class AiQuestion(BaseModel):
    question: str = Field(..., min_length=1, max_length=2000)

class AiAnswer(BaseModel):
    answer: str


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    detail: str
