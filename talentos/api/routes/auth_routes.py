"""
Authentication Routes

POST /auth/login - Login with email + document number and get JWT token
GET /auth/me - Get current employee info
"""

from fastapi import APIRouter, HTTPException, Depends

from talentos.api.deps import get_uow
from talentos.core.auth import get_current_employee, token_for
from talentos.db.models import Employee
from talentos.db.repository import UnitOfWork
from talentos.schemas.schemas import LoginRequest, TokenResponse, EmployeeResponse
from talentos.services.employee_service import EmployeeService
from talentos.utils.normalize import sanitize_email

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, uow: UnitOfWork = Depends(get_uow)):
    """
    Login and receive JWT access token (valid 4 hours).

    Include token in requests: Authorization: Bearer <token>
    """
    employee = uow.employees.first(Employee.email == sanitize_email(request.email))

    if not employee or employee.document_number != request.document_number.strip():
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return TokenResponse(
        access_token=token_for(employee),
        employee_id=employee.id,
        name=employee.full_name,
    )


@router.get("/me", response_model=EmployeeResponse)
def get_me(employee: Employee = Depends(get_current_employee)):
    """Get current authenticated employee's record."""
    return EmployeeService.to_response(employee)
