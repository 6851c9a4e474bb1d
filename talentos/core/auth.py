"""
Authentication Utility - JWT handling.

Provides:
- JWT token creation/verification
- FastAPI dependency for protected routes

Employees log in with email + document number, there are no passwords.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from talentos.core.config import get_settings
from talentos.db.database import get_db
from talentos.db.models import Employee

settings = get_settings()

# Bearer token extractor; auto_error off so a missing header is a 401, not a 403
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def token_for(employee: Employee) -> str:
    return create_access_token(
        data={"sub": str(employee.id), "email": employee.email, "name": employee.full_name}
    )


def get_current_employee(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Employee:
    """
    FastAPI dependency - Get current authenticated employee.

    Usage:
        @router.get("/protected")
        def route(employee: Employee = Depends(get_current_employee)):
            return employee.email
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    employee_id = payload.get("sub")
    if not employee_id or not str(employee_id).isdigit():
        raise credentials_exception

    employee = db.get(Employee, int(employee_id))
    if employee is None:
        raise credentials_exception

    return employee
