"""
Service providers for route injection.

Each request gets its own session (get_db) and its own UnitOfWork; the
collaborators (email, PDF, AI) come from their module accessors so tests can
override them through app.dependency_overrides.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from talentos.db.database import get_db
from talentos.db.repository import UnitOfWork
from talentos.services.ai_client import get_ai_client
from talentos.services.dashboard_service import DashboardService
from talentos.services.email_service import get_email_service
from talentos.services.employee_service import EmployeeService


def get_uow(db: Session = Depends(get_db)) -> UnitOfWork:
    return UnitOfWork(db)


def get_employee_service(
    uow: UnitOfWork = Depends(get_uow),
    email_service=Depends(get_email_service),
) -> EmployeeService:
    return EmployeeService(uow, email_service=email_service)


def get_dashboard_service(
    uow: UnitOfWork = Depends(get_uow),
    ai_client=Depends(get_ai_client),
) -> DashboardService:
    return DashboardService(uow, ai_client=ai_client)
