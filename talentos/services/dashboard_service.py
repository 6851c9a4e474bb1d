"""
Dashboard Service - headline counts and the AI question panel.
"""

import json
import logging

from sqlalchemy import func, select

from talentos.db.models import Department, Employee, EmployeeStatus
from talentos.db.repository import UnitOfWork
from talentos.schemas.schemas import DashboardStats
from talentos.utils.normalize import format_date

logger = logging.getLogger(__name__)


class DashboardService:

    def __init__(self, uow: UnitOfWork, ai_client=None):
        self.uow = uow
        self.ai_client = ai_client

    def get_stats(self) -> DashboardStats:
        employees = self.uow.employees

        # Inner join: departments without employees are left out
        rows = self.uow.session.execute(
            select(Department.name, func.count(Employee.id))
            .join(Employee, Employee.department_id == Department.id)
            .group_by(Department.name)
            .order_by(Department.name)
        ).all()

        return DashboardStats(
            total_employees=employees.count(),
            active_employees=employees.count(Employee.status == EmployeeStatus.Active),
            employees_on_vacation=employees.count(Employee.status == EmployeeStatus.OnVacation),
            employees_by_department={name: count for name, count in rows},
        )

    def build_context(self) -> str:
        """Stats plus a simplified employee list, as JSON for the prompt."""
        stats = self.get_stats()
        employees = [
            {
                "name": e.full_name,
                "position": e.position.name if e.position else None,
                "department": e.department.name if e.department else None,
                "status": e.status.value if e.status else None,
                "join_date": format_date(e.join_date),
            }
            for e in self.uow.employees.get_all()
        ]
        return json.dumps(
            {"stats": stats.model_dump(), "employees": employees},
            ensure_ascii=False,
        )

    def ask_ai(self, question: str) -> str:
        if self.ai_client is None:
            raise RuntimeError("DashboardService was built without an AI client")
        context = self.build_context()
        logger.info("Forwarding dashboard question (%s chars of context)", len(context))
        return self.ai_client.ask_question(question, context)
