"""
Shared fixtures: in-memory SQLite, fresh schema per test, fake collaborators.
"""

import os

# Must be set before anything imports talentos (settings and engine are module level)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["AI_API_KEY"] = ""
os.environ["SMTP_HOST"] = ""

from datetime import datetime
from decimal import Decimal
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from talentos.db.database import Base, SessionLocal, engine
from talentos.db.repository import UnitOfWork
from talentos.main import app
from talentos.schemas.schemas import EmployeeCreate
from talentos.services.ai_client import get_ai_client
from talentos.services.email_service import get_email_service
from talentos.services.employee_service import EMPLOYEE_COLUMNS, EmployeeService


class FakeEmailService:
    """Records every send; raises when `fail` is set."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def send_email(self, to, subject, body):
        if self.fail:
            raise RuntimeError("SMTP is down")
        self.sent.append((to, subject, body))


class FakeAiClient:
    def __init__(self, answer: str = "Hay 1 empleado."):
        self.answer = answer
        self.calls = []

    def ask_question(self, question, context_json):
        self.calls.append((question, context_json))
        return self.answer


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


@pytest.fixture
def uow(session):
    return UnitOfWork(session)


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture
def service(uow, email_service):
    return EmployeeService(uow, email_service=email_service)


@pytest.fixture
def ai_client():
    return FakeAiClient()


@pytest.fixture
def client(email_service, ai_client):
    app.dependency_overrides[get_email_service] = lambda: email_service
    app.dependency_overrides[get_ai_client] = lambda: ai_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def employee_data(**overrides) -> EmployeeCreate:
    fields = dict(
        first_name="Ana",
        last_name="Gomez",
        document_number="1001",
        email="ana@talentos.com",
        position="Developer",
        salary=Decimal("3500000"),
        join_date=datetime(2023, 2, 1),
        department="Tecnologia",
    )
    fields.update(overrides)
    return EmployeeCreate(**fields)


def employee_payload(**overrides) -> dict:
    payload = {
        "first_name": "Ana",
        "last_name": "Gomez",
        "document_number": "1001",
        "email": "ana@talentos.com",
        "position": "Developer",
        "salary": "3500000",
        "join_date": "2023-02-01T00:00:00",
        "department": "Tecnologia",
        "education_level": "Profesional",
    }
    payload.update(overrides)
    return payload


def make_workbook(rows) -> bytes:
    """An .xlsx with the import header followed by `rows`."""
    wb = Workbook()
    sheet = wb.active
    sheet.append(EMPLOYEE_COLUMNS)
    for row in rows:
        sheet.append(row)
    stream = BytesIO()
    wb.save(stream)
    return stream.getvalue()


@pytest.fixture
def auth_headers(client):
    """Register an employee through the API and log in as them."""
    response = client.post("/api/employees/register", json=employee_payload(
        document_number="9000", email="admin@talentos.com", first_name="Admin"
    ))
    assert response.status_code == 201, response.text

    response = client.post("/api/auth/login", json={
        "email": "admin@talentos.com", "document_number": "9000"
    })
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
