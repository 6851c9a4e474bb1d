import json

from openpyxl import load_workbook
from io import BytesIO

from conftest import employee_payload, make_workbook
from talentos.core.auth import create_access_token, decode_token
from talentos.services.employee_service import WELCOME_SUBJECT


# ============================================================
# AUTH
# ============================================================

def test_login_issues_token_with_claims(client, auth_headers):
    response = client.post("/api/auth/login", json={
        "email": " ADMIN@talentos.com", "document_number": "9000"
    })

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    claims = decode_token(body["access_token"])
    assert claims["sub"] == str(body["employee_id"])
    assert claims["email"] == "admin@talentos.com"
    assert claims["name"] == "Admin Gomez"


def test_login_rejects_wrong_document(client, auth_headers):
    response = client.post("/api/auth/login", json={
        "email": "admin@talentos.com", "document_number": "0000"
    })

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_login_unknown_email(client):
    response = client.post("/api/auth/login", json={"email": "x@y.co", "document_number": "1"})

    assert response.status_code == 401


def test_me(client, auth_headers):
    response = client.get("/api/auth/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["email"] == "admin@talentos.com"


def test_protected_routes_need_token(client):
    assert client.get("/api/employees").status_code == 401
    assert client.get("/api/dashboard/stats").status_code == 401
    assert client.get("/api/departments").status_code == 401
    assert client.get(
        "/api/employees", headers={"Authorization": "Bearer not-a-token"}
    ).status_code == 401


def test_token_for_deleted_employee_is_rejected(client):
    token = create_access_token({"sub": "4242"})

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


# ============================================================
# EMPLOYEES
# ============================================================

def test_register_sends_welcome_email(client, email_service):
    response = client.post("/api/employees/register", json=employee_payload())

    assert response.status_code == 201
    assert response.json()["department_name"] == "Tecnologia"
    assert [s[1] for s in email_service.sent] == [WELCOME_SUBJECT]


def test_register_rejects_bad_email(client):
    response = client.post("/api/employees/register", json=employee_payload(email="ana.talentos.com"))

    assert response.status_code == 422


def test_register_duplicate_email_is_conflict(client):
    client.post("/api/employees/register", json=employee_payload())

    response = client.post("/api/employees/register", json=employee_payload(document_number="2"))

    assert response.status_code == 409
    assert "ana@talentos.com" in response.json()["detail"]


def test_crud(client, auth_headers):
    response = client.post("/api/employees", json=employee_payload(), headers=auth_headers)
    assert response.status_code == 201
    employee_id = response.json()["id"]

    response = client.get(f"/api/employees/{employee_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["position"] == "Developer"

    response = client.put(
        f"/api/employees/{employee_id}",
        json=employee_payload(position="Tech Lead", status="OnVacation"),
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["position"] == "Tech Lead"
    assert response.json()["status"] == "OnVacation"

    response = client.get("/api/employees", headers=auth_headers)
    assert len(response.json()) == 2

    assert client.delete(f"/api/employees/{employee_id}", headers=auth_headers).status_code == 200
    assert client.delete(f"/api/employees/{employee_id}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/employees/{employee_id}", headers=auth_headers).status_code == 404


def test_update_missing_employee(client, auth_headers):
    response = client.put("/api/employees/999", json=employee_payload(), headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Employee not found."


def test_unknown_department_id(client, auth_headers):
    payload = employee_payload(department=None, department_id=777)

    response = client.post("/api/employees", json=payload, headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Department not found."


def test_my_cv(client, auth_headers):
    response = client.get("/api/employees/me/cv", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "CV_Admin_Gomez.pdf" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_get_me(client, auth_headers):
    response = client.get("/api/employees/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["document_number"] == "9000"


# ============================================================
# IMPORT / EXPORT
# ============================================================

def test_import_spreadsheet_upload(client, auth_headers):
    content = make_workbook([
        ["77", "Pedro", "Lopez", None, None, None, "pedro@talentos.com", "Soporte",
         1800000, "2022-01-10", "Activo", None, None, "Operaciones"],
    ])

    response = client.post(
        "/api/employees/import",
        files={"file": ("empleados.xlsx", content, "application/octet-stream")},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json() == {"success_count": 1, "error_count": 0, "errors": []}


def test_import_json_upload(client, auth_headers):
    content = json.dumps([{"Documento": "88", "Email": "j@talentos.com", "Departamento": "IT"}])

    response = client.post(
        "/api/employees/import",
        files={"file": ("empleados.json", content.encode(), "application/json")},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["success_count"] == 1


def test_import_rejects_other_extensions(client, auth_headers):
    response = client.post(
        "/api/employees/import",
        files={"file": ("empleados.csv", b"a,b", "text/csv")},
        headers=auth_headers,
    )

    assert response.status_code == 400


def test_export_download(client, auth_headers):
    response = client.get("/api/employees/export", headers=auth_headers)

    assert response.status_code == 200
    sheet = load_workbook(BytesIO(response.content)).active
    assert sheet.max_row == 2
    assert sheet["A2"].value == "9000"


# ============================================================
# CATALOG / DASHBOARD
# ============================================================

def test_catalog_lists(client, auth_headers):
    departments = client.get("/api/departments", headers=auth_headers).json()
    positions = client.get("/api/positions", headers=auth_headers).json()
    levels = client.get("/api/education-levels", headers=auth_headers).json()

    assert [d["name"] for d in departments] == ["Tecnologia"]
    assert [p["name"] for p in positions] == ["Developer"]
    assert [e["name"] for e in levels] == ["Profesional"]


def test_dashboard_stats(client, auth_headers):
    client.post("/api/employees", json=employee_payload(
        document_number="2", email="v@talentos.com", status="OnVacation", department="Ventas"
    ), headers=auth_headers)

    stats = client.get("/api/dashboard/stats", headers=auth_headers).json()

    assert stats == {
        "total_employees": 2,
        "active_employees": 1,
        "employees_on_vacation": 1,
        "employees_by_department": {"Tecnologia": 1, "Ventas": 1},
    }


def test_dashboard_ask_forwards_context(client, auth_headers, ai_client):
    response = client.post("/api/dashboard/ask", json={"question": "¿Cuántos empleados hay?"},
                           headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"answer": ai_client.answer}
    question, context = ai_client.calls[0]
    assert question == "¿Cuántos empleados hay?"
    data = json.loads(context)
    assert data["stats"]["total_employees"] == 1
    assert data["employees"][0]["name"] == "Admin Gomez"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["database"] == "connected"
