"""
Employee Routes

POST /employees/register - Public self-registration
GET /employees/me - Get own record
GET /employees/me/cv - Download own CV (PDF)
GET /employees - List employees
POST /employees - Create employee
POST /employees/import - Bulk import (XLSX/JSON)
GET /employees/import/formats - Supported import formats
GET /employees/export - Export all employees (XLSX)
GET /employees/{employee_id} - Get employee
PUT /employees/{employee_id} - Update employee
DELETE /employees/{employee_id} - Delete employee
GET /employees/{employee_id}/cv - Download employee CV (PDF)
"""

from io import BytesIO
from typing import List

from fastapi import APIRouter, HTTPException, Depends, UploadFile, File
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse

from talentos.api.deps import get_employee_service
from talentos.core.auth import get_current_employee
from talentos.db.models import Employee
from talentos.schemas.schemas import EmployeeCreate, EmployeeResponse, ImportResult, MessageResponse
from talentos.services.employee_service import EmployeeService
from talentos.services.pdf_service import PdfService, get_pdf_service
from talentos.utils.file_upload import read_import_file, is_spreadsheet, get_supported_formats

router = APIRouter(prefix="/employees", tags=["Employees"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _pdf_download(filename: str, content: bytes) -> StreamingResponse:
    return StreamingResponse(
        BytesIO(content),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# Fixed paths first, "/{employee_id}" would swallow them otherwise

@router.post("/register", response_model=EmployeeResponse, status_code=201)
def register(data: EmployeeCreate, service: EmployeeService = Depends(get_employee_service)):
    """
    Self-registration, no token needed.

    A welcome email is sent afterwards; if it fails the registration stands.
    """
    return service.create(data)


@router.get("/me", response_model=EmployeeResponse)
def get_me(employee: Employee = Depends(get_current_employee)):
    return EmployeeService.to_response(employee)


@router.get("/me/cv")
def download_my_cv(
    employee: Employee = Depends(get_current_employee),
    service: EmployeeService = Depends(get_employee_service),
    pdf_service: PdfService = Depends(get_pdf_service),
):
    filename, content = service.build_cv(employee.id, pdf_service)
    return _pdf_download(filename, content)


@router.get("", response_model=List[EmployeeResponse])
def list_employees(
    _: Employee = Depends(get_current_employee),
    service: EmployeeService = Depends(get_employee_service),
):
    return service.list_employees()


@router.post("", response_model=EmployeeResponse, status_code=201)
def create_employee(
    data: EmployeeCreate,
    _: Employee = Depends(get_current_employee),
    service: EmployeeService = Depends(get_employee_service),
):
    return service.create(data)


@router.post("/import", response_model=ImportResult)
async def import_employees(
    file: UploadFile = File(...),
    _: Employee = Depends(get_current_employee),
    service: EmployeeService = Depends(get_employee_service),
):
    """
    Bulk import from .xlsx (first sheet, header row) or .json (array of objects).

    Rows are committed one by one; failures are reported in `errors`
    and never abort the batch.
    """
    content, ext = await read_import_file(file)

    if is_spreadsheet(ext):
        return await run_in_threadpool(service.import_spreadsheet, content)
    return await run_in_threadpool(service.import_json, content)


@router.get("/import/formats")
async def import_formats():
    """Get list of supported import file formats."""
    return get_supported_formats()


@router.get("/export")
def export_employees(
    _: Employee = Depends(get_current_employee),
    service: EmployeeService = Depends(get_employee_service),
):
    stream = service.export_spreadsheet()
    return StreamingResponse(
        stream,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="Empleados.xlsx"'},
    )


@router.get("/{employee_id}", response_model=EmployeeResponse)
def get_employee(
    employee_id: int,
    _: Employee = Depends(get_current_employee),
    service: EmployeeService = Depends(get_employee_service),
):
    employee = service.get(employee_id)
    if employee is None:
        raise HTTPException(status_code=404, detail="Employee not found.")
    return employee


@router.put("/{employee_id}", response_model=EmployeeResponse)
def update_employee(
    employee_id: int,
    data: EmployeeCreate,
    _: Employee = Depends(get_current_employee),
    service: EmployeeService = Depends(get_employee_service),
):
    return service.update(employee_id, data)


@router.delete("/{employee_id}", response_model=MessageResponse)
def delete_employee(
    employee_id: int,
    _: Employee = Depends(get_current_employee),
    service: EmployeeService = Depends(get_employee_service),
):
    """Delete employee. Deleting a missing id succeeds as well."""
    service.delete(employee_id)
    return MessageResponse(message="Employee deleted")


@router.get("/{employee_id}/cv")
def download_cv(
    employee_id: int,
    _: Employee = Depends(get_current_employee),
    service: EmployeeService = Depends(get_employee_service),
    pdf_service: PdfService = Depends(get_pdf_service),
):
    filename, content = service.build_cv(employee_id, pdf_service)
    return _pdf_download(filename, content)
