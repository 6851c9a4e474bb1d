"""
Employee Service - create/update/delete, bulk import and export.

RECONCILIATION (same rules on every write path):
1. Email is sanitized (trim, lowercase, no accents)
2. Email and document number must not belong to another employee
3. Department / position / education level names are resolved to ids,
   creating the row on first sight
4. Dates are stored in UTC

IMPORTS:
- Rows are processed one at a time, each row is its own transaction
- A failing row is rolled back and recorded, the batch never aborts
- Spreadsheet rows are deduplicated by document OR email,
  JSON records by document only
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from io import BytesIO
from typing import Any, List, Optional, Sequence, Tuple

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from talentos.core.errors import (
    DuplicateConflict,
    ImportRowError,
    NotFoundError,
    PersistenceError,
    TalentosError,
    ValidationError,
)
from talentos.db.models import Employee
from talentos.db.repository import UnitOfWork
from talentos.schemas.schemas import EmployeeCreate, EmployeeResponse, ImportResult
from talentos.services.dimension_service import DimensionResolver
from talentos.utils.normalize import (
    cell_text,
    format_date,
    is_valid_email,
    map_status,
    number_text,
    parse_date_text,
    parse_date_value,
    parse_salary_value,
    sanitize_email,
    status_label,
    to_utc,
    utc_now,
)

logger = logging.getLogger(__name__)

WELCOME_SUBJECT = "Bienvenido a TalentosPlus"
WELCOME_BODY = "Hola {first_name}, bienvenido a TalentosPlus. Tu registro fue exitoso."

# Column order shared by spreadsheet import, export and the JSON keys
EMPLOYEE_COLUMNS = [
    "Documento",
    "Nombres",
    "Apellidos",
    "FechaNacimiento",
    "Direccion",
    "Telefono",
    "Email",
    "Cargo",
    "Salario",
    "FechaIngreso",
    "Estado",
    "NivelEducativo",
    "PerfilProfesional",
    "Departamento",
]

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(fill_type="solid", fgColor="483D8B")  # dark slate blue


@dataclass
class ImportedEmployee:
    """One parsed import row, before dimension resolution."""
    document: str
    first_name: str
    last_name: str
    date_of_birth: Optional[datetime]
    address: str
    phone: str
    email: str
    position: str
    salary: Decimal
    join_date: datetime
    status_text: str
    education_level: str
    profile: str
    department: str


def _describe(exc: BaseException) -> str:
    """Exception message, plus the underlying cause when there is one."""
    message = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
    cause = exc.__cause__
    if cause is not None:
        # DBAPI errors wrapped by SQLAlchemy carry the driver message on .orig
        cause = getattr(cause, "orig", None) or cause
        message += f" -> {cause}"
    return message


class EmployeeService:

    def __init__(self, uow: UnitOfWork, email_service=None):
        self.uow = uow
        self.email_service = email_service
        self.resolver = DimensionResolver(uow)

    # ============================================================
    # QUERIES
    # ============================================================

    @staticmethod
    def to_response(employee: Employee) -> EmployeeResponse:
        return EmployeeResponse(
            id=employee.id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            document_number=employee.document_number,
            email=employee.email,
            position=employee.position.name if employee.position else "Unknown",
            salary=employee.salary if employee.salary is not None else Decimal("0"),
            join_date=employee.join_date,
            date_of_birth=employee.date_of_birth,
            address=employee.address,
            status=employee.status,
            professional_profile=employee.professional_profile,
            education_level=employee.education_level.name if employee.education_level else "N/A",
            contact_phone=employee.contact_phone,
            department_id=employee.department_id,
            department_name=employee.department.name if employee.department else "Unknown",
        )

    def _load_all(self) -> List[Employee]:
        return self.uow.employees.get_all(
            selectinload(Employee.position),
            selectinload(Employee.department),
            selectinload(Employee.education_level),
        )

    def list_employees(self) -> List[EmployeeResponse]:
        return [self.to_response(e) for e in self._load_all()]

    def get(self, employee_id: int) -> Optional[EmployeeResponse]:
        employee = self.uow.employees.get_by_id(employee_id)
        return self.to_response(employee) if employee else None

    def get_by_email(self, email: str) -> Optional[EmployeeResponse]:
        employee = self.uow.employees.first(Employee.email == sanitize_email(email))
        return self.to_response(employee) if employee else None

    # ============================================================
    # CREATE / UPDATE / DELETE
    # ============================================================

    def create(self, data: EmployeeCreate) -> EmployeeResponse:
        """
        Register a new employee.

        Raises:
            ValidationError / DuplicateConflict / NotFoundError unchanged,
            PersistenceError for anything unexpected.
        """
        try:
            email = self._checked_email(data)
            self._ensure_unique(email, data.document_number)
            ids = self._resolve_references(data)

            employee = Employee(document_number=data.document_number, email=email)
            self._apply(employee, data, ids)
            self.uow.employees.add(employee)
            self._commit()
        except TalentosError:
            self.uow.rollback()
            raise
        except Exception as e:
            self.uow.rollback()
            logger.exception("Employee creation failed")
            raise PersistenceError(
                f"Could not create employee: {e}. Please verify all fields are correct."
            ) from e

        logger.info("Created employee %s (document %s)", employee.id, employee.document_number)
        self._send_welcome(employee)
        return self.to_response(employee)

    def update(self, employee_id: int, data: EmployeeCreate) -> EmployeeResponse:
        try:
            employee = self.uow.employees.get_by_id(employee_id)
            if employee is None:
                raise NotFoundError("Employee not found.")

            email = self._checked_email(data)
            self._ensure_unique(email, data.document_number, exclude_id=employee_id)
            # Resolve before touching the row: the resolver commits new names
            ids = self._resolve_references(data)

            employee.document_number = data.document_number
            employee.email = email
            self._apply(employee, data, ids)
            self.uow.employees.update(employee)
            self._commit()
        except TalentosError:
            self.uow.rollback()
            raise
        except Exception as e:
            self.uow.rollback()
            logger.exception("Employee update failed")
            raise PersistenceError(
                f"Could not update employee: {e}. Please verify all fields are correct."
            ) from e

        logger.info("Updated employee %s", employee_id)
        return self.to_response(employee)

    def delete(self, employee_id: int) -> None:
        """Remove the employee. Missing ids are a no-op."""
        employee = self.uow.employees.get_by_id(employee_id)
        if employee is None:
            return
        self.uow.employees.remove(employee)
        self.uow.complete()
        logger.info("Deleted employee %s", employee_id)

    def _checked_email(self, data: EmployeeCreate) -> str:
        email = sanitize_email(data.email)
        if not is_valid_email(email):
            raise ValidationError("Email must contain @ and .")
        if data.salary is not None and data.salary < 0:
            raise ValidationError("Salary must be a non-negative amount.")
        return email

    def _ensure_unique(self, email: str, document_number: str, exclude_id: int = None) -> None:
        others = [Employee.id != exclude_id] if exclude_id is not None else []
        if self.uow.employees.exists(Employee.email == email, *others):
            raise DuplicateConflict(f"An employee with email '{email}' already exists.")
        if self.uow.employees.exists(Employee.document_number == document_number, *others):
            raise DuplicateConflict(f"An employee with document '{document_number}' already exists.")

    def _resolve_references(self, data: EmployeeCreate) -> Tuple[int, int, Optional[int]]:
        if data.department_id is not None:
            if self.uow.departments.get_by_id(data.department_id) is None:
                raise NotFoundError("Department not found.")
            department_id = data.department_id
        else:
            department_id = self.resolver.resolve_department(data.department)

        position_id = self.resolver.resolve_position(data.position)
        education = (data.education_level or "").strip()
        education_id = self.resolver.resolve_education_level(education) if education else None
        return department_id, position_id, education_id

    @staticmethod
    def _apply(employee: Employee, data: EmployeeCreate, ids: Tuple[int, int, Optional[int]]) -> None:
        department_id, position_id, education_id = ids
        employee.first_name = data.first_name
        employee.last_name = data.last_name
        employee.position_id = position_id
        employee.salary = data.salary
        employee.join_date = to_utc(data.join_date) or utc_now()
        employee.date_of_birth = to_utc(data.date_of_birth)
        employee.address = data.address
        employee.status = data.status
        employee.professional_profile = data.professional_profile
        employee.education_level_id = education_id
        employee.contact_phone = data.contact_phone
        employee.department_id = department_id

    def _commit(self) -> None:
        try:
            self.uow.complete()
        except IntegrityError as e:
            # Lost a race against a concurrent write of the same email/document
            self.uow.rollback()
            raise DuplicateConflict("An employee with this document or email already exists.") from e

    def _send_welcome(self, employee: Employee) -> None:
        """Best effort: a failed email never undoes the registration."""
        if self.email_service is None:
            return
        try:
            self.email_service.send_email(
                employee.email,
                WELCOME_SUBJECT,
                WELCOME_BODY.format(first_name=employee.first_name),
            )
        except Exception:
            logger.warning("Welcome email to %s failed", employee.email, exc_info=True)

    # ============================================================
    # BULK IMPORT
    # ============================================================

    def import_spreadsheet(self, content: bytes) -> ImportResult:
        """
        Import employees from the first worksheet of an .xlsx file.

        Row 1 is the header. Rows without a document number are skipped
        without being counted.
        """
        result = ImportResult()
        try:
            workbook = load_workbook(BytesIO(content), data_only=True)
        except Exception as e:
            result.add_error(f"Invalid spreadsheet file: {e}")
            return result

        sheet = workbook.worksheets[0]
        for row_number, values in enumerate(sheet.iter_rows(min_row=2, values_only=True), start=2):
            cells = list(values) + [None] * (len(EMPLOYEE_COLUMNS) - len(values))
            try:
                record = self._record_from_cells(cells)
                if record is None:
                    continue

                if self._is_duplicate(record, match_email=True):
                    result.add_error(f"Row {row_number}: Duplicate Document/Email found in DB. Skipped.")
                    continue

                self._insert_imported(record)
                result.success_count += 1
            except Exception as e:
                self.uow.rollback()
                logger.warning("Spreadsheet import row %s failed: %s", row_number, e)
                result.add_error(f"Row {row_number}: {_describe(e)}")

        workbook.close()
        logger.info(
            "Spreadsheet import finished: %s imported, %s errors",
            result.success_count, result.error_count
        )
        return result

    def import_json(self, content: bytes) -> ImportResult:
        """Import employees from a JSON array of objects keyed like the export headers."""
        result = ImportResult()
        try:
            text = content.decode("utf-8-sig") if isinstance(content, bytes) else content
            document = json.loads(text)
        except ValueError as e:
            result.add_error(f"Critical JSON Error: {e}")
            return result

        if not isinstance(document, list):
            result.add_error("Invalid JSON format. Expected an array of employees.")
            return result

        for index, element in enumerate(document, start=1):
            try:
                if not isinstance(element, dict):
                    raise ImportRowError("Expected an employee object.")

                record = self._record_from_json(element)
                if record is None:
                    continue

                # Document only, unlike the spreadsheet path
                if self._is_duplicate(record, match_email=False):
                    result.add_error(f"Record {index}: Duplicate Document {record.document}. Skipped.")
                    continue

                self._insert_imported(record)
                result.success_count += 1
            except Exception as e:
                self.uow.rollback()
                logger.warning("JSON import record %s failed: %s", index, e)
                result.add_error(f"Record {index}: {_describe(e)}")

        logger.info(
            "JSON import finished: %s imported, %s errors",
            result.success_count, result.error_count
        )
        return result

    @staticmethod
    def _record_from_cells(cells: Sequence[Any]) -> Optional[ImportedEmployee]:
        document = cell_text(cells[0])
        if not document:
            return None

        date_of_birth = parse_date_value(cells[3])
        join_date = parse_date_value(cells[9])

        return ImportedEmployee(
            document=document,
            first_name=cell_text(cells[1]),
            last_name=cell_text(cells[2]),
            date_of_birth=to_utc(date_of_birth),
            address=cell_text(cells[4]),
            phone=cell_text(cells[5]),
            email=sanitize_email(cell_text(cells[6])),
            position=cell_text(cells[7]),
            salary=parse_salary_value(cells[8]),
            join_date=to_utc(join_date) if join_date else utc_now(),
            status_text=cell_text(cells[10]),
            education_level=cell_text(cells[11]),
            profile=cell_text(cells[12]),
            department=cell_text(cells[13]),
        )

    @staticmethod
    def _record_from_json(element: dict) -> Optional[ImportedEmployee]:
        def string(key: str) -> str:
            value = element.get(key)
            return value.strip() if isinstance(value, str) else ""

        document = string("Documento")
        if not document:
            return None

        phone = string("Telefono")
        raw_phone = element.get("Telefono")
        if not phone and isinstance(raw_phone, (int, float)) and not isinstance(raw_phone, bool):
            phone = number_text(raw_phone)

        date_of_birth = parse_date_text(string("FechaNacimiento"))
        join_date = parse_date_text(string("FechaIngreso"))

        return ImportedEmployee(
            document=document,
            first_name=string("Nombres"),
            last_name=string("Apellidos"),
            date_of_birth=to_utc(date_of_birth),
            address=string("Direccion"),
            phone=phone,
            email=sanitize_email(string("Email")),
            position=string("Cargo"),
            salary=parse_salary_value(element.get("Salario")),
            join_date=to_utc(join_date) if join_date else utc_now(),
            status_text=string("Estado"),
            education_level=string("NivelEducativo"),
            profile=string("PerfilProfesional"),
            department=string("Departamento"),
        )

    def _is_duplicate(self, record: ImportedEmployee, match_email: bool) -> bool:
        criteria = [Employee.document_number == record.document]
        # A blank email matches a stored blank email too
        if match_email:
            criteria.append(Employee.email == record.email)
        return self.uow.employees.exists(or_(*criteria))

    def _insert_imported(self, record: ImportedEmployee) -> Employee:
        if record.salary < 0:
            raise ImportRowError("Salary must be a non-negative amount.")

        department_id = self.resolver.resolve_department(record.department)
        position_id = self.resolver.resolve_position(record.position)
        education_id = (
            self.resolver.resolve_education_level(record.education_level)
            if record.education_level else None
        )

        employee = Employee(
            first_name=record.first_name,
            last_name=record.last_name,
            document_number=record.document,
            email=record.email,
            position_id=position_id,
            salary=record.salary,
            join_date=record.join_date,
            date_of_birth=record.date_of_birth,
            address=record.address or None,
            contact_phone=record.phone or None,
            status=map_status(record.status_text),
            department_id=department_id,
            education_level_id=education_id,
            professional_profile=record.profile or None,
        )
        self.uow.employees.add(employee)
        try:
            self.uow.complete()
        except IntegrityError as e:
            raise ImportRowError("Document or email already exists in DB.") from e
        return employee

    # ============================================================
    # EXPORT
    # ============================================================

    def export_spreadsheet(self) -> BytesIO:
        """All employees in one .xlsx sheet, same columns as the import."""
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "Empleados"

        sheet.append(EMPLOYEE_COLUMNS)
        for cell in sheet[1]:
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL

        for e in self._load_all():
            sheet.append([
                e.document_number,
                e.first_name,
                e.last_name,
                format_date(e.date_of_birth),
                e.address or "",
                e.contact_phone or "",
                e.email,
                e.position.name if e.position else "",
                float(e.salary or 0),
                format_date(e.join_date),
                status_label(e.status),
                e.education_level.name if e.education_level else "",
                e.professional_profile or "",
                e.department.name if e.department else "",
            ])

        for index, column in enumerate(sheet.iter_cols(values_only=True), start=1):
            width = max(len(str(v)) for v in column if v is not None)
            sheet.column_dimensions[get_column_letter(index)].width = min(width + 2, 60)

        stream = BytesIO()
        workbook.save(stream)
        stream.seek(0)
        return stream

    # ============================================================
    # CV
    # ============================================================

    def build_cv(self, employee_id: int, pdf_service) -> Tuple[str, bytes]:
        """Render the employee's CV. Returns (filename, pdf bytes)."""
        employee = self.get(employee_id)
        if employee is None:
            raise NotFoundError("Employee not found.")

        full_name = f"{employee.first_name} {employee.last_name}".strip()
        sections = [
            ("Cargo", employee.position),
            ("Departamento", employee.department_name),
            ("Email", employee.email),
            ("Telefono", employee.contact_phone),
            ("Nivel Educativo", employee.education_level),
            ("Perfil", employee.professional_profile),
        ]
        pdf = pdf_service.generate_pdf(full_name, sections)
        filename = f"CV_{employee.first_name}_{employee.last_name}.pdf".replace(" ", "_")
        return filename, pdf
