"""
ORM models.

Employee references three dimension tables (departments, positions,
education_levels). Dimension names are unique case-insensitively through a
functional index on lower(name); the resolver relies on it for
insert-if-absent.
"""

import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from talentos.db.database import Base


class EmployeeStatus(str, enum.Enum):
    Active = "Active"
    Inactive = "Inactive"
    OnVacation = "OnVacation"


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False, unique=True)

    employees = relationship("Employee", back_populates="department")


class Position(Base):
    __tablename__ = "positions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False, unique=True)

    employees = relationship("Employee", back_populates="position")


class EducationLevel(Base):
    __tablename__ = "education_levels"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False, unique=True)

    employees = relationship("Employee", back_populates="education_level")


Index("uq_departments_name_lower", func.lower(Department.name), unique=True)
Index("uq_positions_name_lower", func.lower(Position.name), unique=True)
Index("uq_education_levels_name_lower", func.lower(EducationLevel.name), unique=True)


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    document_number = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(254), nullable=False, unique=True, index=True)

    position_id = Column(Integer, ForeignKey("positions.id"), nullable=False)
    salary = Column(Numeric(14, 2), nullable=False, default=0)
    join_date = Column(DateTime(timezone=True), nullable=False)
    date_of_birth = Column(DateTime(timezone=True), nullable=True)
    address = Column(Text, nullable=True)
    status = Column(Enum(EmployeeStatus, name="employee_status"), nullable=False, default=EmployeeStatus.Active)
    professional_profile = Column(Text, nullable=True)
    education_level_id = Column(Integer, ForeignKey("education_levels.id"), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)

    position = relationship("Position", back_populates="employees")
    education_level = relationship("EducationLevel", back_populates="employees")
    department = relationship("Department", back_populates="employees")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# Dimension kinds understood by the resolver
DIMENSION_MODELS = {
    "department": Department,
    "position": Position,
    "education_level": EducationLevel,
}
