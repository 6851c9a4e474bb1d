"""
Catalog Routes - dimension rows for the employee form dropdowns.

GET /departments
GET /positions
GET /education-levels
"""

from typing import List

from fastapi import APIRouter, Depends

from talentos.api.deps import get_uow
from talentos.core.auth import get_current_employee
from talentos.db.repository import UnitOfWork
from talentos.schemas.schemas import DimensionResponse

router = APIRouter(tags=["Catalog"], dependencies=[Depends(get_current_employee)])


@router.get("/departments", response_model=List[DimensionResponse])
def list_departments(uow: UnitOfWork = Depends(get_uow)):
    return uow.departments.get_all()


@router.get("/positions", response_model=List[DimensionResponse])
def list_positions(uow: UnitOfWork = Depends(get_uow)):
    return uow.positions.get_all()


@router.get("/education-levels", response_model=List[DimensionResponse])
def list_education_levels(uow: UnitOfWork = Depends(get_uow)):
    return uow.education_levels.get_all()
