"""
Schemas module - Request/Response schemas for API endpoints.
"""
from talentos.schemas.schemas import (
    AiAnswer,
    AiQuestion,
    DashboardStats,
    DimensionResponse,
    EmployeeCreate,
    EmployeeResponse,
    ErrorResponse,
    ImportResult,
    LoginRequest,
    MessageResponse,
    TokenResponse,
)

__all__ = [
    "AiAnswer",
    "AiQuestion",
    "DashboardStats",
    "DimensionResponse",
    "EmployeeCreate",
    "EmployeeResponse",
    "ErrorResponse",
    "ImportResult",
    "LoginRequest",
    "MessageResponse",
    "TokenResponse",
]
