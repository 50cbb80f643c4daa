"""
Tagged result returned by the service layer instead of raising
"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from core.constants import ErrorKind

T = TypeVar("T")

# Рекомендуемый HTTP-статус для каждой категории ошибки
STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PROVIDER: 404,
}


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    is_success: bool
    data: Optional[T] = None
    error_message: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    status_code: Optional[int] = None

    @classmethod
    def success(cls, data: T) -> "ServiceResult[T]":
        return cls(is_success=True, data=data)

    @classmethod
    def failure(
        cls,
        error_message: str,
        kind: ErrorKind,
        status_code: Optional[int] = None,
    ) -> "ServiceResult[T]":
        return cls(
            is_success=False,
            error_message=error_message,
            error_kind=kind,
            status_code=status_code or STATUS_BY_KIND[kind],
        )
