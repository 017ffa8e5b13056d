"""
Errores de la aplicación con su código HTTP asociado
"""
from typing import Any, Dict, Optional

from fastapi import status


class AppError(Exception):
    """Error base de la aplicación"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(AppError):
    """La entidad solicitada no existe"""
    status_code = status.HTTP_404_NOT_FOUND


class ValidationFailedError(AppError):
    """Campo obligatorio ausente, vacío o con valor no permitido"""
    status_code = status.HTTP_400_BAD_REQUEST


class ConstraintViolationError(AppError):
    """Referencia inexistente, valor duplicado o eliminación bloqueada por dependientes"""
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class InternalServerError(AppError):
    """Falla inesperada; el mensaje nunca incluye detalles internos"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
