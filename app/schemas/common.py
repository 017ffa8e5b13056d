"""
Schemas comunes para la API
"""
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime


class ErrorDetail(BaseModel):
    """Descripción estructurada de un error"""
    code: int = Field(..., description="Código HTTP del error")
    message: str = Field(..., description="Mensaje descriptivo")
    path: Optional[str] = Field(None, description="Ruta solicitada")
    details: Optional[Dict[str, Any]] = Field(None, description="Detalles adicionales del error")


class ErrorResponse(BaseModel):
    """Schema para respuestas de error"""
    success: bool = Field(False, description="Indica si la operación fue exitosa")
    error: ErrorDetail
    timestamp: datetime = Field(default_factory=datetime.now, description="Timestamp de la respuesta")


class PaginationMeta(BaseModel):
    """Metadatos de paginación"""
    total: int = Field(..., ge=0, description="Total de registros que cumplen los filtros")
    page: int = Field(..., ge=1, description="Página actual")
    limit: int = Field(..., ge=1, description="Registros por página")
    totalPages: int = Field(..., ge=0, description="Total de páginas")


class MessageResponse(BaseModel):
    """Respuesta con un mensaje de confirmación"""
    mensaje: str


# Configuración global para todos los schemas
class Config:
    """Configuración base para schemas"""
    populate_by_name = True
    use_enum_values = True


ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Datos inválidos o restricción violada"},
    401: {"model": ErrorResponse, "description": "Token ausente o inválido"},
    403: {"model": ErrorResponse, "description": "Permisos insuficientes"},
    404: {"model": ErrorResponse, "description": "Recurso no encontrado"},
    500: {"model": ErrorResponse, "description": "Error interno del servidor"},
}


def error_responses(*codes: int) -> Dict[int, Dict[str, Any]]:
    """Subconjunto de respuestas de error para documentar un endpoint"""
    return {code: ERROR_RESPONSES[code] for code in codes}
