"""
Schemas para categorías de productos
"""
from typing import Optional
from pydantic import BaseModel, Field

from app.schemas.common import Config


class CategoryBase(BaseModel):
    nombre_categoria: Optional[str] = Field(None, max_length=100, description="Nombre único de la categoría")
    descripcion: Optional[str] = Field(None, description="Descripción de la categoría")


class CategoryCreate(CategoryBase):
    """Datos para crear una categoría (el nombre es obligatorio)"""

    class Config(Config):
        json_schema_extra = {
            "example": {"nombre_categoria": "Lácteos", "descripcion": "Leches, yogures y quesos"}
        }


class CategoryUpdate(CategoryBase):
    """Actualización parcial de una categoría"""


class CategoryResponse(BaseModel):
    """Categoría con conteo opcional de productos"""
    id_categoria: int
    nombre_categoria: str
    descripcion: Optional[str] = None
    total_productos: Optional[int] = Field(None, description="Productos asociados a la categoría")
