"""
Schemas para productos con nomenclatura en español
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from app.schemas.category import CategoryResponse
from app.core.database import MAX_DB_ID
from app.schemas.common import Config, PaginationMeta


class ProductBase(BaseModel):
    nombre_producto: Optional[str] = Field(None, max_length=255, description="Nombre del producto")
    marca: Optional[str] = Field(None, max_length=100, description="Marca del producto")
    descripcion_producto: Optional[str] = Field(None, description="Descripción del producto")
    imagen_url: Optional[str] = Field(None, max_length=500, description="URL de la imagen del producto")
    id_categoria: Optional[int] = Field(None, ge=1, le=MAX_DB_ID, description="ID de la categoría")


class ProductCreate(ProductBase):
    """Datos para crear un producto (el nombre es obligatorio)"""

    class Config(Config):
        json_schema_extra = {
            "example": {
                "nombre_producto": "Leche Entera 1L",
                "marca": "Colun",
                "descripcion_producto": "Leche entera larga vida",
                "id_categoria": 1,
            }
        }


class ProductUpdate(ProductBase):
    """Actualización parcial de un producto"""


class ProductResponse(BaseModel):
    """Respuesta con información de producto"""
    id_producto: int = Field(..., description="ID único del producto")
    nombre_producto: str = Field(..., description="Nombre del producto")
    marca: Optional[str] = Field(None, description="Marca del producto")
    descripcion_producto: Optional[str] = Field(None, description="Descripción del producto")
    imagen_url: Optional[str] = Field(None, description="URL de la imagen del producto")
    id_categoria: Optional[int] = Field(None, description="ID de la categoría")
    categoria: Optional[CategoryResponse] = Field(None, description="Categoría del producto")


class SupermarketBrief(BaseModel):
    id_supermercado: int
    nombre_supermercado: str


class BestPrice(BaseModel):
    """Mejor oferta válida de un producto"""
    precio: float = Field(..., description="Menor precio de oferta válido")
    precio_original: Optional[float] = Field(None, description="Precio original de esa oferta")
    descuento: Optional[float] = Field(None, description="Porcentaje de descuento (1 decimal)")
    supermercado: Optional[SupermarketBrief] = None
    id_oferta: int
    fecha_actualizacion: Optional[datetime] = None


class ProductWithBestPrice(ProductResponse):
    mejor_precio: Optional[BestPrice] = Field(None, description="Mejor oferta válida, null si no tiene")
    tiene_ofertas: bool = Field(..., description="Si el producto tiene ofertas válidas")
    total_ofertas: int = Field(..., description="Cantidad de ofertas válidas")


class ProductListResponse(BaseModel):
    """Página de productos con su mejor precio"""
    productos: List[ProductWithBestPrice]
    pagination: PaginationMeta
    categoria: Optional[CategoryResponse] = Field(None, description="Categoría consultada, si aplica")
