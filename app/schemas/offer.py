"""
Schemas para ofertas, reportes y favoritos
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from app.core.database import MAX_DB_ID
from app.schemas.common import Config, PaginationMeta
from app.schemas.product import ProductResponse
from app.schemas.supermarket import SupermarketResponse


class OfferBase(BaseModel):
    precio_original: Optional[Decimal] = Field(None, ge=0, description="Precio original (sin oferta)")
    precio_oferta: Optional[Decimal] = Field(None, ge=0, description="Precio de oferta")
    fecha_inicio_oferta: Optional[date] = Field(None, description="Inicio de vigencia")
    fecha_fin_oferta: Optional[date] = Field(None, description="Fin de vigencia")
    descripcion_oferta: Optional[str] = Field(None, description="Descripción de la oferta")
    url_oferta_original: Optional[str] = Field(None, max_length=500, description="URL de origen")
    id_producto: Optional[int] = Field(None, ge=1, le=MAX_DB_ID, description="ID del producto")
    id_supermercado: Optional[int] = Field(None, ge=1, le=MAX_DB_ID, description="ID del supermercado")


class OfferCreate(OfferBase):
    """
    Datos para crear una oferta.

    `precio_oferta`, `id_producto`, `id_supermercado` y `url_oferta_original`
    son obligatorios; su ausencia se informa con un 400.
    """

    class Config(Config):
        json_schema_extra = {
            "example": {
                "precio_original": 1290,
                "precio_oferta": 990,
                "descripcion_oferta": "Precio especial fin de semana",
                "url_oferta_original": "https://www.jumbo.cl/leche-entera",
                "id_producto": 1,
                "id_supermercado": 1,
            }
        }


class OfferUpdate(OfferBase):
    """Actualización parcial de una oferta"""
    valida: Optional[bool] = Field(None, description="Marca de validez")


class OfferResponse(BaseModel):
    """Oferta con sus datos derivados"""
    id_oferta: int
    precio_oferta: float
    precio_original: Optional[float] = None
    descuento: Optional[float] = Field(None, description="Porcentaje de descuento (1 decimal)")
    fecha_inicio_oferta: Optional[date] = None
    fecha_fin_oferta: Optional[date] = None
    descripcion_oferta: Optional[str] = None
    url_oferta_original: str
    fecha_extraccion: datetime
    valida: bool
    id_producto: int
    id_supermercado: int
    producto: Optional[ProductResponse] = None
    supermercado: Optional[SupermarketResponse] = None
    total_favoritos: Optional[int] = Field(None, description="Usuarios que marcaron la oferta como favorita")


class OfferListResponse(BaseModel):
    """Página de ofertas"""
    ofertas: List[OfferResponse]
    pagination: PaginationMeta
    filtros: Optional[Dict[str, Any]] = Field(None, description="Filtros aplicados")


class ProductOffersResponse(BaseModel):
    """Ofertas de un producto con estadísticas de precio"""
    producto: Optional[ProductResponse] = None
    ofertas: List[OfferResponse]
    estadisticas: Dict[str, Any] = Field(
        default_factory=dict,
        description="Estadísticas sobre las ofertas válidas; vacío si no hay o si se excluyen",
    )
    pagination: PaginationMeta


class SupermarketOffersResponse(BaseModel):
    """Ofertas de un supermercado con estadísticas de precio"""
    supermercado: Optional[SupermarketResponse] = None
    ofertas: List[OfferResponse]
    estadisticas: Dict[str, Any] = Field(default_factory=dict)
    pagination: PaginationMeta


class ProductDetailResponse(ProductResponse):
    """Producto con sus ofertas válidas ordenadas por precio"""
    ofertas: List[OfferResponse]


class OfferInvalidatedResponse(BaseModel):
    mensaje: str
    oferta: OfferResponse


class OfferReportCreate(BaseModel):
    motivo: Optional[str] = Field(None, description="Motivo del reporte")

    class Config(Config):
        json_schema_extra = {"example": {"motivo": "El precio no coincide con el sitio"}}


class OfferReportResponse(BaseModel):
    id_reporte: int
    motivo: str
    id_oferta: int
    id_usuario_reporta: int
    fecha_reporte: datetime
    oferta: Optional[OfferResponse] = None


class OfferReportCreatedResponse(BaseModel):
    mensaje: str
    reporte: OfferReportResponse


class FavoriteResponse(BaseModel):
    mensaje: str
    id_oferta: int
    total_favoritos: int


class OfferReportListResponse(BaseModel):
    """Página de reportes, del más reciente al más antiguo"""
    reportes: List[OfferReportResponse]
    pagination: PaginationMeta
