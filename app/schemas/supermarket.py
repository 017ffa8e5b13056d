"""
Schemas para supermercados
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from app.schemas.common import Config


class SupermarketBase(BaseModel):
    nombre_supermercado: Optional[str] = Field(None, max_length=100, description="Nombre único del supermercado")
    direccion: Optional[str] = Field(None, max_length=255, description="Dirección")
    url_sitio_web: Optional[str] = Field(None, max_length=255, description="Sitio web")


class SupermarketCreate(SupermarketBase):
    """Datos para crear un supermercado"""

    class Config(Config):
        json_schema_extra = {
            "example": {
                "nombre_supermercado": "Jumbo",
                "direccion": "Av. Kennedy 9001, Las Condes",
                "url_sitio_web": "https://www.jumbo.cl",
            }
        }


class SupermarketUpdate(SupermarketBase):
    """Actualización parcial de un supermercado"""


class SupermarketResponse(BaseModel):
    """Supermercado con conteos opcionales de ofertas"""
    id_supermercado: int
    nombre_supermercado: str
    direccion: Optional[str] = None
    url_sitio_web: Optional[str] = None
    total_ofertas: Optional[int] = Field(None, description="Ofertas asociadas (válidas o no)")
    ofertas_validas: Optional[int] = Field(None, description="Ofertas válidas asociadas")


class SupermarketStats(SupermarketResponse):
    ofertas_activas: int = Field(..., description="Ofertas válidas del supermercado")
    porcentaje: float = Field(..., description="Participación sobre el total de ofertas válidas")


class SupermarketStatsResponse(BaseModel):
    """Participación de cada supermercado en las ofertas válidas"""
    total_ofertas: int
    supermercados: List[SupermarketStats]
