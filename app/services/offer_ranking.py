"""
Ordenamiento y paginación de resultados del catálogo
"""
from dataclasses import dataclass
import enum
import math
from typing import Any, Dict, List, Optional

from sqlalchemy import select

from app.core.config import settings
from app.models.offer import Offer
from app.models.supermarket import Supermarket
from app.services.offer_filters import INT64_MAX, parse_unbounded_int


class SortKey(str, enum.Enum):
    """Criterios de orden para listados de ofertas"""
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    DATE_DESC = "date_desc"
    SELLER_NAME_ASC = "seller_name_asc"


_SORT_ALIASES = {
    "precio_asc": SortKey.PRICE_ASC,
    "precio_desc": SortKey.PRICE_DESC,
    "fecha_desc": SortKey.DATE_DESC,
    "supermercado": SortKey.SELLER_NAME_ASC,
}


class ProductSortKey(str, enum.Enum):
    """Criterios de orden para el listado de productos con mejor precio"""
    NAME_ASC = "nombre_asc"
    PRICE_ASC = "precio_asc"
    PRICE_DESC = "precio_desc"


_PRODUCT_SORT_ALIASES = {
    "name_asc": ProductSortKey.NAME_ASC,
    "price_asc": ProductSortKey.PRICE_ASC,
    "price_desc": ProductSortKey.PRICE_DESC,
}


def parse_sort_key(value: Any) -> SortKey:
    """Clave de orden; valores desconocidos vuelven a `price_asc` sin error"""
    if isinstance(value, SortKey):
        return value
    if value is None:
        return SortKey.PRICE_ASC
    key = str(value).strip().lower()
    try:
        return SortKey(key)
    except ValueError:
        return _SORT_ALIASES.get(key, SortKey.PRICE_ASC)


def parse_product_sort_key(value: Any) -> ProductSortKey:
    if isinstance(value, ProductSortKey):
        return value
    if value is None:
        return ProductSortKey.NAME_ASC
    key = str(value).strip().lower()
    try:
        return ProductSortKey(key)
    except ValueError:
        return _PRODUCT_SORT_ALIASES.get(key, ProductSortKey.NAME_ASC)


def offer_order_by(sort_key: SortKey) -> List[Any]:
    """
    Cláusulas ORDER BY para una clave de orden.

    Todas terminan en el ID de la oferta para que la paginación sea estable.
    """
    if sort_key == SortKey.PRICE_DESC:
        return [Offer.offer_price.desc(), Offer.id.asc()]
    if sort_key == SortKey.DATE_DESC:
        return [Offer.extracted_at.desc(), Offer.id.asc()]
    if sort_key == SortKey.SELLER_NAME_ASC:
        seller_name = (
            select(Supermarket.name)
            .where(Supermarket.id == Offer.supermarket_id)
            .scalar_subquery()
        )
        return [seller_name.asc(), Offer.offer_price.asc(), Offer.id.asc()]
    return [Offer.offer_price.asc(), Offer.id.asc()]


@dataclass(frozen=True)
class Pagination:
    """Ventana de resultados solicitada (page y limit siempre >= 1)"""
    page: int = 1
    limit: int = 10

    @classmethod
    def from_params(cls, page: Any = None, limit: Any = None, max_limit: Optional[int] = None) -> "Pagination":
        """
        Valores ausentes o no numéricos toman el valor por defecto; valores
        menores a 1 se ajustan a 1 y `limit` se acota a `MAX_PAGE_SIZE`.
        `page` se acota para que el offset quepa en un entero de 64 bits; una
        página más allá del último resultado simplemente viene vacía.
        """
        max_limit = max_limit or settings.MAX_PAGE_SIZE
        parsed_page = parse_unbounded_int(page)
        parsed_limit = parse_unbounded_int(limit)
        if parsed_page is None:
            parsed_page = 1
        if parsed_limit is None:
            parsed_limit = settings.DEFAULT_PAGE_SIZE
        limit_value = min(max(parsed_limit, 1), max_limit)
        max_page = INT64_MAX // limit_value + 1
        return cls(
            page=min(max(parsed_page, 1), max_page),
            limit=limit_value,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> Dict[str, int]:
        """Metadatos de paginación para la respuesta"""
        return {
            "total": total,
            "page": self.page,
            "limit": self.limit,
            "totalPages": math.ceil(total / self.limit),
        }
