"""
Construcción de filtros para consultas de ofertas.

Traduce los criterios opcionales recibidos por query string en una única
expresión booleana de SQLAlchemy que el repositorio aplica en su `WHERE`.
Los criterios presentes se combinan con AND; el término de búsqueda se
expande internamente a un OR sobre nombre y marca del producto y
descripción de la oferta.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import enum
from typing import Any, List, Optional

from sqlalchemy import and_, false, func, or_, true

from app.core.database import MAX_DB_ID
from app.models.category import Category
from app.models.offer import Offer
from app.models.product import Product


# Rango de enteros con signo de 64 bits
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class ValidityScope(str, enum.Enum):
    """Alcance de validez solicitado por el cliente"""
    VALID = "true"
    INVALID = "false"
    ALL = "all"


_VALIDITY_ALIASES = {
    "true": ValidityScope.VALID,
    "1": ValidityScope.VALID,
    "false": ValidityScope.INVALID,
    "0": ValidityScope.INVALID,
    "all": ValidityScope.ALL,
    "todas": ValidityScope.ALL,
}


def parse_unbounded_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_int(value: Any) -> Optional[int]:
    """
    Entero desde query string; lo que no se pueda interpretar, o no quepa en
    un entero de 64 bits, se considera ausente
    """
    parsed = parse_unbounded_int(value)
    if parsed is None or not INT64_MIN <= parsed <= INT64_MAX:
        return None
    return parsed


def first_present(*values: Any) -> Any:
    """Primer valor distinto de None (parámetro y su alias)"""
    for value in values:
        if value is not None:
            return value
    return None


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Decimal desde query string; valores no numéricos o no finitos se ignoran"""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not parsed.is_finite():
        return None
    return parsed


def parse_validity(value: Any, default: Optional[ValidityScope] = ValidityScope.VALID) -> Optional[ValidityScope]:
    if value is None:
        return default
    if isinstance(value, ValidityScope):
        return value
    return _VALIDITY_ALIASES.get(str(value).strip().lower(), default)


def clean_term(value: Any) -> Optional[str]:
    if value is None:
        return None
    term = str(value).strip()
    return term or None


def _contains(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@dataclass
class OfferCriteria:
    """Criterios opcionales de filtrado de ofertas"""
    supermarket_id: Optional[int] = None
    product_id: Optional[int] = None
    category_id: Optional[int] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    search_term: Optional[str] = None
    validity: Optional[ValidityScope] = None

    @classmethod
    def from_query(
        cls,
        *,
        supermercado: Any = None,
        producto: Any = None,
        categoria: Any = None,
        precio_min: Any = None,
        precio_max: Any = None,
        termino: Any = None,
        validas: Any = None,
        default_validity: Optional[ValidityScope] = ValidityScope.VALID,
    ) -> "OfferCriteria":
        """Criterios a partir de parámetros crudos, con parseo permisivo"""
        return cls(
            supermarket_id=parse_int(supermercado),
            product_id=parse_int(producto),
            category_id=parse_int(categoria),
            min_price=parse_decimal(precio_min),
            max_price=parse_decimal(precio_max),
            search_term=clean_term(termino),
            validity=parse_validity(validas, default_validity),
        )

    def as_dict(self) -> dict:
        """Filtros aplicados, en el formato que se devuelve al cliente"""
        return {
            "supermercado": self.supermarket_id,
            "producto": self.product_id,
            "categoria": self.category_id,
            "precio_min": float(self.min_price) if self.min_price is not None else None,
            "precio_max": float(self.max_price) if self.max_price is not None else None,
            "termino": self.search_term,
            "validas": self.validity.value if self.validity else ValidityScope.ALL.value,
        }


def id_in_range(value: int) -> bool:
    return -MAX_DB_ID - 1 <= value <= MAX_DB_ID


def id_equals(column, value: int):
    """Igualdad por ID; un ID fuera del rango de la columna no coincide con nada"""
    if not id_in_range(value):
        return false()
    return column == value


def search_term_predicate(term: str):
    """OR insensible a mayúsculas sobre nombre, marca y descripción de la oferta"""
    pattern = _contains(term)
    return or_(
        Offer.product.has(Product.name.ilike(pattern, escape="\\")),
        Offer.product.has(Product.brand.ilike(pattern, escape="\\")),
        Offer.description.ilike(pattern, escape="\\"),
    )


def build_offer_filter(criteria: OfferCriteria):
    """
    Expresión booleana equivalente a los criterios presentes.

    Sin criterios se devuelve `true()` para que el llamador pueda
    aplicarla siempre.
    """
    clauses: List[Any] = []

    if criteria.validity == ValidityScope.VALID:
        clauses.append(Offer.valid.is_(True))
    elif criteria.validity == ValidityScope.INVALID:
        clauses.append(Offer.valid.is_(False))

    if criteria.supermarket_id is not None:
        clauses.append(id_equals(Offer.supermarket_id, criteria.supermarket_id))

    if criteria.product_id is not None:
        clauses.append(id_equals(Offer.product_id, criteria.product_id))

    if criteria.category_id is not None:
        clauses.append(Offer.product.has(id_equals(Product.category_id, criteria.category_id)))

    if criteria.min_price is not None:
        clauses.append(Offer.offer_price >= criteria.min_price)

    if criteria.max_price is not None:
        clauses.append(Offer.offer_price <= criteria.max_price)

    if criteria.search_term:
        clauses.append(search_term_predicate(criteria.search_term))

    if not clauses:
        return true()
    return and_(*clauses)


@dataclass
class ProductCriteria:
    """Criterios opcionales para listados y búsquedas de productos"""
    name: Optional[str] = None
    brand: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    search_term: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None


def build_product_filter(criteria: ProductCriteria):
    """
    Expresión booleana para productos.

    El rango de precios se evalúa sobre las ofertas válidas: un producto
    cumple si alguna de ellas cae dentro del rango.
    """
    clauses: List[Any] = []

    if criteria.name:
        clauses.append(Product.name.ilike(_contains(criteria.name), escape="\\"))

    if criteria.brand:
        clauses.append(Product.brand.ilike(_contains(criteria.brand), escape="\\"))

    if criteria.category_id is not None:
        clauses.append(id_equals(Product.category_id, criteria.category_id))

    if criteria.category_name:
        clauses.append(Product.category.has(func.lower(Category.name) == criteria.category_name.lower()))

    if criteria.search_term:
        pattern = _contains(criteria.search_term)
        clauses.append(or_(
            Product.name.ilike(pattern, escape="\\"),
            Product.brand.ilike(pattern, escape="\\"),
            Product.description.ilike(pattern, escape="\\"),
        ))

    if criteria.min_price is not None or criteria.max_price is not None:
        offer_clauses = [Offer.valid.is_(True)]
        if criteria.min_price is not None:
            offer_clauses.append(Offer.offer_price >= criteria.min_price)
        if criteria.max_price is not None:
            offer_clauses.append(Offer.offer_price <= criteria.max_price)
        clauses.append(Product.offers.any(and_(*offer_clauses)))

    if not clauses:
        return true()
    return and_(*clauses)
