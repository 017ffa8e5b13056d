"""
Servicio de consultas del catálogo de ofertas.

Compone el constructor de filtros, el ordenamiento/paginación y el análisis
de precios en las operaciones de lectura expuestas por la API: listado de
ofertas, ofertas por producto y por supermercado, búsqueda de texto libre y
listado de productos con su mejor precio.

Los identificadores usados como filtro no se verifican: un producto o
supermercado inexistente produce un resultado vacío, no un error.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
import structlog

from app.models.category import Category
from app.repositories.category_repository import category_repository
from app.repositories.offer_repository import offer_repository
from app.repositories.product_repository import product_repository
from app.repositories.supermarket_repository import supermarket_repository
from app.services.offer_filters import (
    OfferCriteria,
    ProductCriteria,
    ValidityScope,
    build_offer_filter,
    build_product_filter,
    clean_term,
    parse_decimal,
    parse_int,
    parse_validity,
)
from app.services.offer_ranking import (
    Pagination,
    SortKey,
    offer_order_by,
    parse_product_sort_key,
    parse_sort_key,
)
from app.services.serializers import (
    category_to_dict,
    offer_to_dict,
    product_to_dict,
    supermarket_to_dict,
)
from app.utils.price_analyzer import (
    best_price_summary,
    compute_price_statistics,
    count_valid_offers,
    select_best_offers,
)

logger = structlog.get_logger(__name__)


class CatalogService:
    """Consultas de lectura sobre ofertas y productos"""

    def __init__(self):
        self.offer_repo = offer_repository
        self.product_repo = product_repository
        self.category_repo = category_repository
        self.supermarket_repo = supermarket_repository

    def _offer_page(
        self,
        db: Session,
        criteria: OfferCriteria,
        sort_key: SortKey,
        pagination: Pagination,
        *,
        include_product: bool = True,
        include_supermarket: bool = True,
    ) -> Dict[str, Any]:
        """Página de ofertas con conteo total y favoritos por oferta"""
        predicate = build_offer_filter(criteria)
        offers = self.offer_repo.find_offers(
            db,
            predicate,
            order_by=offer_order_by(sort_key),
            skip=pagination.offset,
            limit=pagination.limit,
            include_product=include_product,
            include_supermarket=include_supermarket,
        )
        total = self.offer_repo.count(db, predicate)
        favorites = self.offer_repo.count_favorites(db, [o.id for o in offers])

        return {
            "predicate": predicate,
            "ofertas": [
                offer_to_dict(
                    offer,
                    include_product=include_product,
                    include_supermarket=include_supermarket,
                    favorites=favorites.get(offer.id, 0),
                )
                for offer in offers
            ],
            "pagination": pagination.meta(total),
        }

    def _valid_subset_statistics(self, db: Session, criteria: OfferCriteria, predicate: Any) -> Dict[str, Any]:
        """
        Estadísticas sobre las ofertas válidas de todo el conjunto filtrado,
        no solo de la página actual. Vacías si el cliente excluyó las válidas.
        """
        if criteria.validity == ValidityScope.INVALID:
            return {}
        return compute_price_statistics(self.offer_repo.get_valid_prices(db, predicate))

    def list_offers(
        self,
        db: Session,
        *,
        supermercado: Any = None,
        producto: Any = None,
        categoria: Any = None,
        precio_min: Any = None,
        precio_max: Any = None,
        validas: Any = None,
        ordenar: Any = None,
        page: Any = None,
        limit: Any = None,
    ) -> Dict[str, Any]:
        """Listado general de ofertas (solo válidas por defecto)"""
        criteria = OfferCriteria.from_query(
            supermercado=supermercado,
            producto=producto,
            categoria=categoria,
            precio_min=precio_min,
            precio_max=precio_max,
            validas=validas,
        )
        result = self._offer_page(
            db, criteria, parse_sort_key(ordenar), Pagination.from_params(page, limit)
        )
        result.pop("predicate")
        result["filtros"] = criteria.as_dict()
        return result

    def list_product_offers(
        self,
        db: Session,
        product_id: int,
        *,
        validas: Any = None,
        ordenar: Any = None,
        page: Any = None,
        limit: Any = None,
    ) -> Dict[str, Any]:
        """
        Ofertas de un producto con descuento por oferta y estadísticas de
        precio sobre el subconjunto válido de todas las ofertas filtradas.
        """
        criteria = OfferCriteria(product_id=product_id, validity=parse_validity(validas))
        result = self._offer_page(
            db,
            criteria,
            parse_sort_key(ordenar),
            Pagination.from_params(page, limit),
            include_product=False,
        )
        predicate = result.pop("predicate")

        return {
            "producto": product_to_dict(self.product_repo.get_with_category(db, product_id)),
            "ofertas": result["ofertas"],
            "estadisticas": self._valid_subset_statistics(db, criteria, predicate),
            "pagination": result["pagination"],
        }

    def list_supermarket_offers(
        self,
        db: Session,
        supermarket_id: int,
        *,
        validas: Any = None,
        ordenar: Any = None,
        page: Any = None,
        limit: Any = None,
    ) -> Dict[str, Any]:
        """Ofertas de un supermercado con producto y categoría"""
        criteria = OfferCriteria(supermarket_id=supermarket_id, validity=parse_validity(validas))
        result = self._offer_page(
            db,
            criteria,
            parse_sort_key(ordenar),
            Pagination.from_params(page, limit),
            include_supermarket=False,
        )
        predicate = result.pop("predicate")

        return {
            "supermercado": supermarket_to_dict(self.supermarket_repo.get(db, supermarket_id)),
            "ofertas": result["ofertas"],
            "estadisticas": self._valid_subset_statistics(db, criteria, predicate),
            "pagination": result["pagination"],
        }

    def search_offers(
        self,
        db: Session,
        *,
        termino: Any = None,
        categoria: Any = None,
        supermercado: Any = None,
        precio_min: Any = None,
        precio_max: Any = None,
        validas: Any = None,
        ordenar: Any = None,
        page: Any = None,
        limit: Any = None,
    ) -> Dict[str, Any]:
        """Búsqueda de texto libre sobre nombre, marca y descripción"""
        criteria = OfferCriteria.from_query(
            termino=termino,
            categoria=categoria,
            supermercado=supermercado,
            precio_min=precio_min,
            precio_max=precio_max,
            validas=validas,
        )
        result = self._offer_page(
            db, criteria, parse_sort_key(ordenar), Pagination.from_params(page, limit)
        )
        result.pop("predicate")
        result["filtros"] = criteria.as_dict()

        logger.info(
            "Búsqueda de ofertas",
            termino=criteria.search_term,
            total=result["pagination"]["total"],
        )
        return result

    def _products_with_best_price(self, db: Session, products: List[Any]) -> List[Dict[str, Any]]:
        """Adjuntar a cada producto su mejor oferta válida y cuántas tiene"""
        offers = self.offer_repo.get_valid_offers_for_products(db, [p.id for p in products])
        best = select_best_offers(offers)
        counts = count_valid_offers(offers)

        items = []
        for product in products:
            data = product_to_dict(product)
            data["mejor_precio"] = best_price_summary(best.get(product.id))
            data["tiene_ofertas"] = product.id in best
            data["total_ofertas"] = counts.get(product.id, 0)
            items.append(data)
        return items

    def _product_page(
        self,
        db: Session,
        criteria: ProductCriteria,
        ordenar: Any,
        pagination: Pagination,
    ) -> Dict[str, Any]:
        predicate = build_product_filter(criteria)
        products = self.product_repo.list_products(
            db,
            predicate,
            sort_key=parse_product_sort_key(ordenar),
            skip=pagination.offset,
            limit=pagination.limit,
        )
        total = self.product_repo.count(db, predicate)
        return {
            "productos": self._products_with_best_price(db, products),
            "pagination": pagination.meta(total),
        }

    def list_products_with_best_price(
        self,
        db: Session,
        *,
        nombre: Any = None,
        marca: Any = None,
        categoria: Any = None,
        ordenar: Any = None,
        page: Any = None,
        limit: Any = None,
    ) -> Dict[str, Any]:
        """
        Listado de productos con su mejor precio.

        El orden por precio se aplica en la consulta antes de paginar; los
        productos sin ofertas válidas van al final en ambos sentidos.
        """
        criteria = ProductCriteria(
            name=clean_term(nombre),
            brand=clean_term(marca),
            category_id=parse_int(categoria),
        )
        return self._product_page(db, criteria, ordenar, Pagination.from_params(page, limit))

    def search_products(
        self,
        db: Session,
        *,
        termino: Any = None,
        categoria: Any = None,
        precio_min: Any = None,
        precio_max: Any = None,
        ordenar: Any = None,
        page: Any = None,
        limit: Any = None,
    ) -> Dict[str, Any]:
        """
        Búsqueda de productos por nombre, marca o descripción.

        `categoria` es el nombre de la categoría (sin distinguir mayúsculas) y
        el rango de precios se evalúa sobre las ofertas válidas del producto.
        """
        criteria = ProductCriteria(
            search_term=clean_term(termino),
            category_name=clean_term(categoria),
            min_price=parse_decimal(precio_min),
            max_price=parse_decimal(precio_max),
        )
        return self._product_page(db, criteria, ordenar, Pagination.from_params(page, limit))

    def list_products_by_category(
        self,
        db: Session,
        category_id: int,
        *,
        ordenar: Any = None,
        page: Any = None,
        limit: Any = None,
    ) -> Dict[str, Any]:
        """Productos de una categoría; una categoría inexistente produce una página vacía"""
        criteria = ProductCriteria(category_id=category_id)
        result = self._product_page(db, criteria, ordenar, Pagination.from_params(page, limit))
        category: Optional[Category] = self.category_repo.get(db, category_id)
        result["categoria"] = category_to_dict(category)
        return result


# Instancia global del servicio
catalog_service = CatalogService()
