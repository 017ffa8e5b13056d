"""
Repositorio de productos con listado por mejor precio
"""
from typing import Any, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.models.category import Category
from app.models.offer import Offer
from app.models.product import Product
from app.repositories.base_repository import BaseRepository
from app.services.offer_ranking import ProductSortKey


def best_price_subquery():
    """Menor precio entre las ofertas válidas del producto (NULL si no tiene)"""
    return (
        select(func.min(Offer.offer_price))
        .where(Offer.product_id == Product.id, Offer.valid.is_(True))
        .scalar_subquery()
    )


class ProductRepository(BaseRepository[Product]):
    """Repositorio de productos con funcionalidades específicas"""

    integrity_message = "La categoría especificada no existe"

    def __init__(self):
        super().__init__(Product)

    def product_order_by(self, sort_key: ProductSortKey) -> List[Any]:
        """
        Orden del listado de productos.

        El orden por precio se resuelve en la consulta, antes de paginar;
        los productos sin ofertas válidas quedan al final en ambos sentidos.
        """
        if sort_key == ProductSortKey.NAME_ASC:
            return [Product.name.asc(), Product.id.asc()]

        best_price = best_price_subquery()
        direction = best_price.asc() if sort_key == ProductSortKey.PRICE_ASC else best_price.desc()
        return [best_price.is_(None), direction, Product.name.asc(), Product.id.asc()]

    def list_products(
        self,
        db: Session,
        predicate: Any,
        *,
        sort_key: ProductSortKey = ProductSortKey.NAME_ASC,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Product]:
        return self.find(
            db,
            predicate,
            options=(selectinload(Product.category),),
            order_by=self.product_order_by(sort_key),
            skip=skip,
            limit=limit,
        )

    def get_with_category(self, db: Session, product_id: int) -> Optional[Product]:
        products = self.find(
            db, Product.id == product_id, options=(selectinload(Product.category),)
        )
        return products[0] if products else None

    def count_offers(self, db: Session, product_id: int) -> int:
        """Cantidad de ofertas (válidas o no) que referencian al producto"""
        return db.scalar(
            select(func.count(Offer.id)).where(Offer.product_id == product_id)
        ) or 0

    def category_exists(self, db: Session, category_id: int) -> bool:
        return db.get(Category, category_id) is not None


# Instancia global del repositorio
product_repository = ProductRepository()
