"""
Repositorio de categorías
"""
from typing import Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.category import Category
from app.models.product import Product
from app.repositories.base_repository import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repositorio de categorías de productos"""

    integrity_message = "Ya existe una categoría con ese nombre"

    def __init__(self):
        super().__init__(Category)

    def get_by_name(self, db: Session, name: str) -> Optional[Category]:
        categories = self.find(db, Category.name == name)
        return categories[0] if categories else None

    def count_products(self, db: Session, category_id: int) -> int:
        return db.scalar(
            select(func.count(Product.id)).where(Product.category_id == category_id)
        ) or 0

    def product_counts(self, db: Session) -> Dict[int, int]:
        stmt = (
            select(Product.category_id, func.count(Product.id))
            .where(Product.category_id.is_not(None))
            .group_by(Product.category_id)
        )
        return {category_id: total for category_id, total in db.execute(stmt).all()}


# Instancia global del repositorio
category_repository = CategoryRepository()
