"""
Repositorio de supermercados
"""
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.offer import Offer
from app.models.supermarket import Supermarket
from app.repositories.base_repository import BaseRepository


class SupermarketRepository(BaseRepository[Supermarket]):
    """Repositorio de supermercados"""

    integrity_message = "Ya existe un supermercado con ese nombre"

    def __init__(self):
        super().__init__(Supermarket)

    def get_by_name(self, db: Session, name: str) -> Optional[Supermarket]:
        supermarkets = self.find(db, Supermarket.name == name)
        return supermarkets[0] if supermarkets else None

    def search_by_name(self, db: Session, name: str) -> List[Supermarket]:
        escaped = name.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return self.find(
            db,
            Supermarket.name.ilike(f"%{escaped}%", escape="\\"),
            order_by=(Supermarket.name.asc(),),
        )

    def count_offers(self, db: Session, supermarket_id: int, valid_only: bool = False) -> int:
        stmt = select(func.count(Offer.id)).where(Offer.supermarket_id == supermarket_id)
        if valid_only:
            stmt = stmt.where(Offer.valid.is_(True))
        return db.scalar(stmt) or 0

    def offer_counts(self, db: Session, valid_only: bool = False) -> Dict[int, int]:
        stmt = select(Offer.supermarket_id, func.count(Offer.id)).group_by(Offer.supermarket_id)
        if valid_only:
            stmt = stmt.where(Offer.valid.is_(True))
        return {supermarket_id: total for supermarket_id, total in db.execute(stmt).all()}


# Instancia global del repositorio
supermarket_repository = SupermarketRepository()
