"""
Repositorio de ofertas con consultas filtradas y conteos derivados
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.models.favorite import Favorite
from app.models.offer import Offer
from app.models.product import Product
from app.models.report import OfferReport
from app.repositories.base_repository import BaseRepository


class OfferRepository(BaseRepository[Offer]):
    """Repositorio de ofertas"""

    integrity_message = "El producto o supermercado especificado no existe"

    def __init__(self):
        super().__init__(Offer)

    @staticmethod
    def load_options(include_product: bool = True, include_supermarket: bool = True) -> List[Any]:
        """Relaciones a precargar junto con las ofertas"""
        options: List[Any] = []
        if include_product:
            options.append(selectinload(Offer.product).selectinload(Product.category))
        if include_supermarket:
            options.append(selectinload(Offer.supermarket))
        return options

    def find_offers(
        self,
        db: Session,
        predicate: Any,
        *,
        order_by: Sequence[Any],
        skip: int = 0,
        limit: Optional[int] = None,
        include_product: bool = True,
        include_supermarket: bool = True,
    ) -> List[Offer]:
        return self.find(
            db,
            predicate,
            options=self.load_options(include_product, include_supermarket),
            order_by=order_by,
            skip=skip,
            limit=limit,
        )

    def get_with_relations(self, db: Session, offer_id: int) -> Optional[Offer]:
        """Oferta con producto (y categoría) y supermercado precargados"""
        offers = self.find(db, Offer.id == offer_id, options=self.load_options())
        return offers[0] if offers else None

    def get_valid_prices(self, db: Session, predicate: Any) -> List[Any]:
        """Precios de todas las ofertas válidas que cumplen el predicado, sin paginar"""
        stmt = select(Offer.offer_price).where(predicate, Offer.valid.is_(True))
        return list(db.scalars(stmt).all())

    def get_valid_offers_for_products(self, db: Session, product_ids: Iterable[int]) -> List[Offer]:
        """
        Ofertas válidas de un conjunto de productos, en orden de inserción,
        con el supermercado precargado.
        """
        ids = list(product_ids)
        if not ids:
            return []
        return self.find(
            db,
            Offer.product_id.in_(ids) & Offer.valid.is_(True),
            options=self.load_options(include_product=False),
            order_by=(Offer.id.asc(),),
        )

    def count_favorites(self, db: Session, offer_ids: Iterable[int]) -> Dict[int, int]:
        """Cantidad de favoritos por oferta; ofertas sin favoritos tienen 0"""
        ids = list(offer_ids)
        if not ids:
            return {}
        stmt = (
            select(Favorite.offer_id, func.count(Favorite.id))
            .where(Favorite.offer_id.in_(ids))
            .group_by(Favorite.offer_id)
        )
        counts = {offer_id: 0 for offer_id in ids}
        counts.update({offer_id: total for offer_id, total in db.execute(stmt).all()})
        return counts


class OfferReportRepository(BaseRepository[OfferReport]):
    """Repositorio de reportes de ofertas (solo inserción y lectura)"""

    integrity_message = "La oferta o el usuario especificado no existe"

    def __init__(self):
        super().__init__(OfferReport)

    def list_reports(self, db: Session, *, skip: int = 0, limit: Optional[int] = None) -> List[OfferReport]:
        return self.find(
            db,
            options=(
                selectinload(OfferReport.offer).selectinload(Offer.product),
                selectinload(OfferReport.offer).selectinload(Offer.supermarket),
                selectinload(OfferReport.reporter),
            ),
            order_by=(OfferReport.created_at.desc(), OfferReport.id.desc()),
            skip=skip,
            limit=limit,
        )


class FavoriteRepository(BaseRepository[Favorite]):
    """Repositorio de ofertas favoritas"""

    integrity_message = "La oferta ya está marcada como favorita"

    def __init__(self):
        super().__init__(Favorite)

    def get_for_user(self, db: Session, user_id: int, offer_id: int) -> Optional[Favorite]:
        favorites = self.find(db, (Favorite.user_id == user_id) & (Favorite.offer_id == offer_id))
        return favorites[0] if favorites else None


# Instancias globales de los repositorios
offer_repository = OfferRepository()
offer_report_repository = OfferReportRepository()
favorite_repository = FavoriteRepository()
