"""
Servicio de supermercados
"""
from typing import Any, Dict, List

from sqlalchemy.orm import Session
import structlog

from app.core.exceptions import ConstraintViolationError, NotFoundError, ValidationFailedError
from app.models.supermarket import Supermarket
from app.repositories.supermarket_repository import supermarket_repository
from app.schemas.supermarket import SupermarketCreate, SupermarketUpdate
from app.services.catalog_service import catalog_service
from app.services.offer_filters import clean_term
from app.services.serializers import supermarket_to_dict
from app.utils.price_analyzer import compute_share_percentages

logger = structlog.get_logger(__name__)

SUPERMARKET_FIELDS = {
    "nombre_supermercado": "name",
    "direccion": "address",
    "url_sitio_web": "website_url",
}


class SupermarketService:
    """Servicio de supermercados"""

    def __init__(self):
        self.supermarket_repo = supermarket_repository

    def _get_or_404(self, db: Session, supermarket_id: int) -> Supermarket:
        supermarket = self.supermarket_repo.get(db, supermarket_id)
        if supermarket is None:
            raise NotFoundError("Supermercado no encontrado")
        return supermarket

    def _with_counts(self, db: Session, supermarkets: List[Supermarket]) -> List[Dict[str, Any]]:
        totals = self.supermarket_repo.offer_counts(db)
        valid = self.supermarket_repo.offer_counts(db, valid_only=True)
        return [
            supermarket_to_dict(s, totals.get(s.id, 0), valid.get(s.id, 0))
            for s in supermarkets
        ]

    def list_supermarkets(self, db: Session, ordenar: Any = None) -> List[Dict[str, Any]]:
        """Supermercados ordenados por `nombre` (por defecto) o por `id`"""
        if ordenar == "id":
            order_by = (Supermarket.id.asc(),)
        else:
            order_by = (Supermarket.name.asc(), Supermarket.id.asc())
        return self._with_counts(db, self.supermarket_repo.get_multi(db, order_by=order_by))

    def get_supermarket(self, db: Session, supermarket_id: int) -> Dict[str, Any]:
        supermarket = self._get_or_404(db, supermarket_id)
        return supermarket_to_dict(
            supermarket,
            self.supermarket_repo.count_offers(db, supermarket_id),
            self.supermarket_repo.count_offers(db, supermarket_id, valid_only=True),
        )

    def search_supermarkets(self, db: Session, nombre: Any) -> List[Dict[str, Any]]:
        name = clean_term(nombre)
        if not name:
            raise ValidationFailedError("Se debe proporcionar un nombre para la búsqueda")
        return self._with_counts(db, self.supermarket_repo.search_by_name(db, name))

    def get_supermarket_offers(self, db: Session, supermarket_id: int, **query: Any) -> Dict[str, Any]:
        """Ofertas de un supermercado existente; 404 si no existe"""
        self._get_or_404(db, supermarket_id)
        return catalog_service.list_supermarket_offers(db, supermarket_id, **query)

    def _clean_name(self, value: Any, message: str) -> str:
        name = (value or "").strip()
        if not name:
            raise ValidationFailedError(message)
        return name

    def create_supermarket(self, db: Session, payload: SupermarketCreate) -> Dict[str, Any]:
        data = payload.model_dump(exclude_unset=True)
        data["nombre_supermercado"] = self._clean_name(
            data.get("nombre_supermercado"), "El nombre del supermercado es obligatorio"
        )
        if self.supermarket_repo.get_by_name(db, data["nombre_supermercado"]) is not None:
            raise ConstraintViolationError("Ya existe un supermercado con ese nombre")

        supermarket = self.supermarket_repo.create(
            db, obj_in={SUPERMARKET_FIELDS[key]: value for key, value in data.items()}
        )
        logger.info("Supermercado creado", id_supermercado=supermarket.id, nombre=supermarket.name)
        return supermarket_to_dict(supermarket, 0, 0)

    def update_supermarket(self, db: Session, supermarket_id: int, payload: SupermarketUpdate) -> Dict[str, Any]:
        supermarket = self._get_or_404(db, supermarket_id)
        data = payload.model_dump(exclude_unset=True)

        if "nombre_supermercado" in data:
            data["nombre_supermercado"] = self._clean_name(
                data["nombre_supermercado"], "El nombre del supermercado no puede estar vacío"
            )
            existing = self.supermarket_repo.get_by_name(db, data["nombre_supermercado"])
            if existing is not None and existing.id != supermarket_id:
                raise ConstraintViolationError("Ya existe otro supermercado con ese nombre")

        self.supermarket_repo.update(
            db, db_obj=supermarket, obj_in={SUPERMARKET_FIELDS[key]: value for key, value in data.items()}
        )
        logger.info("Supermercado actualizado", id_supermercado=supermarket_id)
        return self.get_supermarket(db, supermarket_id)

    def delete_supermarket(self, db: Session, supermarket_id: int) -> Dict[str, str]:
        supermarket = self._get_or_404(db, supermarket_id)

        offers = self.supermarket_repo.count_offers(db, supermarket_id)
        if offers:
            raise ConstraintViolationError(
                "No se puede eliminar el supermercado porque tiene ofertas asociadas",
                details={"ofertas": offers},
            )

        self.supermarket_repo.remove(db, db_obj=supermarket)
        logger.info("Supermercado eliminado", id_supermercado=supermarket_id)
        return {"mensaje": "Supermercado eliminado correctamente"}

    def get_statistics(self, db: Session) -> Dict[str, Any]:
        """
        Participación de cada supermercado sobre el total de ofertas válidas
        (porcentaje con 2 decimales; 0 si no hay ofertas válidas).
        """
        supermarkets = self.supermarket_repo.get_multi(
            db, order_by=(Supermarket.name.asc(), Supermarket.id.asc())
        )
        valid = self.supermarket_repo.offer_counts(db, valid_only=True)
        active = {s.id: valid.get(s.id, 0) for s in supermarkets}
        total = sum(valid.values())
        shares = compute_share_percentages(active, total)

        items = []
        for supermarket in supermarkets:
            data = supermarket_to_dict(supermarket)
            data["ofertas_activas"] = active[supermarket.id]
            data["porcentaje"] = shares[supermarket.id]
            items.append(data)

        return {"total_ofertas": total, "supermercados": items}


# Instancia global del servicio
supermarket_service = SupermarketService()
