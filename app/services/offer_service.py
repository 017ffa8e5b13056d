"""
Servicio de ofertas: lectura individual, mutaciones, reportes y favoritos
"""
from typing import Any, Dict

from sqlalchemy.orm import Session
import structlog

from app.core.exceptions import ConstraintViolationError, NotFoundError, ValidationFailedError
from app.models.offer import Offer
from app.models.report import OfferReport
from app.models.user import User
from app.repositories.offer_repository import (
    favorite_repository,
    offer_report_repository,
    offer_repository,
)
from app.repositories.product_repository import product_repository
from app.repositories.supermarket_repository import supermarket_repository
from app.schemas.offer import OfferCreate, OfferUpdate
from app.services.offer_ranking import Pagination
from app.services.serializers import offer_to_dict, report_to_dict

logger = structlog.get_logger(__name__)

# Campos de la API -> atributos del modelo
OFFER_FIELDS = {
    "precio_original": "original_price",
    "precio_oferta": "offer_price",
    "fecha_inicio_oferta": "start_date",
    "fecha_fin_oferta": "end_date",
    "descripcion_oferta": "description",
    "url_oferta_original": "source_url",
    "id_producto": "product_id",
    "id_supermercado": "supermarket_id",
    "valida": "valid",
}

# Campos que no admiten null en una actualización parcial
_NOT_NULLABLE = {
    "precio_oferta": "El precio de oferta no puede ser nulo",
    "url_oferta_original": "La URL de la oferta original no puede estar vacía",
    "id_producto": "El ID del producto no puede ser nulo",
    "id_supermercado": "El ID del supermercado no puede ser nulo",
    "valida": "La validez de la oferta no puede ser nula",
}


class OfferService:
    """Servicio de ofertas"""

    def __init__(self):
        self.offer_repo = offer_repository
        self.report_repo = offer_report_repository
        self.favorite_repo = favorite_repository
        self.product_repo = product_repository
        self.supermarket_repo = supermarket_repository

    def _get_or_404(self, db: Session, offer_id: int) -> Offer:
        offer = self.offer_repo.get(db, offer_id)
        if offer is None:
            raise NotFoundError("Oferta no encontrada")
        return offer

    def _check_references(self, db: Session, data: Dict[str, Any]) -> None:
        if "id_producto" in data and not self.product_repo.exists(db, data["id_producto"]):
            raise ConstraintViolationError("El producto especificado no existe")
        if "id_supermercado" in data and not self.supermarket_repo.exists(db, data["id_supermercado"]):
            raise ConstraintViolationError("El supermercado especificado no existe")

    def _detail(self, db: Session, offer_id: int) -> Dict[str, Any]:
        offer = self.offer_repo.get_with_relations(db, offer_id)
        if offer is None:
            raise NotFoundError("Oferta no encontrada")
        favorites = self.offer_repo.count_favorites(db, [offer.id])
        return offer_to_dict(
            offer,
            include_product=True,
            include_supermarket=True,
            favorites=favorites.get(offer.id, 0),
        )

    def get_offer(self, db: Session, offer_id: int) -> Dict[str, Any]:
        """Oferta con producto, supermercado y cantidad de favoritos"""
        return self._detail(db, offer_id)

    def create_offer(self, db: Session, payload: OfferCreate) -> Dict[str, Any]:
        data = payload.model_dump(exclude_unset=True)

        if data.get("precio_oferta") is None:
            raise ValidationFailedError("El precio de oferta es obligatorio")
        if data.get("id_producto") is None:
            raise ValidationFailedError("El ID del producto es obligatorio")
        if data.get("id_supermercado") is None:
            raise ValidationFailedError("El ID del supermercado es obligatorio")
        if not (data.get("url_oferta_original") or "").strip():
            raise ValidationFailedError("La URL de la oferta original es obligatoria")

        self._check_references(db, data)

        offer = self.offer_repo.create(
            db, obj_in={OFFER_FIELDS[key]: value for key, value in data.items()}
        )
        logger.info(
            "Oferta creada",
            id_oferta=offer.id,
            id_producto=offer.product_id,
            id_supermercado=offer.supermarket_id,
        )
        return self._detail(db, offer.id)

    def update_offer(self, db: Session, offer_id: int, payload: OfferUpdate) -> Dict[str, Any]:
        """Actualización parcial: solo se aplican los campos enviados"""
        offer = self._get_or_404(db, offer_id)
        data = payload.model_dump(exclude_unset=True)

        for field, message in _NOT_NULLABLE.items():
            if field in data and data[field] is None:
                raise ValidationFailedError(message)
        if "url_oferta_original" in data and not data["url_oferta_original"].strip():
            raise ValidationFailedError(_NOT_NULLABLE["url_oferta_original"])

        self._check_references(db, data)

        self.offer_repo.update(
            db, db_obj=offer, obj_in={OFFER_FIELDS[key]: value for key, value in data.items()}
        )
        logger.info("Oferta actualizada", id_oferta=offer_id, campos=sorted(data))
        return self._detail(db, offer_id)

    def invalidate_offer(self, db: Session, offer_id: int) -> Dict[str, Any]:
        """Baja lógica: la oferta queda marcada como no válida"""
        offer = self._get_or_404(db, offer_id)
        self.offer_repo.update(db, db_obj=offer, obj_in={"valid": False})
        logger.info("Oferta invalidada", id_oferta=offer_id)
        return {
            "mensaje": "Oferta marcada como inválida correctamente",
            "oferta": self._detail(db, offer_id),
        }

    def delete_offer(self, db: Session, offer_id: int) -> Dict[str, str]:
        offer = self._get_or_404(db, offer_id)

        reports = self.report_repo.count(db, OfferReport.offer_id == offer_id)
        if reports:
            raise ConstraintViolationError(
                "No se puede eliminar la oferta porque tiene reportes asociados",
                details={"reportes": reports},
            )

        self.offer_repo.remove(db, db_obj=offer)
        logger.info("Oferta eliminada", id_oferta=offer_id)
        return {"mensaje": "Oferta eliminada correctamente"}

    def report_offer(self, db: Session, offer_id: int, reporter: User, motivo: Any) -> Dict[str, Any]:
        self._get_or_404(db, offer_id)

        reason = motivo.strip() if isinstance(motivo, str) else ""
        if not reason:
            raise ValidationFailedError("El motivo del reporte es obligatorio")

        report = self.report_repo.create(
            db, obj_in={"reason": reason, "offer_id": offer_id, "reporter_id": reporter.id}
        )
        logger.info("Oferta reportada", id_oferta=offer_id, id_reporte=report.id, id_usuario=reporter.id)
        return {
            "mensaje": "Oferta reportada correctamente",
            "reporte": report_to_dict(report, include_offer=True),
        }

    def list_reports(self, db: Session, *, page: Any = None, limit: Any = None) -> Dict[str, Any]:
        pagination = Pagination.from_params(page, limit)
        reports = self.report_repo.list_reports(db, skip=pagination.offset, limit=pagination.limit)
        return {
            "reportes": [report_to_dict(report, include_offer=True) for report in reports],
            "pagination": pagination.meta(self.report_repo.count(db)),
        }

    def _favorite_result(self, db: Session, offer_id: int, message: str) -> Dict[str, Any]:
        return {
            "mensaje": message,
            "id_oferta": offer_id,
            "total_favoritos": self.offer_repo.count_favorites(db, [offer_id])[offer_id],
        }

    def add_favorite(self, db: Session, offer_id: int, user: User) -> Dict[str, Any]:
        """Marcar como favorita; repetir la operación no duplica el registro"""
        self._get_or_404(db, offer_id)
        if self.favorite_repo.get_for_user(db, user.id, offer_id) is None:
            self.favorite_repo.create(db, obj_in={"user_id": user.id, "offer_id": offer_id})
            logger.info("Oferta marcada como favorita", id_oferta=offer_id, id_usuario=user.id)
        return self._favorite_result(db, offer_id, "Oferta agregada a favoritos")

    def remove_favorite(self, db: Session, offer_id: int, user: User) -> Dict[str, Any]:
        self._get_or_404(db, offer_id)
        favorite = self.favorite_repo.get_for_user(db, user.id, offer_id)
        if favorite is None:
            raise NotFoundError("La oferta no está en favoritos")
        self.favorite_repo.remove(db, db_obj=favorite)
        return self._favorite_result(db, offer_id, "Oferta eliminada de favoritos")


# Instancia global del servicio
offer_service = OfferService()
