"""
Servicio de categorías
"""
from typing import Any, Dict, List

from sqlalchemy.orm import Session
import structlog

from app.core.exceptions import ConstraintViolationError, NotFoundError, ValidationFailedError
from app.models.category import Category
from app.repositories.category_repository import category_repository
from app.schemas.category import CategoryCreate, CategoryUpdate
from app.services.serializers import category_to_dict

logger = structlog.get_logger(__name__)


class CategoryService:

    def __init__(self):
        self.category_repo = category_repository

    def _get_or_404(self, db: Session, category_id: int) -> Category:
        category = self.category_repo.get(db, category_id)
        if category is None:
            raise NotFoundError("Categoría no encontrada")
        return category

    def list_categories(self, db: Session) -> List[Dict[str, Any]]:
        """Todas las categorías por nombre, con su cantidad de productos"""
        counts = self.category_repo.product_counts(db)
        categories = self.category_repo.get_multi(db, order_by=(Category.name.asc(),))
        return [category_to_dict(c, counts.get(c.id, 0)) for c in categories]

    def get_category(self, db: Session, category_id: int) -> Dict[str, Any]:
        category = self._get_or_404(db, category_id)
        return category_to_dict(category, self.category_repo.count_products(db, category_id))

    def create_category(self, db: Session, payload: CategoryCreate) -> Dict[str, Any]:
        name = (payload.nombre_categoria or "").strip()
        if not name:
            raise ValidationFailedError("El nombre de la categoría es obligatorio")
        if self.category_repo.get_by_name(db, name) is not None:
            raise ConstraintViolationError("Ya existe una categoría con ese nombre")

        category = self.category_repo.create(
            db, obj_in={"name": name, "description": payload.descripcion}
        )
        logger.info("Categoría creada", id_categoria=category.id, nombre=name)
        return category_to_dict(category, 0)

    def update_category(self, db: Session, category_id: int, payload: CategoryUpdate) -> Dict[str, Any]:
        category = self._get_or_404(db, category_id)
        data = payload.model_dump(exclude_unset=True)
        changes: Dict[str, Any] = {}

        if "nombre_categoria" in data:
            name = (data["nombre_categoria"] or "").strip()
            if not name:
                raise ValidationFailedError("El nombre de la categoría no puede estar vacío")
            existing = self.category_repo.get_by_name(db, name)
            if existing is not None and existing.id != category_id:
                raise ConstraintViolationError("Ya existe otra categoría con ese nombre")
            changes["name"] = name

        if "descripcion" in data:
            changes["description"] = data["descripcion"]

        category = self.category_repo.update(db, db_obj=category, obj_in=changes)
        logger.info("Categoría actualizada", id_categoria=category_id)
        return category_to_dict(category, self.category_repo.count_products(db, category_id))

    def delete_category(self, db: Session, category_id: int) -> Dict[str, str]:
        """
        Eliminar una categoría.

        Falla con `ConstraintViolationError` mientras tenga productos; el
        conteo de productos viaja en `details`.
        """
        category = self._get_or_404(db, category_id)

        products = self.category_repo.count_products(db, category_id)
        if products:
            raise ConstraintViolationError(
                "No se puede eliminar la categoría porque tiene productos asociados",
                details={"productos": products},
            )

        self.category_repo.remove(db, db_obj=category)
        logger.info("Categoría eliminada", id_categoria=category_id)
        return {"mensaje": "Categoría eliminada correctamente"}


# Instancia global del servicio
category_service = CategoryService()
