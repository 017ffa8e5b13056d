"""
Servicio de productos con lógica de negocio
"""
from typing import Any, Dict

from sqlalchemy.orm import Session
import structlog

from app.core.exceptions import ConstraintViolationError, NotFoundError, ValidationFailedError
from app.models.offer import Offer
from app.models.product import Product
from app.repositories.category_repository import category_repository
from app.repositories.offer_repository import offer_repository
from app.repositories.product_repository import product_repository
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.catalog_service import catalog_service
from app.services.offer_ranking import SortKey, offer_order_by
from app.services.serializers import offer_to_dict, product_to_dict

logger = structlog.get_logger(__name__)

PRODUCT_FIELDS = {
    "nombre_producto": "name",
    "marca": "brand",
    "descripcion_producto": "description",
    "imagen_url": "image_url",
    "id_categoria": "category_id",
}


class ProductService:
    """Servicio de productos"""

    def __init__(self):
        self.product_repo = product_repository
        self.offer_repo = offer_repository
        self.category_repo = category_repository

    def _get_or_404(self, db: Session, product_id: int) -> Product:
        product = self.product_repo.get(db, product_id)
        if product is None:
            raise NotFoundError("Producto no encontrado")
        return product

    def _check_category(self, db: Session, data: Dict[str, Any]) -> None:
        category_id = data.get("id_categoria")
        if category_id is not None and not self.category_repo.exists(db, category_id):
            raise ConstraintViolationError("La categoría especificada no existe")

    def get_product(self, db: Session, product_id: int) -> Dict[str, Any]:
        """
        Producto con su categoría y sus ofertas válidas ordenadas por precio
        """
        product = self.product_repo.get_with_category(db, product_id)
        if product is None:
            raise NotFoundError("Producto no encontrado")

        offers = self.offer_repo.find_offers(
            db,
            (Offer.product_id == product_id) & Offer.valid.is_(True),
            order_by=offer_order_by(SortKey.PRICE_ASC),
            include_product=False,
        )
        data = product_to_dict(product)
        data["ofertas"] = [offer_to_dict(offer, include_supermarket=True) for offer in offers]
        return data

    def get_product_offers(self, db: Session, product_id: int, **query: Any) -> Dict[str, Any]:
        """Ofertas de un producto existente; 404 si el producto no existe"""
        self._get_or_404(db, product_id)
        return catalog_service.list_product_offers(db, product_id, **query)

    def create_product(self, db: Session, payload: ProductCreate) -> Dict[str, Any]:
        data = payload.model_dump(exclude_unset=True)

        name = (data.get("nombre_producto") or "").strip()
        if not name:
            raise ValidationFailedError("El nombre del producto es obligatorio")
        data["nombre_producto"] = name

        self._check_category(db, data)

        product = self.product_repo.create(
            db, obj_in={PRODUCT_FIELDS[key]: value for key, value in data.items()}
        )
        logger.info("Producto creado", id_producto=product.id, nombre=product.name)
        return product_to_dict(self.product_repo.get_with_category(db, product.id))

    def update_product(self, db: Session, product_id: int, payload: ProductUpdate) -> Dict[str, Any]:
        """Actualización parcial del producto"""
        product = self._get_or_404(db, product_id)
        data = payload.model_dump(exclude_unset=True)

        if "nombre_producto" in data:
            name = (data["nombre_producto"] or "").strip()
            if not name:
                raise ValidationFailedError("El nombre del producto no puede estar vacío")
            data["nombre_producto"] = name

        self._check_category(db, data)

        self.product_repo.update(
            db, db_obj=product, obj_in={PRODUCT_FIELDS[key]: value for key, value in data.items()}
        )
        logger.info("Producto actualizado", id_producto=product_id, campos=sorted(data))
        return product_to_dict(self.product_repo.get_with_category(db, product_id))

    def delete_product(self, db: Session, product_id: int) -> Dict[str, str]:
        """Eliminar un producto sin ofertas asociadas"""
        product = self._get_or_404(db, product_id)

        offers = self.product_repo.count_offers(db, product_id)
        if offers:
            raise ConstraintViolationError(
                "No se puede eliminar el producto porque tiene ofertas asociadas",
                details={"ofertas": offers},
            )

        self.product_repo.remove(db, db_obj=product)
        logger.info("Producto eliminado", id_producto=product_id)
        return {"mensaje": "Producto eliminado correctamente"}


# Instancia global del servicio
product_service = ProductService()
