"""
Endpoints de categorías de productos
"""
from typing import List
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import structlog

from app.api.deps import require_admin
from app.core.database import MAX_DB_ID, get_db
from app.core.exceptions import InternalServerError
from app.models.user import User
from app.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from app.schemas.common import MessageResponse, error_responses
from app.services.category_service import category_service

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get(
    "/",
    response_model=List[CategoryResponse],
    summary="Listar categorías",
    responses=error_responses(500),
)
def listar_categorias(db: Session = Depends(get_db)):
    try:
        return category_service.list_categories(db)
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener categorías")
        raise InternalServerError("Error al obtener categorías") from exc


@router.get(
    "/{categoria_id}",
    response_model=CategoryResponse,
    summary="Obtener categoría por ID",
    responses=error_responses(404, 500),
)
def obtener_categoria(
    categoria_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID de la categoría"),
    db: Session = Depends(get_db),
):
    try:
        return category_service.get_category(db, categoria_id)
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener la categoría", id_categoria=categoria_id)
        raise InternalServerError("Error al obtener la categoría") from exc


@router.post(
    "/",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear categoría",
    responses=error_responses(400, 401, 403, 500),
)
def crear_categoria(
    payload: CategoryCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return category_service.create_category(db, payload)
    except SQLAlchemyError as exc:
        logger.exception("Error al crear la categoría")
        raise InternalServerError("Error al crear la categoría") from exc


@router.put(
    "/{categoria_id}",
    response_model=CategoryResponse,
    summary="Actualizar categoría",
    responses=error_responses(400, 401, 403, 404, 500),
)
def actualizar_categoria(
    payload: CategoryUpdate,
    categoria_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID de la categoría"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return category_service.update_category(db, categoria_id, payload)
    except SQLAlchemyError as exc:
        logger.exception("Error al actualizar la categoría", id_categoria=categoria_id)
        raise InternalServerError("Error al actualizar la categoría") from exc


@router.delete(
    "/{categoria_id}",
    response_model=MessageResponse,
    summary="Eliminar categoría",
    description="Falla mientras la categoría tenga productos; el conteo viaja en `details.productos`",
    responses=error_responses(400, 401, 403, 404, 500),
)
def eliminar_categoria(
    categoria_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID de la categoría"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return category_service.delete_category(db, categoria_id)
    except SQLAlchemyError as exc:
        logger.exception("Error al eliminar la categoría", id_categoria=categoria_id)
        raise InternalServerError("Error al eliminar la categoría") from exc
