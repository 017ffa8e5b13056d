"""
Endpoints de supermercados
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import structlog

from app.api.deps import require_admin
from app.core.database import MAX_DB_ID, get_db
from app.core.exceptions import InternalServerError
from app.models.user import User
from app.schemas.common import MessageResponse, error_responses
from app.schemas.offer import SupermarketOffersResponse
from app.schemas.supermarket import (
    SupermarketCreate,
    SupermarketResponse,
    SupermarketStatsResponse,
    SupermarketUpdate,
)
from app.services.supermarket_service import supermarket_service

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get(
    "/",
    response_model=List[SupermarketResponse],
    summary="Listar supermercados",
    responses=error_responses(500),
)
def listar_supermercados(
    ordenar: Optional[str] = Query(None, description="nombre (por defecto) o id"),
    db: Session = Depends(get_db),
):
    try:
        return supermarket_service.list_supermarkets(db, ordenar)
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener supermercados")
        raise InternalServerError("Error al obtener supermercados") from exc


@router.get(
    "/buscar",
    response_model=List[SupermarketResponse],
    summary="Buscar supermercados por nombre",
    responses=error_responses(400, 500),
)
def buscar_supermercados(
    nombre: Optional[str] = Query(None, description="Nombre o parte del nombre"),
    db: Session = Depends(get_db),
):
    try:
        return supermarket_service.search_supermarkets(db, nombre)
    except SQLAlchemyError as exc:
        logger.exception("Error al buscar supermercados")
        raise InternalServerError("Error al buscar supermercados") from exc


@router.get(
    "/estadisticas",
    response_model=SupermarketStatsResponse,
    summary="Estadísticas de ofertas por supermercado",
    description="Ofertas válidas de cada supermercado y su participación porcentual",
    responses=error_responses(401, 403, 500),
)
def estadisticas_supermercados(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return supermarket_service.get_statistics(db)
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener estadísticas de supermercados")
        raise InternalServerError("Error al obtener las estadísticas de supermercados") from exc


@router.get(
    "/{supermercado_id}",
    response_model=SupermarketResponse,
    summary="Obtener supermercado por ID",
    responses=error_responses(404, 500),
)
def obtener_supermercado(
    supermercado_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID del supermercado"),
    db: Session = Depends(get_db),
):
    try:
        return supermarket_service.get_supermarket(db, supermercado_id)
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener el supermercado", id_supermercado=supermercado_id)
        raise InternalServerError("Error al obtener el supermercado") from exc


@router.get(
    "/{supermercado_id}/ofertas",
    response_model=SupermarketOffersResponse,
    summary="Ofertas de un supermercado",
    responses=error_responses(404, 500),
)
def ofertas_del_supermercado(
    supermercado_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID del supermercado"),
    validas: Optional[str] = Query(None, description="true (por defecto), false o all"),
    ordenar: Optional[str] = Query(None, description="price_asc, price_desc o date_desc"),
    page: Optional[str] = Query(None, description="Página (desde 1)"),
    limit: Optional[str] = Query(None, description="Resultados por página (máximo 100)"),
    db: Session = Depends(get_db),
):
    try:
        return supermarket_service.get_supermarket_offers(
            db, supermercado_id, validas=validas, ordenar=ordenar, page=page, limit=limit
        )
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener las ofertas del supermercado", id_supermercado=supermercado_id)
        raise InternalServerError("Error al obtener las ofertas del supermercado") from exc


@router.post(
    "/",
    response_model=SupermarketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear supermercado",
    responses=error_responses(400, 401, 403, 500),
)
def crear_supermercado(
    payload: SupermarketCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return supermarket_service.create_supermarket(db, payload)
    except SQLAlchemyError as exc:
        logger.exception("Error al crear el supermercado")
        raise InternalServerError("Error al crear el supermercado") from exc


@router.put(
    "/{supermercado_id}",
    response_model=SupermarketResponse,
    summary="Actualizar supermercado",
    responses=error_responses(400, 401, 403, 404, 500),
)
def actualizar_supermercado(
    payload: SupermarketUpdate,
    supermercado_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID del supermercado"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return supermarket_service.update_supermarket(db, supermercado_id, payload)
    except SQLAlchemyError as exc:
        logger.exception("Error al actualizar el supermercado", id_supermercado=supermercado_id)
        raise InternalServerError("Error al actualizar el supermercado") from exc


@router.delete(
    "/{supermercado_id}",
    response_model=MessageResponse,
    summary="Eliminar supermercado",
    description="Falla mientras el supermercado tenga ofertas asociadas",
    responses=error_responses(400, 401, 403, 404, 500),
)
def eliminar_supermercado(
    supermercado_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID del supermercado"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return supermarket_service.delete_supermarket(db, supermercado_id)
    except SQLAlchemyError as exc:
        logger.exception("Error al eliminar el supermercado", id_supermercado=supermercado_id)
        raise InternalServerError("Error al eliminar el supermercado") from exc
