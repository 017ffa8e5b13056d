"""
Endpoints de ofertas con nomenclatura en español
"""
from typing import Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import structlog

from app.api.deps import get_current_user, require_admin, require_moderation
from app.core.database import MAX_DB_ID, get_db
from app.core.exceptions import InternalServerError
from app.models.user import User
from app.schemas.common import MessageResponse, error_responses
from app.schemas.offer import (
    FavoriteResponse,
    OfferCreate,
    OfferInvalidatedResponse,
    OfferListResponse,
    OfferReportCreate,
    OfferReportCreatedResponse,
    OfferReportListResponse,
    OfferResponse,
    OfferUpdate,
    ProductOffersResponse,
    SupermarketOffersResponse,
)
from app.services.catalog_service import catalog_service
from app.services.offer_service import offer_service
from app.services.offer_filters import first_present

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get(
    "/",
    response_model=OfferListResponse,
    summary="Listar ofertas",
    description="Listado paginado de ofertas con filtros opcionales (solo válidas por defecto)",
    responses=error_responses(500),
)
def listar_ofertas(
    supermercado: Optional[str] = Query(None, description="ID del supermercado"),
    producto: Optional[str] = Query(None, description="ID del producto"),
    categoria: Optional[str] = Query(None, description="ID de la categoría del producto"),
    precio_min: Optional[str] = Query(None, description="Precio mínimo (inclusive)"),
    precio_max: Optional[str] = Query(None, description="Precio máximo (inclusive)"),
    precio_min_alias: Optional[str] = Query(None, alias="precioMin", description="Alias de precio_min"),
    precio_max_alias: Optional[str] = Query(None, alias="precioMax", description="Alias de precio_max"),
    validas: Optional[str] = Query(None, description="true (por defecto), false o all"),
    ordenar: Optional[str] = Query(None, description="price_asc, price_desc, date_desc o seller_name_asc"),
    page: Optional[str] = Query(None, description="Página (desde 1)"),
    limit: Optional[str] = Query(None, description="Resultados por página (máximo 100)"),
    db: Session = Depends(get_db),
):
    """
    Valores numéricos que no se pueden interpretar se ignoran como filtro.
    """
    try:
        return catalog_service.list_offers(
            db,
            supermercado=supermercado,
            producto=producto,
            categoria=categoria,
            precio_min=first_present(precio_min, precio_min_alias),
            precio_max=first_present(precio_max, precio_max_alias),
            validas=validas,
            ordenar=ordenar,
            page=page,
            limit=limit,
        )
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener ofertas")
        raise InternalServerError("Error al obtener ofertas") from exc


@router.get(
    "/buscar",
    response_model=OfferListResponse,
    summary="Buscar ofertas",
    description="Búsqueda por nombre o marca del producto y descripción de la oferta",
    responses=error_responses(500),
)
def buscar_ofertas(
    termino: Optional[str] = Query(None, description="Texto a buscar"),
    categoria: Optional[str] = Query(None, description="ID de la categoría"),
    supermercado: Optional[str] = Query(None, description="ID del supermercado"),
    precio_min: Optional[str] = Query(None, description="Precio mínimo (inclusive)"),
    precio_max: Optional[str] = Query(None, description="Precio máximo (inclusive)"),
    precio_min_alias: Optional[str] = Query(None, alias="precioMin", description="Alias de precio_min"),
    precio_max_alias: Optional[str] = Query(None, alias="precioMax", description="Alias de precio_max"),
    validas: Optional[str] = Query(None, description="true (por defecto), false o all"),
    ordenar: Optional[str] = Query(None, description="price_asc, price_desc, date_desc o seller_name_asc"),
    page: Optional[str] = Query(None, description="Página (desde 1)"),
    limit: Optional[str] = Query(None, description="Resultados por página (máximo 100)"),
    db: Session = Depends(get_db),
):
    try:
        return catalog_service.search_offers(
            db,
            termino=termino,
            categoria=categoria,
            supermercado=supermercado,
            precio_min=first_present(precio_min, precio_min_alias),
            precio_max=first_present(precio_max, precio_max_alias),
            validas=validas,
            ordenar=ordenar,
            page=page,
            limit=limit,
        )
    except SQLAlchemyError as exc:
        logger.exception("Error al buscar ofertas")
        raise InternalServerError("Error al buscar ofertas") from exc


@router.get(
    "/reportes",
    response_model=OfferReportListResponse,
    summary="Listar reportes de ofertas",
    description="Reportes enviados por los usuarios (administradores y moderadores)",
    responses=error_responses(401, 403, 500),
)
def listar_reportes(
    page: Optional[str] = Query(None, description="Página (desde 1)"),
    limit: Optional[str] = Query(None, description="Resultados por página (máximo 100)"),
    db: Session = Depends(get_db),
    _: User = Depends(require_moderation),
):
    try:
        return offer_service.list_reports(db, page=page, limit=limit)
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener reportes")
        raise InternalServerError("Error al obtener reportes") from exc


@router.get(
    "/producto/{producto_id}",
    response_model=ProductOffersResponse,
    summary="Ofertas de un producto",
    description="Ofertas de un producto con descuento y estadísticas de precio",
    responses=error_responses(500),
)
def ofertas_por_producto(
    producto_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID del producto"),
    validas: Optional[str] = Query(None, description="true (por defecto), false o all"),
    ordenar: Optional[str] = Query(None, description="price_asc, price_desc, date_desc o seller_name_asc"),
    page: Optional[str] = Query(None, description="Página (desde 1)"),
    limit: Optional[str] = Query(None, description="Resultados por página (máximo 100)"),
    db: Session = Depends(get_db),
):
    """
    Un producto inexistente produce una lista vacía con `producto` nulo.
    """
    try:
        return catalog_service.list_product_offers(
            db, producto_id, validas=validas, ordenar=ordenar, page=page, limit=limit
        )
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener ofertas por producto", id_producto=producto_id)
        raise InternalServerError("Error al obtener ofertas por producto") from exc


@router.get(
    "/supermercado/{supermercado_id}",
    response_model=SupermarketOffersResponse,
    summary="Ofertas de un supermercado",
    responses=error_responses(500),
)
def ofertas_por_supermercado(
    supermercado_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID del supermercado"),
    validas: Optional[str] = Query(None, description="true (por defecto), false o all"),
    ordenar: Optional[str] = Query(None, description="price_asc, price_desc, date_desc o seller_name_asc"),
    page: Optional[str] = Query(None, description="Página (desde 1)"),
    limit: Optional[str] = Query(None, description="Resultados por página (máximo 100)"),
    db: Session = Depends(get_db),
):
    try:
        return catalog_service.list_supermarket_offers(
            db, supermercado_id, validas=validas, ordenar=ordenar, page=page, limit=limit
        )
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener ofertas por supermercado", id_supermercado=supermercado_id)
        raise InternalServerError("Error al obtener ofertas por supermercado") from exc


@router.get(
    "/{oferta_id}",
    response_model=OfferResponse,
    summary="Obtener oferta por ID",
    responses=error_responses(404, 500),
)
def obtener_oferta(
    oferta_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID de la oferta"),
    db: Session = Depends(get_db),
):
    try:
        return offer_service.get_offer(db, oferta_id)
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener la oferta", id_oferta=oferta_id)
        raise InternalServerError("Error al obtener la oferta") from exc


@router.post(
    "/",
    response_model=OfferResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear oferta",
    responses=error_responses(400, 401, 403, 500),
)
def crear_oferta(
    payload: OfferCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return offer_service.create_offer(db, payload)
    except SQLAlchemyError as exc:
        logger.exception("Error al crear la oferta")
        raise InternalServerError("Error al crear la oferta") from exc


@router.put(
    "/{oferta_id}",
    response_model=OfferResponse,
    summary="Actualizar oferta",
    description="Actualización parcial: solo se modifican los campos enviados",
    responses=error_responses(400, 401, 403, 404, 500),
)
def actualizar_oferta(
    payload: OfferUpdate,
    oferta_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID de la oferta"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return offer_service.update_offer(db, oferta_id, payload)
    except SQLAlchemyError as exc:
        logger.exception("Error al actualizar la oferta", id_oferta=oferta_id)
        raise InternalServerError("Error al actualizar la oferta") from exc


@router.patch(
    "/{oferta_id}/invalidar",
    response_model=OfferInvalidatedResponse,
    summary="Marcar oferta como inválida",
    responses=error_responses(401, 403, 404, 500),
)
def invalidar_oferta(
    oferta_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID de la oferta"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return offer_service.invalidate_offer(db, oferta_id)
    except SQLAlchemyError as exc:
        logger.exception("Error al invalidar la oferta", id_oferta=oferta_id)
        raise InternalServerError("Error al marcar la oferta como inválida") from exc


@router.delete(
    "/{oferta_id}",
    response_model=MessageResponse,
    summary="Eliminar oferta",
    responses=error_responses(400, 401, 403, 404, 500),
)
def eliminar_oferta(
    oferta_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID de la oferta"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return offer_service.delete_offer(db, oferta_id)
    except SQLAlchemyError as exc:
        logger.exception("Error al eliminar la oferta", id_oferta=oferta_id)
        raise InternalServerError("Error al eliminar la oferta") from exc


@router.post(
    "/{oferta_id}/reportar",
    response_model=OfferReportCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Reportar oferta",
    responses=error_responses(400, 401, 404, 500),
)
def reportar_oferta(
    payload: OfferReportCreate,
    oferta_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID de la oferta"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        return offer_service.report_offer(db, oferta_id, user, payload.motivo)
    except SQLAlchemyError as exc:
        logger.exception("Error al reportar la oferta", id_oferta=oferta_id)
        raise InternalServerError("Error al reportar la oferta") from exc


@router.post(
    "/{oferta_id}/favorito",
    response_model=FavoriteResponse,
    summary="Marcar oferta como favorita",
    responses=error_responses(401, 404, 500),
)
def marcar_favorito(
    oferta_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID de la oferta"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        return offer_service.add_favorite(db, oferta_id, user)
    except SQLAlchemyError as exc:
        logger.exception("Error al marcar favorito", id_oferta=oferta_id)
        raise InternalServerError("Error al marcar la oferta como favorita") from exc


@router.delete(
    "/{oferta_id}/favorito",
    response_model=FavoriteResponse,
    summary="Quitar oferta de favoritos",
    responses=error_responses(401, 404, 500),
)
def quitar_favorito(
    oferta_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID de la oferta"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        return offer_service.remove_favorite(db, oferta_id, user)
    except SQLAlchemyError as exc:
        logger.exception("Error al quitar favorito", id_oferta=oferta_id)
        raise InternalServerError("Error al quitar la oferta de favoritos") from exc
