"""
Endpoints de productos con nomenclatura en español
"""
from typing import Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import structlog

from app.api.deps import require_admin
from app.core.database import MAX_DB_ID, get_db
from app.core.exceptions import InternalServerError
from app.models.user import User
from app.schemas.common import MessageResponse, error_responses
from app.schemas.offer import ProductDetailResponse, ProductOffersResponse
from app.schemas.product import ProductCreate, ProductListResponse, ProductResponse, ProductUpdate
from app.services.catalog_service import catalog_service
from app.services.offer_filters import first_present
from app.services.product_service import product_service

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get(
    "/",
    response_model=ProductListResponse,
    summary="Listar productos con su mejor precio",
    description="Listado paginado de productos con la mejor oferta válida de cada uno",
    responses=error_responses(500),
)
def listar_productos(
    nombre: Optional[str] = Query(None, description="Filtrar por nombre (contiene)"),
    marca: Optional[str] = Query(None, description="Filtrar por marca (contiene)"),
    categoria: Optional[str] = Query(None, description="ID de la categoría"),
    ordenar: Optional[str] = Query(None, description="nombre_asc (por defecto), precio_asc o precio_desc"),
    page: Optional[str] = Query(None, description="Página (desde 1)"),
    limit: Optional[str] = Query(None, description="Resultados por página (máximo 100)"),
    db: Session = Depends(get_db),
):
    """
    Con `ordenar=precio_asc|precio_desc` el orden se calcula sobre el mejor
    precio de cada producto; los productos sin ofertas válidas van al final.
    """
    try:
        return catalog_service.list_products_with_best_price(
            db,
            nombre=nombre,
            marca=marca,
            categoria=categoria,
            ordenar=ordenar,
            page=page,
            limit=limit,
        )
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener productos")
        raise InternalServerError("Error al obtener productos") from exc


@router.get(
    "/buscar",
    response_model=ProductListResponse,
    summary="Buscar productos",
    description="Búsqueda por nombre, marca o descripción, con categoría por nombre y rango de precios",
    responses=error_responses(500),
)
def buscar_productos(
    termino: Optional[str] = Query(None, description="Texto a buscar"),
    categoria: Optional[str] = Query(None, description="Nombre de la categoría"),
    precio_min: Optional[str] = Query(None, description="Precio mínimo de alguna oferta válida"),
    precio_max: Optional[str] = Query(None, description="Precio máximo de alguna oferta válida"),
    precio_min_alias: Optional[str] = Query(None, alias="precioMin", description="Alias de precio_min"),
    precio_max_alias: Optional[str] = Query(None, alias="precioMax", description="Alias de precio_max"),
    ordenar: Optional[str] = Query(None, description="nombre_asc (por defecto), precio_asc o precio_desc"),
    page: Optional[str] = Query(None, description="Página (desde 1)"),
    limit: Optional[str] = Query(None, description="Resultados por página (máximo 100)"),
    db: Session = Depends(get_db),
):
    try:
        return catalog_service.search_products(
            db,
            termino=termino,
            categoria=categoria,
            precio_min=first_present(precio_min, precio_min_alias),
            precio_max=first_present(precio_max, precio_max_alias),
            ordenar=ordenar,
            page=page,
            limit=limit,
        )
    except SQLAlchemyError as exc:
        logger.exception("Error al buscar productos")
        raise InternalServerError("Error al buscar productos") from exc


@router.get(
    "/categoria/{categoria_id}",
    response_model=ProductListResponse,
    summary="Productos por categoría",
    responses=error_responses(500),
)
def productos_por_categoria(
    categoria_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID de la categoría"),
    ordenar: Optional[str] = Query(None, description="nombre_asc (por defecto), precio_asc o precio_desc"),
    page: Optional[str] = Query(None, description="Página (desde 1)"),
    limit: Optional[str] = Query(None, description="Resultados por página (máximo 100)"),
    db: Session = Depends(get_db),
):
    try:
        return catalog_service.list_products_by_category(
            db, categoria_id, ordenar=ordenar, page=page, limit=limit
        )
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener productos por categoría", id_categoria=categoria_id)
        raise InternalServerError("Error al obtener productos por categoría") from exc


@router.get(
    "/{producto_id}",
    response_model=ProductDetailResponse,
    summary="Obtener producto por ID",
    description="Producto con su categoría y sus ofertas válidas ordenadas por precio",
    responses=error_responses(404, 500),
)
def obtener_producto(
    producto_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID del producto"),
    db: Session = Depends(get_db),
):
    try:
        return product_service.get_product(db, producto_id)
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener el producto", id_producto=producto_id)
        raise InternalServerError("Error al obtener el producto") from exc


@router.get(
    "/{producto_id}/ofertas",
    response_model=ProductOffersResponse,
    summary="Ofertas de un producto",
    description="Ofertas del producto con descuento y estadísticas de precio de las válidas",
    responses=error_responses(404, 500),
)
def ofertas_del_producto(
    producto_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID del producto"),
    validas: Optional[str] = Query(None, description="true (por defecto), false o all"),
    ordenar: Optional[str] = Query(None, description="price_asc, price_desc, date_desc o seller_name_asc"),
    page: Optional[str] = Query(None, description="Página (desde 1)"),
    limit: Optional[str] = Query(None, description="Resultados por página (máximo 100)"),
    db: Session = Depends(get_db),
):
    try:
        return product_service.get_product_offers(
            db, producto_id, validas=validas, ordenar=ordenar, page=page, limit=limit
        )
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener las ofertas del producto", id_producto=producto_id)
        raise InternalServerError("Error al obtener las ofertas del producto") from exc


@router.post(
    "/",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear producto",
    responses=error_responses(400, 401, 403, 500),
)
def crear_producto(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return product_service.create_product(db, payload)
    except SQLAlchemyError as exc:
        logger.exception("Error al crear el producto")
        raise InternalServerError("Error al crear el producto") from exc


@router.put(
    "/{producto_id}",
    response_model=ProductResponse,
    summary="Actualizar producto",
    responses=error_responses(400, 401, 403, 404, 500),
)
def actualizar_producto(
    payload: ProductUpdate,
    producto_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID del producto"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return product_service.update_product(db, producto_id, payload)
    except SQLAlchemyError as exc:
        logger.exception("Error al actualizar el producto", id_producto=producto_id)
        raise InternalServerError("Error al actualizar el producto") from exc


@router.delete(
    "/{producto_id}",
    response_model=MessageResponse,
    summary="Eliminar producto",
    description="Falla mientras el producto tenga ofertas asociadas",
    responses=error_responses(400, 401, 403, 404, 500),
)
def eliminar_producto(
    producto_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID del producto"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return product_service.delete_product(db, producto_id)
    except SQLAlchemyError as exc:
        logger.exception("Error al eliminar el producto", id_producto=producto_id)
        raise InternalServerError("Error al eliminar el producto") from exc
