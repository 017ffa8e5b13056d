"""
Endpoints de usuarios y autenticación
"""
from typing import List
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import structlog

from app.api.deps import get_current_user, require_admin
from app.core.database import MAX_DB_ID, get_db
from app.core.exceptions import InternalServerError
from app.models.user import User
from app.schemas.common import MessageResponse, error_responses
from app.schemas.user import (
    LoginResponse,
    RoleUpdate,
    RoleUpdateResponse,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)
from app.services.user_service import user_service

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar usuario",
    responses=error_responses(400, 500),
)
def registrar_usuario(payload: UserCreate, db: Session = Depends(get_db)):
    try:
        return user_service.register(db, payload)
    except SQLAlchemyError as exc:
        logger.exception("Error al crear el usuario")
        raise InternalServerError("Error al crear el usuario") from exc


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Iniciar sesión",
    description="Valida las credenciales y entrega un token JWT Bearer",
    responses=error_responses(400, 401, 500),
)
def login(payload: UserLogin, db: Session = Depends(get_db)):
    try:
        return user_service.login(db, payload)
    except SQLAlchemyError as exc:
        logger.exception("Error en el proceso de login")
        raise InternalServerError("Error en el proceso de login") from exc


@router.get(
    "/perfil",
    response_model=UserResponse,
    summary="Perfil del usuario autenticado",
    responses=error_responses(401),
)
def perfil(user: User = Depends(get_current_user)):
    return user_service.get_profile(user)


@router.get(
    "/",
    response_model=List[UserResponse],
    summary="Listar usuarios",
    responses=error_responses(401, 403, 500),
)
def listar_usuarios(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return user_service.list_users(db)
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener usuarios")
        raise InternalServerError("Error al obtener usuarios") from exc


@router.get(
    "/rol/{rol}",
    response_model=List[UserResponse],
    summary="Listar usuarios por rol",
    responses=error_responses(400, 401, 403, 500),
)
def usuarios_por_rol(
    rol: str = Path(..., description="USUARIO, ADMINISTRADOR o MODERADOR"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return user_service.list_by_role(db, rol)
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener usuarios por rol", rol=rol)
        raise InternalServerError("Error al obtener usuarios por rol") from exc


@router.get(
    "/{usuario_id}",
    response_model=UserResponse,
    summary="Obtener usuario por ID",
    responses=error_responses(401, 403, 404, 500),
)
def obtener_usuario(
    usuario_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID del usuario"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return user_service.get_user(db, usuario_id)
    except SQLAlchemyError as exc:
        logger.exception("Error al obtener el usuario", id_usuario=usuario_id)
        raise InternalServerError("Error al obtener el usuario") from exc


@router.put(
    "/{usuario_id}",
    response_model=UserResponse,
    summary="Actualizar usuario",
    responses=error_responses(400, 401, 403, 404, 500),
)
def actualizar_usuario(
    payload: UserUpdate,
    usuario_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID del usuario"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return user_service.update_user(db, usuario_id, payload)
    except SQLAlchemyError as exc:
        logger.exception("Error al actualizar el usuario", id_usuario=usuario_id)
        raise InternalServerError("Error al actualizar el usuario") from exc


@router.delete(
    "/{usuario_id}",
    response_model=MessageResponse,
    summary="Eliminar usuario",
    responses=error_responses(400, 401, 403, 404, 500),
)
def eliminar_usuario(
    usuario_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID del usuario"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return user_service.delete_user(db, usuario_id)
    except SQLAlchemyError as exc:
        logger.exception("Error al eliminar el usuario", id_usuario=usuario_id)
        raise InternalServerError("Error al eliminar el usuario") from exc


@router.patch(
    "/{usuario_id}/rol",
    response_model=RoleUpdateResponse,
    summary="Cambiar rol de usuario",
    responses=error_responses(400, 401, 403, 404, 500),
)
def cambiar_rol(
    payload: RoleUpdate,
    usuario_id: int = Path(..., ge=1, le=MAX_DB_ID, description="ID del usuario"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return user_service.change_role(db, usuario_id, payload.rol)
    except SQLAlchemyError as exc:
        logger.exception("Error al actualizar el rol", id_usuario=usuario_id)
        raise InternalServerError("Error al actualizar el rol del usuario") from exc
