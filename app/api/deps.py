"""
Dependencias de autenticación y control de acceso por rol
"""
from typing import Callable, Iterable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
import structlog

from app.core.database import get_db
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.security import decode_access_token
from app.models.user import User, UserRole

logger = structlog.get_logger(__name__)

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Usuario autenticado a partir del token Bearer"""
    if credentials is None:
        raise UnauthorizedError("Token de autenticación requerido")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedError("Token inválido o expirado")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedError("Token inválido")

    user = db.get(User, user_id)
    if user is None:
        raise UnauthorizedError("Usuario no encontrado")

    structlog.contextvars.bind_contextvars(user_id=user.id)
    return user


def has_any_role(user: User, roles: Iterable[UserRole]) -> bool:
    return user.role in roles


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """
    Dependencia que exige que el usuario autenticado tenga alguno de los roles.

    **Uso**
    ```python
    @router.post("/", dependencies=[Depends(require_roles(UserRole.ADMINISTRADOR))])
    ```
    """
    allowed = frozenset(roles)

    def guard(user: User = Depends(get_current_user)) -> User:
        if not has_any_role(user, allowed):
            logger.warning("Acceso denegado", id_usuario=user.id, rol=user.role.value)
            raise ForbiddenError("Acceso denegado: permisos insuficientes")
        return user

    return guard


require_admin = require_roles(UserRole.ADMINISTRADOR)
require_moderation = require_roles(UserRole.ADMINISTRADOR, UserRole.MODERADOR)
