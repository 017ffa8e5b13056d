"""
Servicio de usuarios: registro, autenticación y administración.

Ninguna operación devuelve el hash de la contraseña.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
import structlog

from app.core.exceptions import (
    ConstraintViolationError,
    NotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from app.core.security import create_access_token, get_password_hash, verify_password
from app.models.report import OfferReport
from app.models.user import User, UserRole
from app.repositories.offer_repository import offer_report_repository
from app.repositories.user_repository import user_repository
from app.schemas.user import UserCreate, UserLogin, UserUpdate
from app.services.serializers import user_to_dict

logger = structlog.get_logger(__name__)


def parse_role(value: Any) -> Optional[UserRole]:
    """Rol desde texto (sin distinguir mayúsculas); `None` si no es válido"""
    if isinstance(value, UserRole):
        return value
    if not isinstance(value, str):
        return None
    try:
        return UserRole(value.strip().upper())
    except ValueError:
        return None


class UserService:
    """Servicio de usuarios"""

    def __init__(self):
        self.user_repo = user_repository
        self.report_repo = offer_report_repository

    def _get_or_404(self, db: Session, user_id: int) -> User:
        user = self.user_repo.get(db, user_id)
        if user is None:
            raise NotFoundError("Usuario no encontrado")
        return user

    def register(self, db: Session, payload: UserCreate) -> Dict[str, Any]:
        name = (payload.nombre_completo or "").strip()
        email = (payload.email or "").strip().lower()
        if not name or not email or not payload.contrasena:
            raise ValidationFailedError("Nombre completo, email y contraseña son obligatorios")

        role = UserRole.USUARIO
        if payload.rol is not None:
            role = parse_role(payload.rol)
            if role is None:
                raise ValidationFailedError("Rol no válido")

        if self.user_repo.get_by_email(db, email) is not None:
            raise ConstraintViolationError("Email ya registrado")

        user = self.user_repo.create(
            db,
            obj_in={
                "full_name": name,
                "email": email,
                "password_hash": get_password_hash(payload.contrasena),
                "role": role,
            },
        )
        logger.info("Usuario registrado", id_usuario=user.id, rol=role.value)
        return user_to_dict(user)

    def login(self, db: Session, payload: UserLogin) -> Dict[str, Any]:
        """Validar credenciales y emitir un token JWT de acceso"""
        email = (payload.email or "").strip().lower()
        if not email or not payload.contrasena:
            raise ValidationFailedError("Email y contraseña son requeridos")

        user = self.user_repo.get_by_email(db, email)
        if user is None or not verify_password(payload.contrasena, user.password_hash):
            logger.warning("Intento de login fallido", email=email)
            raise UnauthorizedError("Credenciales inválidas")

        token = create_access_token(user.id, role=user.role.value)
        logger.info("Login exitoso", id_usuario=user.id)
        return {"usuario": user_to_dict(user), "token": token}

    def get_profile(self, user: User) -> Dict[str, Any]:
        return user_to_dict(user)

    def list_users(self, db: Session) -> List[Dict[str, Any]]:
        return [user_to_dict(u) for u in self.user_repo.get_multi(db)]

    def list_by_role(self, db: Session, rol: Any) -> List[Dict[str, Any]]:
        role = parse_role(rol)
        if role is None:
            raise ValidationFailedError("Rol no válido")
        return [user_to_dict(u) for u in self.user_repo.get_by_role(db, role)]

    def get_user(self, db: Session, user_id: int) -> Dict[str, Any]:
        return user_to_dict(self._get_or_404(db, user_id))

    def update_user(self, db: Session, user_id: int, payload: UserUpdate) -> Dict[str, Any]:
        """Actualización parcial; los valores vacíos se ignoran"""
        user = self._get_or_404(db, user_id)
        changes: Dict[str, Any] = {}

        if payload.nombre_completo and payload.nombre_completo.strip():
            changes["full_name"] = payload.nombre_completo.strip()

        if payload.email and payload.email.strip():
            email = payload.email.strip().lower()
            existing = self.user_repo.get_by_email(db, email)
            if existing is not None and existing.id != user_id:
                raise ConstraintViolationError("Email ya registrado")
            changes["email"] = email

        if payload.rol:
            role = parse_role(payload.rol)
            if role is None:
                raise ValidationFailedError("Rol no válido")
            changes["role"] = role

        if payload.contrasena:
            changes["password_hash"] = get_password_hash(payload.contrasena)

        user = self.user_repo.update(db, db_obj=user, obj_in=changes)
        logger.info("Usuario actualizado", id_usuario=user_id, campos=sorted(changes))
        return user_to_dict(user)

    def change_role(self, db: Session, user_id: int, rol: Any) -> Dict[str, Any]:
        role = parse_role(rol)
        if role is None:
            raise ValidationFailedError("Rol no válido. Debe ser USUARIO, ADMINISTRADOR o MODERADOR")

        user = self._get_or_404(db, user_id)
        user = self.user_repo.update(db, db_obj=user, obj_in={"role": role})
        logger.info("Rol actualizado", id_usuario=user_id, rol=role.value)
        return {"mensaje": "Rol actualizado correctamente", "usuario": user_to_dict(user)}

    def delete_user(self, db: Session, user_id: int) -> Dict[str, str]:
        user = self._get_or_404(db, user_id)

        reports = self.report_repo.count(db, OfferReport.reporter_id == user_id)
        if reports:
            raise ConstraintViolationError(
                "No se puede eliminar el usuario porque tiene reportes asociados",
                details={"reportes": reports},
            )

        self.user_repo.remove(db, db_obj=user)
        logger.info("Usuario eliminado", id_usuario=user_id)
        return {"mensaje": "Usuario eliminado correctamente"}


# Instancia global del servicio
user_service = UserService()
