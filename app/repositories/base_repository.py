"""
Repositorio base para operaciones CRUD comunes
"""
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import structlog

from app.core.database import Base
from app.core.exceptions import ConstraintViolationError

logger = structlog.get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Repositorio base con operaciones CRUD comunes"""

    #: Mensaje usado cuando la base de datos rechaza una escritura
    integrity_message = "Violación de integridad de datos"

    def __init__(self, model: Type[ModelType]):
        """
        Repositorio CRUD con modelo por defecto.

        **Parámetros**
        * `model`: Clase del modelo SQLAlchemy
        """
        self.model = model

    def get(self, db: Session, id: int) -> Optional[ModelType]:
        """Obtener registro por ID"""
        return db.get(self.model, id)

    def get_multi(
        self,
        db: Session,
        *,
        skip: int = 0,
        limit: Optional[int] = None,
        order_by: Sequence[Any] = (),
    ) -> List[ModelType]:
        """Obtener múltiples registros con paginación"""
        return self.find(db, order_by=order_by or (self.model.id,), skip=skip, limit=limit)

    def find(
        self,
        db: Session,
        predicate: Any = None,
        *,
        options: Sequence[Any] = (),
        order_by: Sequence[Any] = (),
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """
        Consulta filtrada con relaciones precargadas, orden y ventana de resultados.
        """
        stmt = select(self.model)
        if predicate is not None:
            stmt = stmt.where(predicate)
        if options:
            stmt = stmt.options(*options)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(db.scalars(stmt).all())

    def count(self, db: Session, predicate: Any = None) -> int:
        """Contar registros que cumplen el predicado"""
        stmt = select(func.count()).select_from(self.model)
        if predicate is not None:
            stmt = stmt.where(predicate)
        return db.scalar(stmt) or 0

    def exists(self, db: Session, id: int) -> bool:
        """Verificar si existe un registro por ID"""
        return self.get(db, id) is not None

    def create(self, db: Session, *, obj_in: Dict[str, Any]) -> ModelType:
        """Crear nuevo registro"""
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        self._commit(db)
        db.refresh(db_obj)
        return db_obj

    def update(self, db: Session, *, db_obj: ModelType, obj_in: Dict[str, Any]) -> ModelType:
        """
        Actualizar registro existente.

        Solo se modifican los campos presentes en `obj_in`; un valor `None`
        presente limpia el campo.
        """
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        db.add(db_obj)
        self._commit(db)
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, *, db_obj: ModelType) -> ModelType:
        """Eliminar registro"""
        db.delete(db_obj)
        self._commit(db)
        return db_obj

    def _commit(self, db: Session) -> None:
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            logger.warning("Error de integridad", model=self.model.__name__, error=str(exc.orig))
            raise ConstraintViolationError(self.integrity_message) from exc
