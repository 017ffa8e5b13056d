"""
Modelo de usuarios
"""
from datetime import datetime
import enum

from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship

from app.core.database import Base


class UserRole(str, enum.Enum):
    """Roles disponibles para los usuarios"""
    USUARIO = "USUARIO"
    ADMINISTRADOR = "ADMINISTRADOR"
    MODERADOR = "MODERADOR"


class User(Base):
    """Modelo de usuario"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(150), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.USUARIO)
    registered_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relaciones
    reports = relationship("OfferReport", back_populates="reporter")
    favorites = relationship("Favorite", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
