"""
Schemas para usuarios y autenticación
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from app.schemas.common import Config


class UserCreate(BaseModel):
    """Registro de usuario"""
    nombre_completo: Optional[str] = Field(None, max_length=150)
    email: Optional[str] = Field(None, max_length=255)
    contrasena: Optional[str] = Field(None, description="Contraseña en texto plano")
    rol: Optional[str] = Field(None, description="USUARIO, ADMINISTRADOR o MODERADOR")

    class Config(Config):
        json_schema_extra = {
            "example": {
                "nombre_completo": "Ana Pérez",
                "email": "ana@example.com",
                "contrasena": "secreto123",
            }
        }


class UserLogin(BaseModel):
    email: Optional[str] = None
    contrasena: Optional[str] = None


class UserUpdate(BaseModel):
    """Actualización parcial de un usuario"""
    nombre_completo: Optional[str] = Field(None, max_length=150)
    email: Optional[str] = Field(None, max_length=255)
    contrasena: Optional[str] = None
    rol: Optional[str] = None


class RoleUpdate(BaseModel):
    rol: Optional[str] = None


class UserResponse(BaseModel):
    """Usuario sin credenciales"""
    id_usuario: int
    nombre_completo: str
    email: str
    rol: str
    fecha_registro: datetime


class LoginResponse(BaseModel):
    usuario: UserResponse
    token: str


class RoleUpdateResponse(BaseModel):
    mensaje: str
    usuario: UserResponse
