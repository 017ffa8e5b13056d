"""
Configuración principal de la API del comparador de ofertas
"""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # Database
    DATABASE_URL: str
    DB_CREATE_TABLES: bool = True

    # JWT
    JWT_SECRET_KEY: str = "cambiar-en-produccion"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Comparador de Ofertas API"
    PROJECT_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Paginación
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "*"
    ALLOWED_HOSTS: list[str] = ["*"]

    # Métricas Prometheus
    ENABLE_METRICS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings():
    """Obtener configuración singleton"""
    return Settings()


# Instancia global de configuración
settings = get_settings()
