"""
Configuración de base de datos para el comparador de ofertas
"""
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
import structlog

from app.core.config import settings

logger = structlog.get_logger(__name__)


def _engine_kwargs(url: str) -> dict:
    """Opciones del engine según el motor de base de datos"""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_size": 10,
        "max_overflow": 20,
        "connect_args": {
            "client_encoding": "utf8",
            "application_name": "ComparadorOfertas",
        },
    }


# Configuración del engine de base de datos
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **_engine_kwargs(settings.DATABASE_URL),
)

# Configuración de sesiones
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base para modelos
Base = declarative_base()

# Mayor identificador que admite una columna Integer
MAX_DB_ID = 2 ** 31 - 1


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite no valida llaves foráneas a menos que se active explícitamente"""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    """
    Dependency para obtener sesión de base de datos (FastAPI)
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        logger.exception("Error en sesión de base de datos")
        db.rollback()
        raise
    finally:
        db.close()


def create_database(bind=None):
    """
    Crear todas las tablas en la base de datos
    """
    # Importar todos los modelos para asegurar que estén registrados
    from app import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("Tablas de base de datos creadas exitosamente")
    except Exception:
        logger.exception("Error creando tablas")
        raise


def check_database_connection():
    """
    Verificar conexión a la base de datos
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("Error conectando a base de datos")
        return False
