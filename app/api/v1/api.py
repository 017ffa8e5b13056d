"""Router principal de la API v1"""
from fastapi import APIRouter

from app.api.v1.endpoints import categorias, ofertas, productos, supermercados, usuarios

api_router = APIRouter()

# Incluir routers de endpoints
api_router.include_router(
    ofertas.router,
    prefix="/ofertas",
    tags=["Ofertas"]
)

api_router.include_router(
    productos.router,
    prefix="/productos",
    tags=["Productos"]
)

api_router.include_router(
    categorias.router,
    prefix="/categorias",
    tags=["Categorías"]
)

api_router.include_router(
    supermercados.router,
    prefix="/supermercados",
    tags=["Supermercados"]
)

api_router.include_router(
    usuarios.router,
    prefix="/usuarios",
    tags=["Usuarios"]
)
