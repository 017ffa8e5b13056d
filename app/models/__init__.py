"""
Modelos de la aplicación
"""
from .category import Category
from .product import Product
from .supermarket import Supermarket
from .offer import Offer
from .report import OfferReport
from .favorite import Favorite
from .user import User, UserRole

# Exportar todos los modelos
__all__ = [
    "Category", "Product", "Supermarket", "Offer",
    "OfferReport", "Favorite", "User", "UserRole",
]
