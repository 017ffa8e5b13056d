"""
Modelo de productos
"""
from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from app.core.database import Base


class Product(Base):
    """Modelo de producto"""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    brand = Column(String(100), index=True)
    description = Column(Text)
    image_url = Column(String(500))
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)

    # Relaciones
    category = relationship("Category", back_populates="products")
    offers = relationship("Offer", back_populates="product")

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', brand='{self.brand}')>"

    @property
    def full_name(self):
        """Nombre completo del producto incluyendo marca"""
        if self.brand:
            return f"{self.brand} {self.name}"
        return self.name
