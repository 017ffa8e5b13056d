"""
Modelo de supermercados
"""
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from app.core.database import Base


class Supermarket(Base):
    """Modelo de supermercado (origen de las ofertas)"""

    __tablename__ = "supermarkets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    address = Column(String(255))
    website_url = Column(String(255))

    # Relaciones
    offers = relationship("Offer", back_populates="supermarket")

    def __repr__(self):
        return f"<Supermarket(id={self.id}, name='{self.name}')>"
