"""
Modelo de ofertas
"""
from datetime import datetime

from sqlalchemy import (
    Column, Integer, DECIMAL, Date, DateTime, Boolean, Text, String, ForeignKey, CheckConstraint
)
from sqlalchemy.orm import relationship

from app.core.database import Base


class Offer(Base):
    """Cotización de precio acotada en el tiempo de un producto en un supermercado"""

    __tablename__ = "offers"
    __table_args__ = (
        CheckConstraint("offer_price >= 0", name="ck_offers_offer_price_positive"),
        CheckConstraint(
            "original_price IS NULL OR original_price >= 0",
            name="ck_offers_original_price_positive",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    supermarket_id = Column(Integer, ForeignKey("supermarkets.id"), nullable=False, index=True)

    # Precios
    original_price = Column(DECIMAL(10, 2))
    offer_price = Column(DECIMAL(10, 2), nullable=False, index=True)

    # Vigencia
    start_date = Column(Date)
    end_date = Column(Date)

    description = Column(Text)
    source_url = Column(String(500), nullable=False)

    # Metadatos
    extracted_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    valid = Column(Boolean, default=True, nullable=False, index=True)

    # Relaciones
    product = relationship("Product", back_populates="offers")
    supermarket = relationship("Supermarket", back_populates="offers")
    reports = relationship("OfferReport", back_populates="offer")
    favorites = relationship("Favorite", back_populates="offer", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Offer(id={self.id}, product_id={self.product_id}, price={self.offer_price})>"
