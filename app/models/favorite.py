"""
Modelo de ofertas favoritas
"""
from datetime import datetime

from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.database import Base


class Favorite(Base):
    """Oferta marcada como favorita por un usuario"""

    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "offer_id", name="uq_favorites_user_offer"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    offer_id = Column(Integer, ForeignKey("offers.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relaciones
    user = relationship("User", back_populates="favorites")
    offer = relationship("Offer", back_populates="favorites")
