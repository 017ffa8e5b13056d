"""
Modelo de reportes de ofertas
"""
from datetime import datetime

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.core.database import Base


class OfferReport(Base):
    """Reporte de un usuario sobre una oferta (solo inserción)"""

    __tablename__ = "offer_reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reason = Column(Text, nullable=False)
    offer_id = Column(Integer, ForeignKey("offers.id"), nullable=False, index=True)
    reporter_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relaciones
    offer = relationship("Offer", back_populates="reports")
    reporter = relationship("User", back_populates="reports")

    def __repr__(self):
        return f"<OfferReport(id={self.id}, offer_id={self.offer_id})>"
