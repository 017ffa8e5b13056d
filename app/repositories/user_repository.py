"""
Repositorio de usuarios
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.user import User, UserRole
from app.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repositorio de usuarios"""

    integrity_message = "Email ya registrado"

    def __init__(self):
        super().__init__(User)

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        users = self.find(db, User.email == email)
        return users[0] if users else None

    def get_by_role(self, db: Session, role: UserRole) -> List[User]:
        return self.find(db, User.role == role, order_by=(User.id.asc(),))


# Instancia global del repositorio
user_repository = UserRepository()
