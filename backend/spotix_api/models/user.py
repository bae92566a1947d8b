from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from spotix_api.models.base import Base

class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    username: Mapped[str | None] = mapped_column(String(128), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), index=True, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(32), nullable=True)

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or ""
