from sqlalchemy import String, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column

from spotix_api.models.base import Base

class Referral(Base):
    __tablename__ = "event_referrals"

    event_creator_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    event_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    code: Mapped[str] = mapped_column(String(128), primary_key=True)
    usages: Mapped[list] = mapped_column(JSON, default=list)
    total_tickets: Mapped[int] = mapped_column(Integer, default=0)
