from typing import Optional
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from cricket_cup.database import Base


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    short_name: Mapped[str] = mapped_column(String(10))  # e.g., "MT", "CK"

    # Branding
    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    def __repr__(self):
        return f"<Team {self.name} ({self.short_name})>"
