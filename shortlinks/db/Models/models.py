from sqlalchemy import Column, String, Integer, DateTime, Text, Index, UniqueConstraint
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Link(Base):
    __tablename__ = "links"
    __table_args__ = (
        # The unique index is the serialization point for concurrent claims on a code
        UniqueConstraint("short_code", name="uq_links_short_code"),
        Index("ix_links_owner_id", "owner_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String, nullable=False)
    url = Column(Text, nullable=False)
    short_code = Column(String(20), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<Link id={self.id} short_code={self.short_code!r}>"
