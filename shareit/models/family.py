from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func
from shareit.db.session import Base


class Family(Base):
    __tablename__ = "families"
    __table_args__ = (
        UniqueConstraint("group_id", "name", name="uq_family_group_name"),
        CheckConstraint("members >= 0 AND members <= 10", name="ck_family_members"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    members = Column(Integer, nullable=False)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
