from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
from shareit.db.session import Base

GROUP_STATUSES = ("active", "closed")


class Group(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)
    status = Column(
        Enum(*GROUP_STATUSES, name="group_status"),
        nullable=False,
        default="active",
        server_default="active"
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_closed(self) -> bool:
        return self.status == "closed"
