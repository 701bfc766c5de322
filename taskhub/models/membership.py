import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskhub.models.base import Base, now_utc
from taskhub.models.enums import MemberRole, enum_values
from taskhub.models.user import User

class ProjectMember(Base):
    __tablename__ = "project_members"

    # composite pk doubles as the (user, project) lookup index
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    role: Mapped[MemberRole] = mapped_column(
        Enum(MemberRole, name="member_role", values_callable=enum_values),
        nullable=False,
        default=MemberRole.contributor,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=now_utc, server_default=func.now(), nullable=False
    )

    user: Mapped[User] = relationship(lazy="joined")
    project: Mapped["Project"] = relationship(back_populates="members")
