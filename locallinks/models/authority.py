"""Authority model for local government bodies."""

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from locallinks.models.base import Base, TimestampMixin
from locallinks.models.enums import LinkStatus, Tier, enum_values


class Authority(Base, TimestampMixin):
    """A local authority whose service pages are tracked.

    The authority carries the health of its own homepage in the same shape
    as a Link, so that links pointing at the homepage can reuse it.
    """

    __tablename__ = "authorities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    gss: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    snac: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    homepage_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True, index=True)
    tier: Mapped[Tier] = mapped_column(
        Enum(Tier, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
    )
    # County parent of a district authority
    parent_authority_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("authorities.id", ondelete="SET NULL"), nullable=True, index=True
    )
    status: Mapped[Optional[LinkStatus]] = mapped_column(
        Enum(LinkStatus, native_enum=False, length=20, values_callable=enum_values),
        nullable=True,
    )
    link_last_checked: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    link_errors: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    link_warnings: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    problem_summary: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    suggested_fix: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    broken_link_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    parent: Mapped[Optional["Authority"]] = relationship("Authority", remote_side="Authority.id")
    links: Mapped[list["Link"]] = relationship(
        "Link", back_populates="authority", passive_deletes="all"
    )

    def __repr__(self) -> str:
        return f"<Authority(id={self.id!r}, slug={self.slug!r})>"
