"""Link model: one authority's URL for one service-interaction and its health."""

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from locallinks.models.base import Base, TimestampMixin
from locallinks.models.enums import LinkStatus, enum_values


class Link(Base, TimestampMixin):
    """Link model recording a URL and the outcome of its most recent check."""

    __tablename__ = "links"
    __table_args__ = (
        UniqueConstraint(
            "authority_id",
            "service_interaction_id",
            name="uq_links_authority_service_interaction",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    authority_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("authorities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    service_interaction_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("service_interactions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True, index=True)
    status: Mapped[Optional[LinkStatus]] = mapped_column(
        Enum(LinkStatus, native_enum=False, length=20, values_callable=enum_values),
        nullable=True,
        index=True,
    )
    link_last_checked: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    analytics: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    link_errors: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    link_warnings: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    problem_summary: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    suggested_fix: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Relationships
    authority: Mapped["Authority"] = relationship("Authority", back_populates="links")
    service_interaction: Mapped["ServiceInteraction"] = relationship(
        "ServiceInteraction", back_populates="links"
    )

    # Read-only, derived through the service interaction
    @property
    def service(self) -> "Service":
        return self.service_interaction.service

    @property
    def interaction(self) -> "Interaction":
        return self.service_interaction.interaction

    def __repr__(self) -> str:
        return f"<Link(id={self.id!r}, url={self.url!r}, status={self.status!r})>"
