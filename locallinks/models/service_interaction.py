"""ServiceInteraction model joining a service to an interaction."""

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from locallinks.models.base import Base, TimestampMixin


class ServiceInteraction(Base, TimestampMixin):
    """The (service, interaction) pairing an authority may publish a page for."""

    __tablename__ = "service_interactions"
    __table_args__ = (
        UniqueConstraint(
            "service_id", "interaction_id", name="uq_service_interactions_service_interaction"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    service_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("services.id"), nullable=False, index=True
    )
    interaction_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("interactions.id"), nullable=False, index=True
    )
    govuk_slug: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    govuk_title: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    live: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    # Relationships
    service: Mapped["Service"] = relationship("Service", back_populates="service_interactions")
    interaction: Mapped["Interaction"] = relationship(
        "Interaction", back_populates="service_interactions"
    )
    links: Mapped[list["Link"]] = relationship(
        "Link", back_populates="service_interaction", passive_deletes="all"
    )

    @property
    def lgsl_code(self) -> int:
        return self.service.lgsl_code

    @property
    def lgil_code(self) -> int:
        return self.interaction.lgil_code

    def __repr__(self) -> str:
        return (
            f"<ServiceInteraction(id={self.id!r}, service_id={self.service_id!r}, "
            f"interaction_id={self.interaction_id!r})>"
        )
