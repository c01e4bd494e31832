"""Catalog models: services, their tiers, and interactions."""

from sqlalchemy import Boolean, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from locallinks.models.base import Base, TimestampMixin
from locallinks.models.enums import Tier, enum_values


class Service(Base, TimestampMixin):
    """A catalogued government service keyed by its LGSL code."""

    __tablename__ = "services"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lgsl_code: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    label: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    broken_link_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    service_tiers: Mapped[list["ServiceTier"]] = relationship(
        "ServiceTier", back_populates="service", cascade="all, delete-orphan"
    )
    service_interactions: Mapped[list["ServiceInteraction"]] = relationship(
        "ServiceInteraction", back_populates="service", passive_deletes="all"
    )

    @property
    def tiers(self) -> set[Tier]:
        return {service_tier.tier for service_tier in self.service_tiers}

    def __repr__(self) -> str:
        return f"<Service(id={self.id!r}, lgsl_code={self.lgsl_code!r}, slug={self.slug!r})>"


class ServiceTier(Base):
    """One authority tier that may offer a service."""

    __tablename__ = "service_tiers"
    __table_args__ = (UniqueConstraint("service_id", "tier", name="uq_service_tiers_service_tier"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    service_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tier: Mapped[Tier] = mapped_column(
        Enum(Tier, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
        index=True,
    )

    service: Mapped["Service"] = relationship("Service", back_populates="service_tiers")

    def __repr__(self) -> str:
        return f"<ServiceTier(service_id={self.service_id!r}, tier={self.tier!r})>"


class Interaction(Base, TimestampMixin):
    """A catalogued way of engaging with a service, keyed by its LGIL code."""

    __tablename__ = "interactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lgil_code: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    label: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    service_interactions: Mapped[list["ServiceInteraction"]] = relationship(
        "ServiceInteraction", back_populates="interaction", passive_deletes="all"
    )

    def __repr__(self) -> str:
        return f"<Interaction(id={self.id!r}, lgil_code={self.lgil_code!r}, slug={self.slug!r})>"
