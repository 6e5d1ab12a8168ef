"""SQLAlchemy ORM models for the record store."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Date, DateTime, Enum, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from palletflow.enterprise.core import PackageStatus

from .database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WarehouseRecord(Base):
    __tablename__ = "warehouses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255))


class ClientRecord(Base):
    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255))


class PalletRecord(Base):
    __tablename__ = "pallets"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    label: Mapped[Optional[str]] = mapped_column(String(255))
    storage_location: Mapped[Optional[str]] = mapped_column(String(255))
    stowed_ts: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    staged_ts: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    picked_ts: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    warehouse_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("warehouses.id", ondelete="CASCADE"), nullable=False
    )

    packages: Mapped[list["PackageRecord"]] = relationship(back_populates="pallet")


class PackageRecord(Base):
    __tablename__ = "packages"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    weight_lbs: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[PackageStatus] = mapped_column(
        Enum(PackageStatus, name="package_status"), nullable=False, default=PackageStatus.PENDING
    )
    service_date: Mapped[Optional[date]] = mapped_column(Date)
    received_ts: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
    warehouse_id: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("warehouses.id", ondelete="CASCADE"), nullable=True
    )
    client_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    pallet_id: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("pallets.id", ondelete="CASCADE"), nullable=True, index=True
    )

    pallet: Mapped[Optional[PalletRecord]] = relationship(back_populates="packages")
