"""Washline — MachineAssignment model."""
from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from washline.db.base import Base, TimestampMixin, utcnow


class AssignmentStatus(str, Enum):
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class MachineAssignment(TimestampMixin, Base):
    """A portion of a record's quantity handed to a worker on a washing/drying machine pair."""

    __tablename__ = "machine_assignments"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="quantity_positive"),
        CheckConstraint("return_quantity IS NULL OR return_quantity >= 0", name="return_quantity_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    record_id: Mapped[int] = mapped_column(Integer, ForeignKey("order_records.id", ondelete="CASCADE"), nullable=False, index=True)
    # Denormalized from the record for order-level lookups
    order_id: Mapped[int] = mapped_column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_by_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    return_quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    washing_machine: Mapped[str | None] = mapped_column(String(50), nullable=True)
    drying_machine: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=AssignmentStatus.IN_PROGRESS.value, index=True)
    tracking_number: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    record: Mapped["OrderRecord"] = relationship("OrderRecord", back_populates="assignments")
