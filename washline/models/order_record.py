"""Washline — OrderRecord model and the wash/process type vocabularies."""
from enum import Enum

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from washline.db.base import Base, TimestampMixin


class RecordStatus(str, Enum):
    PENDING = "Pending"
    COMPLETE = "Complete"


class WashType(str, Enum):
    """Washing treatments. Values are the shop-floor codes printed on job tickets."""

    NORMAL = "N/W"
    HEAVY = "Hy/W"
    SILICON = "Sil/W"
    HEAVY_SILICON = "Hy/Sil/W"
    ENZYME = "En/W"
    HEAVY_ENZYME = "Hy/En/W"
    DARK = "Dk/W"
    MID = "Mid/W"
    LIGHT = "Lit/W"
    SKY = "Sky/W"
    ACID = "Acid/W"
    TINT = "Tint/W"
    CHEMICAL = "Chem/W"


class ProcessType(str, Enum):
    """Finishing techniques applied after washing."""

    REESE = "Reese"
    SAND_BLAST = "S/B"
    VISCOSE = "V"
    CHEVRON = "Chev"
    HAND_SAND = "H/S"
    RIB = "Rib"
    TOOL = "Tool"
    GRIND = "Grnd"


WASH_TYPE_LABELS = {
    WashType.NORMAL: "Normal wash",
    WashType.HEAVY: "Heavy wash",
    WashType.SILICON: "Silicon wash",
    WashType.HEAVY_SILICON: "Heavy silicon wash",
    WashType.ENZYME: "Enzyme wash",
    WashType.HEAVY_ENZYME: "Heavy enzyme wash",
    WashType.DARK: "Dark wash",
    WashType.MID: "Mid wash",
    WashType.LIGHT: "Light wash",
    WashType.SKY: "Sky wash",
    WashType.ACID: "Acid wash",
    WashType.TINT: "Tint wash",
    WashType.CHEMICAL: "Chemical wash",
}

PROCESS_TYPE_LABELS = {
    ProcessType.REESE: "Reese",
    ProcessType.SAND_BLAST: "Sand blast",
    ProcessType.VISCOSE: "Viscose",
    ProcessType.CHEVRON: "Chevron",
    ProcessType.HAND_SAND: "Hand sand",
    ProcessType.RIB: "Rib",
    ProcessType.TOOL: "Tool",
    ProcessType.GRIND: "Grind",
}


class OrderRecord(TimestampMixin, Base):
    """Sub-batch of an order's quantity: one wash type plus a set of process types."""

    __tablename__ = "order_records"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="quantity_positive"),
        CheckConstraint("damage_count >= 0", name="damage_count_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    wash_type: Mapped[str] = mapped_column(String(50), nullable=False)
    process_types: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    tracking_number: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=RecordStatus.PENDING.value)
    damage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    order: Mapped["Order"] = relationship("Order", back_populates="records")
    assignments: Mapped[list["MachineAssignment"]] = relationship(
        "MachineAssignment",
        back_populates="record",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MachineAssignment.id",
    )
