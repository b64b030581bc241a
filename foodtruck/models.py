"""
SQLAlchemy Database Models

Relational layout for the SQL order store: one row per order. The API
speaks camelCase wire keys; the table uses snake_case columns. The
translation between the two lives here and nowhere else.
"""

from typing import Any

from sqlalchemy import BigInteger, Column, DateTime, JSON, Text

from foodtruck.core.clock import from_iso, to_iso
from foodtruck.database import Base


# Wire key -> model attribute
WIRE_TO_COLUMN = {
    "items": "items",
    "total": "total",
    "type": "order_type",
    "customerName": "customer_name",
    "customerPhone": "customer_phone",
    "timestamp": "display_timestamp",
    "date": "display_date",
    "status": "status",
}

TIMESTAMP_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


class OrderRecord(Base):
    """
    Orders table.

    Keys the pages send that have no column of their own are kept in
    ``extra`` and merged back into the order on the way out.
    """
    __tablename__ = "orders"

    # Millisecond clock values overflow a 32-bit integer
    id = Column(BigInteger, primary_key=True, autoincrement=False)

    # =========================================================================
    # ORDER DETAILS
    # =========================================================================
    items = Column(JSON, nullable=False, default=list)
    total = Column(JSON, nullable=True)
    order_type = Column(Text, nullable=True)

    # =========================================================================
    # CUSTOMER INFORMATION
    # =========================================================================
    customer_name = Column(Text, nullable=True)
    customer_phone = Column(Text, nullable=True)

    # =========================================================================
    # DISPLAY STAMPS (as shown on the customer page)
    # =========================================================================
    display_timestamp = Column(Text, nullable=True)
    display_date = Column(Text, nullable=True)

    # =========================================================================
    # ORDER STATUS
    # =========================================================================
    status = Column(Text, nullable=False, default="pending", index=True)

    # =========================================================================
    # TIMESTAMPS
    # =========================================================================
    created_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    # =========================================================================
    # PASS-THROUGH FIELDS
    # =========================================================================
    extra = Column(JSON, nullable=True)

    @classmethod
    def from_wire(cls, order: dict[str, Any]) -> "OrderRecord":
        """Build a row from a wire-form order."""
        record = cls(id=order["id"], items=[], extra={})
        record.apply_wire(order)
        return record

    def apply_wire(self, fields: dict[str, Any]) -> None:
        """Shallow-merge wire-form fields into the row. id never changes."""
        extra = dict(self.extra or {})

        for key, value in fields.items():
            if key == "id":
                continue
            if key in WIRE_TO_COLUMN:
                setattr(self, WIRE_TO_COLUMN[key], value)
            elif key in TIMESTAMP_FIELDS:
                setattr(self, TIMESTAMP_FIELDS[key], from_iso(value) if value else None)
            else:
                extra[key] = value

        # Reassign so the JSON column is flagged dirty
        self.extra = extra

    def to_wire(self) -> dict[str, Any]:
        """Render the row as the API returns it."""
        order: dict[str, Any] = {"id": self.id}

        for key, attribute in WIRE_TO_COLUMN.items():
            value = getattr(self, attribute)
            if value is not None:
                order[key] = value

        for key, attribute in TIMESTAMP_FIELDS.items():
            value = getattr(self, attribute)
            if value is not None:
                order[key] = to_iso(value)

        for key, value in (self.extra or {}).items():
            order.setdefault(key, value)

        return order

    def __repr__(self):
        return f"<OrderRecord #{self.id} - {self.customer_name} - {self.status}>"
