"""
Pydantic Schemas for Request/Response Validation

Orders travel over the wire with camelCase keys (customerName, createdAt)
because that is what the customer and kitchen pages send and read. The
schemas use snake_case attributes with a camelCase alias generator so the
Python side stays idiomatic.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS
# =============================================================================

class OrderStatus(str, Enum):
    """Statuses the kitchen board moves an order through."""
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderType(str, Enum):
    EAT = "eat"
    TOGO = "togo"


KNOWN_STATUSES = frozenset(s.value for s in OrderStatus)


class WireModel(BaseModel):
    """Base for models exchanged with the pages in camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class OrderCreate(WireModel):
    """
    Request schema for placing an order.

    Every field is optional and falls back to the defaults below. Line
    items and the total are taken as sent; unknown keys are kept and
    stored with the order.
    """
    model_config = ConfigDict(extra="allow")

    items: List[Any] = Field(default_factory=list, examples=[[{"name": "Taco", "qty": 2}]])
    total: Any = Field(default=0, examples=[8.5])
    type: str = Field(default=OrderType.EAT.value, examples=["eat", "togo"])
    customer_name: Optional[str] = Field(default="", examples=["Ana"])
    customer_phone: Optional[str] = Field(default="", examples=["555-0142"])
    timestamp: Optional[str] = Field(default=None, examples=["12:41 PM"])
    date: Optional[str] = Field(default=None, examples=["10/18/2026"])

    def to_fields(self) -> dict[str, Any]:
        """Client fields in wire form, defaults filled in."""
        return self.model_dump(by_alias=True, exclude_none=True)


class OrderUpdate(WireModel):
    """
    Request schema for updating an order.

    Only the fields listed here can change. id, createdAt and any other
    key in the request body are dropped.
    """
    model_config = ConfigDict(extra="ignore")

    status: Optional[str] = Field(default=None, min_length=1, examples=["ready"])
    items: Optional[List[Any]] = None
    total: Any = None
    type: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    timestamp: Optional[str] = None
    date: Optional[str] = None

    def to_changes(self) -> dict[str, Any]:
        """Fields the client actually sent, in wire form."""
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class OrderResponse(WireModel):
    """
    Response schema for a single order.

    Orders written by older deployments may lack some fields, so only id
    is required. Pass-through keys are returned as stored.
    """
    model_config = ConfigDict(extra="allow")

    id: int
    items: List[Any] = Field(default_factory=list)
    total: Any = None
    type: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    timestamp: Optional[str] = None
    date: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class MessageResponse(BaseModel):
    """Confirmation body for delete operations."""
    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    message: Optional[str] = None
    path: Optional[str] = None
    method: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str
    storage: str
    configured: bool
    reachable: bool
    environment: str
