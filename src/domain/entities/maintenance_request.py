"""
MaintenanceRequest Entity

Aggregate root for a maintenance request raised against a property.
The update log is embedded in the same row, so the request and its
history are always written and deleted together.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Enum as SAEnum
from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import format_timestamp, utc_now

from .enums import MaintenanceStatus


def generate_request_id(property_id: str, tenant_id: str, created_at: datetime) -> str:
    """
    Derive a request ID from property, tenant and creation instant.

    The timestamp is rendered as YYYYMMDDHHMMSSffffff with every separator
    stripped. Microseconds are kept so two requests for the same
    property/tenant pair inside one second get different IDs.
    """
    return f"{property_id}{tenant_id}{created_at.strftime('%Y%m%d%H%M%S%f')}"


class MaintenanceUpdate(SQLModel):
    """
    MaintenanceUpdate - one entry of the embedded update log.

    Has no identity of its own; it only exists inside its parent's
    `updates` array.
    """

    updated_by: str
    description: str
    timestamp: datetime = Field(default_factory=utc_now)

    def to_document(self) -> dict:
        return {
            "updated_by": self.updated_by,
            "description": self.description,
            "timestamp": format_timestamp(self.timestamp),
        }

    @classmethod
    def from_document(cls, data: dict) -> "MaintenanceUpdate":
        return cls(
            updated_by=data["updated_by"],
            description=data["description"],
            timestamp=datetime.fromisoformat(data["timestamp"].rstrip("Z")),
        )


class MaintenanceRequest(SQLModel, table=True):
    """
    MaintenanceRequest entity - aggregate root.

    Business Rules:
    - request_id, property_id, tenant_id, description and created_at never change
    - updates is append-only, in insertion order
    - status is freely settable at the storage level
    - assigned_to is optional and can be overwritten
    - version increments on every write (optimistic concurrency token)
    """

    __tablename__ = "maintenance_requests"

    request_id: str = Field(primary_key=True, max_length=255)

    property_id: str = Field(max_length=255, index=True)
    tenant_id: str = Field(max_length=255)
    description: str

    status: MaintenanceStatus = Field(
        default=MaintenanceStatus.open,
        sa_column=Column(
            SAEnum(
                MaintenanceStatus,
                name="maintenance_status",
                values_callable=lambda enum: [member.value for member in enum],
            ),
            nullable=False,
        ),
    )
    assigned_to: Optional[str] = Field(default=None, max_length=255)

    # Embedded update log
    updates: List[dict] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )

    version: int = Field(default=1, nullable=False)

    # Timestamps
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )

    __table_args__ = (
        Index("idx_maintenance_property_status", "property_id", "status"),
    )

    def update_entries(self) -> List[MaintenanceUpdate]:
        """Embedded log as MaintenanceUpdate values, oldest first"""
        return [MaintenanceUpdate.from_document(entry) for entry in self.updates or []]
