from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.entities import MaintenanceRequest, MaintenanceStatus, MaintenanceUpdate


class ConcurrentModificationError(Exception):
    """Raised when a conditional write keeps losing to concurrent writers"""

    def __init__(self, request_id: str, message: str = "Maintenance request was modified concurrently"):
        self.request_id = request_id
        super().__init__(message)


class IMaintenanceRequestRepository(ABC):
    """MaintenanceRequest repository interface - application layer"""

    @abstractmethod
    async def get_by_request_id(self, request_id: str) -> Optional[MaintenanceRequest]:
        """Get maintenance request by its request ID"""
        pass

    @abstractmethod
    async def create(self, request: MaintenanceRequest) -> MaintenanceRequest:
        """Insert a new maintenance request"""
        pass

    @abstractmethod
    async def append_update(
        self, request_id: str, maintenance_update: MaintenanceUpdate
    ) -> Optional[MaintenanceRequest]:
        """
        Append an entry to the embedded update log.

        Returns None when the request does not exist. Raises
        ConcurrentModificationError when the bounded retries are exhausted.
        """
        pass

    @abstractmethod
    async def assign_contractor(
        self, request_id: str, contractor_id: str
    ) -> Optional[MaintenanceRequest]:
        """Set assigned_to; returns None when the request does not exist"""
        pass

    @abstractmethod
    async def change_status(
        self,
        request_id: str,
        status: MaintenanceStatus,
        expected_status: MaintenanceStatus,
    ) -> Optional[MaintenanceRequest]:
        """
        Set status only if it still equals expected_status.

        Returns None when the request does not exist. Raises
        ConcurrentModificationError when the status changed underneath.
        """
        pass

    @abstractmethod
    async def list_by_property(
        self, property_id: str, active_only: bool = False
    ) -> List[MaintenanceRequest]:
        """List requests for a property, optionally only Open/In Progress"""
        pass

    @abstractmethod
    async def delete(self, request_id: str) -> bool:
        """Hard delete a request with its update log; False if nothing matched"""
        pass
