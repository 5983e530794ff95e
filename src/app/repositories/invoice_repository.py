"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import date
from src.domain.invoice import Invoice


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Provides access to invoice data for billing operations.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(self, tenant_id: str, invoice_id: int, for_update: bool = False) -> Optional[Invoice]:
        """
        Retrieve invoice by ID within a tenant

        Args:
            tenant_id: Tenant identifier
            invoice_id: Invoice ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_for_client_month(
        self,
        tenant_id: str,
        client_id: int,
        billing_month: date,
        for_update: bool = False,
    ) -> Optional[Invoice]:
        """
        Retrieve the invoice of a client for a billing month

        Args:
            tenant_id: Tenant identifier
            client_id: Client ID
            billing_month: First day of the billing month
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_for_month(self, tenant_id: str, billing_month: date) -> List[Invoice]:
        """
        Retrieve all invoices of a tenant for a billing month

        Returns:
            List of invoices ordered by client_id
        """
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        pass

    @abstractmethod
    async def delete(self, invoice: Invoice) -> None:
        """
        Delete an invoice together with its lines

        Args:
            invoice: Invoice entity to delete
        """
        pass

    @abstractmethod
    async def acquire_generation_lock(self, tenant_id: str, client_id: int, billing_month: date) -> bool:
        """
        Take the transaction-scoped generation lock for one invoice

        Used to serialize concurrent regeneration of the same
        (tenant, client, month).

        Returns:
            True if the lock was acquired, False if another transaction holds it
        """
        pass
