"""Invoice Line Repository Interface

Defines the contract for invoice line persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Set, Tuple
from src.domain.invoice_line import InvoiceLine


class InvoiceLineRepository(ABC):
    """
    Repository interface for InvoiceLine persistence

    Provides access to invoice line items for billing operations.
    """

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: int) -> List[InvoiceLine]:
        """
        Retrieve all line items for an invoice

        Args:
            invoice_id: Invoice ID

        Returns:
            List of InvoiceLine items ordered by service_date, sort_order, id
        """
        pass

    @abstractmethod
    async def create_many(self, invoice_lines: List[InvoiceLine]) -> List[InvoiceLine]:
        """
        Create line items

        Args:
            invoice_lines: InvoiceLine entities to persist

        Returns:
            Created InvoiceLines with generated IDs
        """
        pass

    @abstractmethod
    async def delete_by_invoice_id(self, invoice_id: int) -> int:
        """
        Delete all line items of an invoice

        Returns:
            Number of deleted lines
        """
        pass

    @abstractmethod
    async def count_by_invoice_ids(self, invoice_ids: Iterable[int]) -> Dict[int, int]:
        """
        Count line items per invoice

        Returns:
            Mapping of invoice_id to line count (invoices without lines are absent)
        """
        pass

    @abstractmethod
    async def find_billed_keys(
        self,
        tenant_id: str,
        attendance_ids: Iterable[int],
        exclude_invoice_id: Optional[int] = None,
    ) -> Set[Tuple[int, str]]:
        """
        (attendance_id, billing_code) pairs already billed on other invoices

        Args:
            tenant_id: Tenant identifier
            attendance_ids: Attendances about to be billed
            exclude_invoice_id: Invoice being regenerated (its lines are ignored)
        """
        pass
