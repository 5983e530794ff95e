"""SQLAlchemy Invoice Line Repository Implementation

Implements invoice line persistence using SQLAlchemy async session.
"""

from typing import Dict, Iterable, List, Optional, Set, Tuple
from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.billing.errors import DuplicateBillingLine
from src.domain.invoice_line import InvoiceLine


class SqlAlchemyInvoiceLineRepository(InvoiceLineRepository):
    """
    SQLAlchemy implementation of InvoiceLineRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_invoice_id(self, invoice_id: int) -> List[InvoiceLine]:
        """
        Retrieve all line items for an invoice

        Args:
            invoice_id: Invoice ID

        Returns:
            List of InvoiceLine items ordered by service_date, sort_order, id
        """
        statement = (
            select(InvoiceLine)
            .where(InvoiceLine.invoice_id == invoice_id)
            .order_by(InvoiceLine.service_date, InvoiceLine.sort_order, InvoiceLine.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def create_many(self, invoice_lines: List[InvoiceLine]) -> List[InvoiceLine]:
        self.session.add_all(invoice_lines)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise DuplicateBillingLine(None, "unknown", reason=str(e.orig))
        return invoice_lines

    async def delete_by_invoice_id(self, invoice_id: int) -> int:
        result = await self.session.execute(
            delete(InvoiceLine).where(InvoiceLine.invoice_id == invoice_id)
        )
        await self.session.flush()
        return result.rowcount or 0

    async def count_by_invoice_ids(self, invoice_ids: Iterable[int]) -> Dict[int, int]:
        ids = list(invoice_ids)
        if not ids:
            return {}

        statement = (
            select(InvoiceLine.invoice_id, func.count())
            .where(InvoiceLine.invoice_id.in_(ids))
            .group_by(InvoiceLine.invoice_id)
        )
        result = await self.session.execute(statement)
        return {invoice_id: count for invoice_id, count in result.all()}

    async def find_billed_keys(
        self,
        tenant_id: str,
        attendance_ids: Iterable[int],
        exclude_invoice_id: Optional[int] = None,
    ) -> Set[Tuple[int, str]]:
        ids = [attendance_id for attendance_id in attendance_ids if attendance_id is not None]
        if not ids:
            return set()

        statement = (
            select(InvoiceLine.attendance_id, InvoiceLine.billing_code)
            .where(InvoiceLine.tenant_id == tenant_id)
            .where(InvoiceLine.attendance_id.in_(ids))
        )
        if exclude_invoice_id is not None:
            statement = statement.where(InvoiceLine.invoice_id != exclude_invoice_id)

        result = await self.session.execute(statement)
        return {(attendance_id, billing_code) for attendance_id, billing_code in result.all()}
