"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Optional, List
from datetime import date, datetime
from sqlalchemy import delete, text
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.billing.errors import ConcurrentRegenerationConflict
from src.domain.invoice import Invoice
from src.domain.invoice_line import InvoiceLine


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Transaction-scoped advisory lock on PostgreSQL for generation
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice with generated ID

        Raises:
            ConcurrentRegenerationConflict: another transaction created the
                invoice for the same (tenant, client, month) first
        """
        self.session.add(invoice)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConcurrentRegenerationConflict(
                f"Invoice for client {invoice.client_id} and month {invoice.billing_month} "
                f"was created concurrently",
                reason=str(e.orig),
            )
        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, tenant_id: str, invoice_id: int, for_update: bool = False) -> Optional[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.tenant_id == tenant_id)
            .where(Invoice.id == invoice_id)
        )

        if for_update:
            statement = statement.with_for_update()

        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_for_client_month(
        self,
        tenant_id: str,
        client_id: int,
        billing_month: date,
        for_update: bool = False,
    ) -> Optional[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.tenant_id == tenant_id)
            .where(Invoice.client_id == client_id)
            .where(Invoice.billing_month == billing_month)
        )

        if for_update:
            statement = statement.with_for_update()

        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_for_month(self, tenant_id: str, billing_month: date) -> List[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.tenant_id == tenant_id)
            .where(Invoice.billing_month == billing_month)
            .order_by(Invoice.client_id, Invoice.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        invoice.updated_at = datetime.utcnow()
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def delete(self, invoice: Invoice) -> None:
        await self.session.execute(delete(InvoiceLine).where(InvoiceLine.invoice_id == invoice.id))
        await self.session.delete(invoice)
        await self.session.flush()

    async def acquire_generation_lock(self, tenant_id: str, client_id: int, billing_month: date) -> bool:
        """
        Take the generation lock for (tenant, client, month)

        On PostgreSQL this is pg_try_advisory_xact_lock, released at commit or
        rollback. Other dialects rely on the invoice row lock and the unique
        constraint on (tenant_id, client_id, billing_month).
        """
        bind = self.session.bind
        if bind is None or bind.dialect.name != "postgresql":
            return True

        lock_key = f"invoice_generation:{tenant_id}:{client_id}:{billing_month.strftime('%Y%m')}"
        result = await self.session.execute(
            text("SELECT pg_try_advisory_xact_lock(hashtext(:lock_key))"),
            {"lock_key": lock_key},
        )
        return bool(result.scalar_one())
