"""Unit of Work Interface

One unit of work is one database transaction. Repositories exposed here share
that transaction.
"""

from abc import ABC, abstractmethod
from src.app.repositories import (
    AttendanceRepository,
    ClientRepository,
    ContractRepository,
    InvoiceLineRepository,
    InvoiceRepository,
    PriceItemRepository,
    TenantRepository,
)


class UnitOfWork(ABC):
    tenants: TenantRepository
    clients: ClientRepository
    contracts: ContractRepository
    attendances: AttendanceRepository
    price_items: PriceItemRepository
    invoices: InvoiceRepository
    invoice_lines: InvoiceLineRepository

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
