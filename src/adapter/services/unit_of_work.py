from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork
from src.adapter.repositories import (
    SqlAlchemyAttendanceRepository,
    SqlAlchemyClientRepository,
    SqlAlchemyContractRepository,
    SqlAlchemyInvoiceLineRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemyPriceItemRepository,
    SqlAlchemyTenantRepository,
)


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session
        self.tenants = SqlAlchemyTenantRepository(session)
        self.clients = SqlAlchemyClientRepository(session)
        self.contracts = SqlAlchemyContractRepository(session)
        self.attendances = SqlAlchemyAttendanceRepository(session)
        self.price_items = SqlAlchemyPriceItemRepository(session)
        self.invoices = SqlAlchemyInvoiceRepository(session)
        self.invoice_lines = SqlAlchemyInvoiceLineRepository(session)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()


class SqlAlchemyUnitOfWorkFactory:
    """
    Opens a fresh session per unit of work

    Usage:
        factory = SqlAlchemyUnitOfWorkFactory(async_session_factory)
        async with factory() as uow:
            ...
            await uow.commit()
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def __call__(self) -> "_SessionScopedUnitOfWork":
        return _SessionScopedUnitOfWork(self.session_factory)


class _SessionScopedUnitOfWork:
    def __init__(self, session_factory):
        self.session_factory = session_factory
        self._session = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self.session_factory()
        return SqlAlchemyUnitOfWork(self._session)

    async def __aexit__(self, *args):
        try:
            await self._session.rollback()
        finally:
            await self._session.close()
