from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.fixtures.billing_data import (
    make_attendances,
    make_client,
    make_contract,
    make_price_items,
    make_tenant,
)


@pytest.fixture
def mock_uow():
    """Mock unit of work with every billing repository attached"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.tenants = MagicMock()
    uow.tenants.get_by_id = AsyncMock(return_value=make_tenant())
    uow.tenants.update = AsyncMock(side_effect=lambda tenant: tenant)

    uow.clients = MagicMock()
    uow.clients.get_by_id = AsyncMock(
        side_effect=lambda tenant_id, client_id: make_client(client_id)
    )

    uow.contracts = MagicMock()
    uow.contracts.get_for_client_in_period = AsyncMock(
        side_effect=lambda tenant_id, client_id, start, end: [make_contract(client_id)]
    )

    uow.attendances = MagicMock()
    uow.attendances.get_present_in_period = AsyncMock(return_value=make_attendances())
    uow.attendances.get_present_for_client = AsyncMock(
        side_effect=lambda tenant_id, client_id, start, end: make_attendances(client_id)
    )

    uow.price_items = MagicMock()
    uow.price_items.get_active_in_period = AsyncMock(return_value=make_price_items())

    created_ids = iter(range(100, 1000))

    def create_invoice(invoice):
        invoice.id = next(created_ids)
        return invoice

    uow.invoices = MagicMock()
    uow.invoices.get_for_month = AsyncMock(return_value=[])
    uow.invoices.get_for_client_month = AsyncMock(return_value=None)
    uow.invoices.acquire_generation_lock = AsyncMock(return_value=True)
    uow.invoices.create = AsyncMock(side_effect=create_invoice)
    uow.invoices.update = AsyncMock(side_effect=lambda invoice: invoice)
    uow.invoices.delete = AsyncMock()
    uow.invoices.get_by_id = AsyncMock(return_value=None)

    uow.invoice_lines = MagicMock()
    uow.invoice_lines.find_billed_keys = AsyncMock(return_value=set())
    uow.invoice_lines.delete_by_invoice_id = AsyncMock(return_value=0)
    uow.invoice_lines.create_many = AsyncMock(side_effect=lambda lines: lines)
    uow.invoice_lines.get_by_invoice_id = AsyncMock(return_value=[])
    uow.invoice_lines.count_by_invoice_ids = AsyncMock(return_value={})
    return uow


@pytest.fixture
def mock_uow_factory(mock_uow):
    """Factory returning the same mock unit of work for every client"""
    return MagicMock(return_value=mock_uow)
