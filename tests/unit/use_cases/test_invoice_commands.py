"""Unit tests for FinalizeInvoice and ConfigureTenantBilling"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.billing import (
    ConfigureTenantBilling,
    ConfigureTenantBillingCommandDTO,
    FinalizeInvoice,
)
from src.domain.billing import FacilityScale
from src.domain.invoice import Invoice, InvoiceStatus
from tests.fixtures.billing_data import TENANT_ID, make_tenant


def _invoice(status=InvoiceStatus.DRAFT):
    return Invoice(
        id=1,
        tenant_id=TENANT_ID,
        client_id=42,
        billing_month=date(2024, 4, 1),
        status=status,
    )


@pytest.fixture
def mock_invoice_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=_invoice())
    repo.update = AsyncMock(side_effect=lambda invoice: invoice)
    return repo


@pytest.fixture
def mock_invoice_line_repo():
    repo = MagicMock()
    repo.get_by_invoice_id = AsyncMock(return_value=[])
    return repo


@pytest.mark.asyncio
class TestFinalizeInvoice:
    async def test_fixes_draft(self, mock_uow, mock_invoice_repo, mock_invoice_line_repo):
        """
        Given: A draft invoice
        When: FinalizeInvoice is executed
        Then: The invoice is fixed under a row lock and committed
        """
        use_case = FinalizeInvoice(mock_uow, mock_invoice_repo, mock_invoice_line_repo)

        result = await use_case.execute(TENANT_ID, 1)

        assert result.is_ok()
        assert result.value.status == "fixed"
        mock_invoice_repo.get_by_id.assert_called_once_with(TENANT_ID, 1, for_update=True)
        updated = mock_invoice_repo.update.call_args[0][0]
        assert updated.fixed_at is not None
        mock_uow.commit.assert_called_once()

    async def test_already_fixed(self, mock_uow, mock_invoice_repo, mock_invoice_line_repo):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=_invoice(InvoiceStatus.FIXED))

        result = await FinalizeInvoice(mock_uow, mock_invoice_repo, mock_invoice_line_repo).execute(TENANT_ID, 1)

        assert result.is_err()
        assert result.error.code == "INVOICE_NOT_DRAFT"
        mock_uow.commit.assert_not_called()

    async def test_not_found(self, mock_uow, mock_invoice_repo, mock_invoice_line_repo):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=None)

        result = await FinalizeInvoice(mock_uow, mock_invoice_repo, mock_invoice_line_repo).execute(TENANT_ID, 1)

        assert result.error.code == "INVOICE_NOT_FOUND"

    async def test_update_failure_rolls_back(self, mock_uow, mock_invoice_repo, mock_invoice_line_repo):
        mock_invoice_repo.update = AsyncMock(side_effect=RuntimeError("db error"))

        result = await FinalizeInvoice(mock_uow, mock_invoice_repo, mock_invoice_line_repo).execute(TENANT_ID, 1)

        assert result.error.code == "FINALIZE_INVOICE_FAILED"
        mock_uow.rollback.assert_called_once()


@pytest.mark.asyncio
class TestConfigureTenantBilling:
    async def test_saves_supported_area(self, mock_uow):
        """
        Given: A supported ward and scale
        When: Billing settings are saved
        Then: The tenant is updated and the resolved rate is returned
        """
        tenant = make_tenant(city_name=None, facility_scale=None)
        tenant_repo = MagicMock()
        tenant_repo.get_by_id = AsyncMock(return_value=tenant)
        tenant_repo.update = AsyncMock(side_effect=lambda t: t)
        command = ConfigureTenantBillingCommandDTO(
            tenant_id=TENANT_ID,
            city_name="品川区",
            facility_scale="normal",
            improvement_addition_rate=Decimal("0.245"),
        )

        result = await ConfigureTenantBilling(mock_uow, tenant_repo).execute(command, as_of=date(2024, 4, 1))

        assert result.is_ok()
        assert result.value.area_grade == "grade_1"
        assert result.value.unit_rate == Decimal("10.90")
        assert tenant.city_name == "品川区"
        assert tenant.facility_scale == FacilityScale.NORMAL
        assert tenant.improvement_addition_rate == Decimal("0.245")
        mock_uow.commit.assert_called_once()

    async def test_rejects_unsupported_area(self, mock_uow):
        tenant_repo = MagicMock()
        tenant_repo.get_by_id = AsyncMock()
        command = ConfigureTenantBillingCommandDTO(
            tenant_id=TENANT_ID, city_name="名古屋市", facility_scale="normal"
        )

        result = await ConfigureTenantBilling(mock_uow, tenant_repo).execute(command)

        assert result.is_err()
        assert result.error.code == "UNSUPPORTED_AREA"
        tenant_repo.get_by_id.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_rejects_unknown_scale(self, mock_uow):
        command = ConfigureTenantBillingCommandDTO(
            tenant_id=TENANT_ID, city_name="品川区", facility_scale="medium"
        )

        result = await ConfigureTenantBilling(mock_uow, MagicMock()).execute(command)

        assert result.error.code == "UNSUPPORTED_AREA"

    async def test_tenant_not_found(self, mock_uow):
        tenant_repo = MagicMock()
        tenant_repo.get_by_id = AsyncMock(return_value=None)
        command = ConfigureTenantBillingCommandDTO(
            tenant_id="missing", city_name="品川区", facility_scale="normal"
        )

        result = await ConfigureTenantBilling(mock_uow, tenant_repo).execute(command)

        assert result.error.code == "TENANT_NOT_FOUND"
