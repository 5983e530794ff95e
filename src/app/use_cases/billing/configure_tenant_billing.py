"""ConfigureTenantBilling Use Case

Saves the municipality, facility scale and improvement addition rate that
drive a tenant's unit rate.
"""

from datetime import date
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.tenant_repository import TenantRepository
from src.domain.billing import AreaGradeResolver, UnsupportedArea
from src.domain.billing.area_grade import coerce_facility_scale
from .dtos import ConfigureTenantBillingCommandDTO, TenantBillingSettingsDTO


class ConfigureTenantBilling:
    """
    Use Case: Configure a tenant's billing area

    Business Rules:
    1. The city must be a supported area with a unit rate for the scale
    2. Unsupported settings are rejected and nothing is saved

    Flow:
    1. Validate city and facility scale against the area resolver
    2. Lock and update the tenant
    3. Commit and return the resolved grade and rate
    """

    def __init__(
        self,
        uow: UnitOfWork,
        tenant_repo: TenantRepository,
        area_resolver: AreaGradeResolver = None,
    ):
        self.uow = uow
        self.tenant_repo = tenant_repo
        self.area_resolver = area_resolver or AreaGradeResolver()

    async def execute(
        self, command: ConfigureTenantBillingCommandDTO, as_of: date = None
    ) -> Result[TenantBillingSettingsDTO]:
        as_of = as_of or date.today()
        try:
            # Step 1: Validate against the supported areas
            try:
                self.area_resolver.validate_configuration(command.city_name, command.facility_scale)
                grade = self.area_resolver.resolve(command.city_name)
                scale = coerce_facility_scale(command.facility_scale)
                unit_rate = self.area_resolver.rate_for(command.city_name, scale, as_of)
            except UnsupportedArea as e:
                return Return.err(
                    Error(
                        code="UNSUPPORTED_AREA",
                        message=e.message,
                        reason=e.reason or f"city_name={command.city_name}",
                    )
                )

            # Step 2: Lock and update the tenant
            tenant = await self.tenant_repo.get_by_id(command.tenant_id, for_update=True)
            if not tenant:
                return Return.err(
                    Error(
                        code="TENANT_NOT_FOUND",
                        message=f"Tenant {command.tenant_id} not found",
                        reason="Tenant does not exist",
                    )
                )

            tenant.city_name = command.city_name.strip()
            tenant.facility_scale = scale
            tenant.improvement_addition_rate = command.improvement_addition_rate
            await self.tenant_repo.update(tenant)

            # Step 3: Commit
            await self.uow.commit()

            return Return.ok(
                TenantBillingSettingsDTO(
                    tenant_id=command.tenant_id,
                    city_name=command.city_name.strip(),
                    facility_scale=scale.value,
                    area_grade=grade.value,
                    unit_rate=unit_rate,
                    improvement_addition_rate=command.improvement_addition_rate,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CONFIGURE_TENANT_BILLING_FAILED",
                    message="Failed to configure tenant billing",
                    reason=str(e),
                )
            )
