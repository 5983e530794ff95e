"""GenerateInvoices Use Case

Generates (or regenerates) the monthly care-insurance invoices of a tenant.
Each client is computed and written in its own unit of work so that one
client's bad data never blocks the rest of the facility.
"""

import asyncio
import logging
import time
from calendar import monthrange
from datetime import date, datetime
from typing import List, Optional, Tuple
from libs.result import Result, Return, Error
from src.domain.billing import (
    AreaGradeResolver,
    BasicUnitResolver,
    BenefitLimitResolver,
    BillingError,
    ConcurrentRegenerationConflict,
    InvoiceCalculator,
    PriceCatalog,
    RoundingPolicy,
    UnknownClient,
    UnsupportedArea,
)
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_line import InvoiceLine
from .dtos import (
    ClientFailureDTO,
    GenerateInvoicesCommandDTO,
    GenerateInvoicesResultDTO,
    GenerationMode,
    InvoiceSummaryDTO,
)

logger = logging.getLogger(__name__)

GENERATED = "generated"
REPLACED = "replaced"
SKIPPED_EXISTING = "skipped_existing"
SKIPPED_FIXED = "skipped_fixed"
REMOVED = "removed"


def month_bounds(billing_month: date) -> Tuple[date, date]:
    _, last_day = monthrange(billing_month.year, billing_month.month)
    return billing_month, date(billing_month.year, billing_month.month, last_day)


class _TenantContext:
    """Tenant values captured before the loading session closes"""

    def __init__(self, facility_scale, improvement_rate, unit_rate, period_start: date, period_end: date):
        self.facility_scale = facility_scale
        self.improvement_rate = improvement_rate
        self.unit_rate = unit_rate
        self.period_start = period_start
        self.period_end = period_end


class _ClientAborted(Exception):
    """Raised inside an all-or-nothing batch to roll the whole batch back"""

    def __init__(self, client_id: int, error: BillingError):
        super().__init__(error.message)
        self.client_id = client_id
        self.error = error


class GenerateInvoices:
    """
    Use Case: Generate monthly invoices for every billed client of a tenant

    Business Rules:
    1. Unsupported area blocks the whole tenant; nothing is written
    2. Clients billed are those with at least one present attendance
    3. Fixed invoices are never modified
    4. replace overwrites drafts; skip_existing leaves any existing invoice
    5. Per-client validation failures are reported, not raised
    6. Concurrent runs for the same client are serialized by the generation
       lock; the loser is retried (GENERATION_CONFLICT_RETRIES)

    Flow:
    1. Load tenant and resolve the area unit rate
    2. Collect billed clients and existing invoices of the month
    3. Per client: lock, compute, replace lines and totals, commit
    4. Remove drafts of clients no longer billed (replace only)
    5. Return counters and failures
    """

    def __init__(
        self,
        uow_factory,
        rounding_policy: Optional[RoundingPolicy] = None,
        area_resolver: Optional[AreaGradeResolver] = None,
        unit_resolver: Optional[BasicUnitResolver] = None,
        limit_resolver: Optional[BenefitLimitResolver] = None,
        base_price_code: str = "day_service_basic",
        base_service_code: str = "151111",
        conflict_retries: int = 1,
        concurrency: int = 1,
    ):
        self.uow_factory = uow_factory
        self.rounding_policy = rounding_policy or RoundingPolicy()
        self.area_resolver = area_resolver or AreaGradeResolver()
        self.unit_resolver = unit_resolver or BasicUnitResolver()
        self.limit_resolver = limit_resolver or BenefitLimitResolver()
        self.calculator = InvoiceCalculator(
            self.rounding_policy,
            base_price_code=base_price_code,
            base_service_code=base_service_code,
        )
        self.conflict_retries = max(0, conflict_retries)
        self.concurrency = max(1, concurrency)

    async def execute(self, command: GenerateInvoicesCommandDTO) -> Result[GenerateInvoicesResultDTO]:
        """
        Execute monthly invoice generation

        Args:
            command: GenerateInvoicesCommandDTO with tenant_id, billing_month, mode, actor

        Returns:
            Result[GenerateInvoicesResultDTO]: counters and per-client failures, or
            a batch-level error (TENANT_NOT_FOUND, UNSUPPORTED_AREA,
            GENERATION_ABORTED, GENERATE_INVOICES_FAILED)
        """
        start_time = time.time()
        period_start, period_end = month_bounds(command.billing_month)
        logger.info(
            f"Starting invoice generation for tenant {command.tenant_id}, "
            f"month {command.billing_month.strftime('%Y-%m')}, mode {command.mode.value}"
        )

        try:
            # Step 1: Load tenant and resolve the unit rate
            async with self.uow_factory() as uow:
                tenant = await uow.tenants.get_by_id(command.tenant_id)
                if not tenant:
                    return Return.err(
                        Error(
                            code="TENANT_NOT_FOUND",
                            message=f"Tenant {command.tenant_id} not found",
                            reason="Tenant does not exist",
                        )
                    )

                try:
                    unit_rate = self.area_resolver.rate_for(
                        tenant.city_name, tenant.facility_scale, command.billing_month
                    )
                except UnsupportedArea as e:
                    logger.warning(f"Tenant {command.tenant_id} blocked: {e.message}")
                    return Return.err(
                        Error(
                            code="UNSUPPORTED_AREA",
                            message=e.message,
                            reason=e.reason or f"city_name={tenant.city_name}",
                        )
                    )

                # Step 2: Billed clients and existing invoices of the month
                attendances = await uow.attendances.get_present_in_period(
                    command.tenant_id, period_start, period_end
                )
                existing_invoices = await uow.invoices.get_for_month(
                    command.tenant_id, command.billing_month
                )

                context = _TenantContext(
                    tenant.facility_scale,
                    tenant.improvement_addition_rate,
                    unit_rate,
                    period_start,
                    period_end,
                )
                client_ids = sorted({a.client_id for a in attendances})
                obsolete_ids = sorted(
                    {invoice.client_id for invoice in existing_invoices} - set(client_ids)
                )

            if command.mode != GenerationMode.REPLACE:
                obsolete_ids = []

            result = GenerateInvoicesResultDTO(
                tenant_id=command.tenant_id,
                billing_month=command.billing_month,
                mode=command.mode.value,
            )

            # Step 3 and 4: per-client generation and obsolete draft removal
            if command.all_or_nothing:
                try:
                    result = await self._run_all_or_nothing(
                        command, context, client_ids, obsolete_ids, result
                    )
                except _ClientAborted as e:
                    logger.warning(
                        f"Invoice generation aborted for tenant {command.tenant_id} "
                        f"at client {e.client_id}: {e.error.message}"
                    )
                    return Return.err(
                        Error(
                            code="GENERATION_ABORTED",
                            message=f"Client {e.client_id} failed: {e.error.message}",
                            reason=f"{e.error.code}: {e.error.reason or e.error.message}",
                        )
                    )
            else:
                await self._run_per_client(command, context, client_ids, obsolete_ids, result)

            # Step 5: Build response
            result.execution_time_ms = int((time.time() - start_time) * 1000)
            logger.info(
                f"Invoice generation complete for tenant {command.tenant_id}: "
                f"{result.generated} generated ({result.replaced} replaced), "
                f"{result.skipped_existing} skipped existing, {result.skipped_fixed} skipped fixed, "
                f"{result.removed} removed, {result.failed} failed, "
                f"{result.execution_time_ms}ms"
            )
            return Return.ok(result)

        except Exception as e:
            logger.error(f"Invoice generation failed for tenant {command.tenant_id}: {e}")
            return Return.err(
                Error(
                    code="GENERATE_INVOICES_FAILED",
                    message="Failed to generate invoices",
                    reason=str(e),
                )
            )

    async def _run_per_client(
        self,
        command: GenerateInvoicesCommandDTO,
        context: _TenantContext,
        client_ids: List[int],
        obsolete_ids: List[int],
        result: GenerateInvoicesResultDTO,
    ) -> None:
        semaphore = asyncio.Semaphore(self.concurrency)

        async def bounded(client_id: int, remove: bool):
            async with semaphore:
                return await self._run_client_with_retry(command, context, client_id, remove)

        jobs = [bounded(client_id, False) for client_id in client_ids]
        jobs += [bounded(client_id, True) for client_id in obsolete_ids]
        outcomes = await asyncio.gather(*jobs)

        for client_id, (outcome, summary, error) in zip(client_ids + obsolete_ids, outcomes):
            if error is not None:
                self._record_failure(result, client_id, error)
            else:
                self._record(result, outcome, summary)

    async def _run_client_with_retry(
        self,
        command: GenerateInvoicesCommandDTO,
        context: _TenantContext,
        client_id: int,
        remove: bool,
    ):
        attempts = 0
        while True:
            try:
                async with self.uow_factory() as uow:
                    if remove:
                        outcome, summary = await self._remove_obsolete(uow, command, client_id)
                    else:
                        outcome, summary = await self._generate_client(uow, command, context, client_id)
                    await uow.commit()
                return outcome, summary, None
            except ConcurrentRegenerationConflict as e:
                if attempts < self.conflict_retries:
                    attempts += 1
                    logger.info(
                        f"Generation conflict for client {client_id}, retrying ({attempts}/{self.conflict_retries})"
                    )
                    continue
                return None, None, e
            except BillingError as e:
                return None, None, e
            except Exception as e:
                logger.error(f"Unexpected error generating invoice for client {client_id}: {e}")
                return None, None, BillingError(str(e), reason=type(e).__name__)

    async def _run_all_or_nothing(
        self,
        command: GenerateInvoicesCommandDTO,
        context: _TenantContext,
        client_ids: List[int],
        obsolete_ids: List[int],
        result: GenerateInvoicesResultDTO,
    ) -> GenerateInvoicesResultDTO:
        """
        Whole batch in one transaction; a lock conflict reruns the batch up to
        conflict_retries times from a clean transaction
        """
        attempts = self.conflict_retries + 1
        for attempt in range(1, attempts + 1):
            batch = result.model_copy(deep=True)
            try:
                await self._all_or_nothing_attempt(command, context, client_ids, obsolete_ids, batch)
                return batch
            except _ClientAborted as e:
                if not isinstance(e.error, ConcurrentRegenerationConflict) or attempt == attempts:
                    raise
                logger.info(
                    f"Generation conflict at client {e.client_id}, "
                    f"rerunning batch (attempt {attempt + 1}/{attempts})"
                )

    async def _all_or_nothing_attempt(
        self,
        command: GenerateInvoicesCommandDTO,
        context: _TenantContext,
        client_ids: List[int],
        obsolete_ids: List[int],
        result: GenerateInvoicesResultDTO,
    ) -> None:
        async with self.uow_factory() as uow:
            for client_id in client_ids:
                try:
                    outcome, summary = await self._generate_client(uow, command, context, client_id)
                except BillingError as e:
                    await uow.rollback()
                    raise _ClientAborted(client_id, e)
                self._record(result, outcome, summary)

            for client_id in obsolete_ids:
                try:
                    outcome, summary = await self._remove_obsolete(uow, command, client_id)
                except BillingError as e:
                    await uow.rollback()
                    raise _ClientAborted(client_id, e)
                self._record(result, outcome, summary)

            await uow.commit()

    async def _lock(self, uow, command: GenerateInvoicesCommandDTO, client_id: int) -> Optional[Invoice]:
        locked = await uow.invoices.acquire_generation_lock(
            command.tenant_id, client_id, command.billing_month
        )
        if not locked:
            raise ConcurrentRegenerationConflict(
                f"Invoice generation for client {client_id} is already running",
                reason=f"tenant_id={command.tenant_id}, billing_month={command.billing_month.isoformat()}",
            )
        return await uow.invoices.get_for_client_month(
            command.tenant_id, client_id, command.billing_month, for_update=True
        )

    async def _generate_client(
        self,
        uow,
        command: GenerateInvoicesCommandDTO,
        context: _TenantContext,
        client_id: int,
    ) -> Tuple[str, Optional[InvoiceSummaryDTO]]:
        # Step 1: Generation lock and existing invoice (row locked)
        existing = await self._lock(uow, command, client_id)
        if existing is not None and existing.status == InvoiceStatus.FIXED:
            logger.info(f"Client {client_id}: invoice {existing.id} is fixed, skipped")
            return SKIPPED_FIXED, None
        if existing is not None and command.mode == GenerationMode.SKIP_EXISTING:
            logger.info(f"Client {client_id}: invoice {existing.id} exists, skipped")
            return SKIPPED_EXISTING, None

        # Step 2: Client care data
        client = await uow.clients.get_by_id(command.tenant_id, client_id)
        if client is None:
            raise UnknownClient(
                f"Client {client_id} not found in tenant {command.tenant_id}",
                reason=f"client_id={client_id}",
            )
        limit = self.limit_resolver.limit_for(client, command.billing_month)
        base_units = self.unit_resolver.resolve(limit.care_level, context.facility_scale)

        # Step 3: Month inputs
        attendances = await uow.attendances.get_present_for_client(
            command.tenant_id, client_id, context.period_start, context.period_end
        )
        contracts = await uow.contracts.get_for_client_in_period(
            command.tenant_id, client_id, context.period_start, context.period_end
        )
        price_items = await uow.price_items.get_active_in_period(
            command.tenant_id, context.period_start, context.period_end
        )
        billed_keys = await uow.invoice_lines.find_billed_keys(
            command.tenant_id,
            [a.id for a in attendances],
            exclude_invoice_id=existing.id if existing is not None else None,
        )

        # Step 4: Compute
        calculated = self.calculator.calculate(
            billing_month=command.billing_month,
            attendances=attendances,
            contracts=contracts,
            base_units=base_units,
            price_lookup=PriceCatalog(price_items).lookup,
            limit=limit,
            unit_rate=context.unit_rate,
            improvement_rate=context.improvement_rate,
            billed_keys=billed_keys,
        )

        # Step 5: Replace lines and totals
        if existing is not None:
            await uow.invoice_lines.delete_by_invoice_id(existing.id)
            invoice = self._apply_totals(existing, calculated, limit, command)
            invoice = await uow.invoices.update(invoice)
            outcome = REPLACED
        else:
            invoice = self._apply_totals(
                Invoice(
                    tenant_id=command.tenant_id,
                    client_id=client_id,
                    billing_month=command.billing_month,
                ),
                calculated,
                limit,
                command,
            )
            invoice = await uow.invoices.create(invoice)
            outcome = GENERATED

        lines = [
            InvoiceLine(
                tenant_id=command.tenant_id,
                invoice_id=invoice.id,
                attendance_id=line.attendance_id,
                price_item_id=line.price_item_id,
                billing_code=line.billing_code,
                service_code=line.service_code,
                service_date=line.service_date,
                item_name=line.item_name,
                quantity=line.quantity,
                units=line.units,
                unit_price=line.unit_price,
                line_total=line.line_total,
                sort_order=line.sort_order,
                details=dict(line.details),
            )
            for line in calculated.lines
        ]
        if lines:
            await uow.invoice_lines.create_many(lines)

        logger.info(
            f"Client {client_id}: invoice {invoice.id} {outcome}, "
            f"{calculated.billed_days} days, {len(lines)} lines, total {invoice.total_amount}"
        )
        return outcome, InvoiceSummaryDTO.from_invoice(invoice, len(lines))

    async def _remove_obsolete(
        self, uow, command: GenerateInvoicesCommandDTO, client_id: int
    ) -> Tuple[str, Optional[InvoiceSummaryDTO]]:
        existing = await self._lock(uow, command, client_id)
        if existing is None:
            return None, None
        if existing.status == InvoiceStatus.FIXED:
            logger.info(f"Client {client_id}: fixed invoice {existing.id} has no attendance, kept")
            return SKIPPED_FIXED, None

        await uow.invoices.delete(existing)
        logger.info(f"Client {client_id}: draft invoice {existing.id} has no attendance, removed")
        return REMOVED, None

    @staticmethod
    def _apply_totals(invoice: Invoice, calculated, limit, command: GenerateInvoicesCommandDTO) -> Invoice:
        apportionment = calculated.apportionment
        invoice.status = InvoiceStatus.DRAFT
        invoice.copayment_rate = limit.copayment_rate_code
        invoice.total_units = apportionment.total_units.value
        invoice.insured_units = apportionment.insured_units.value
        invoice.self_pay_units = apportionment.self_pay_units.value
        invoice.improvement_units = apportionment.improvement_units.value
        invoice.subtotal_amount = calculated.subtotal_amount.value
        invoice.insurance_claim_amount = apportionment.insurance_claim_amount.value
        invoice.insured_copayment_amount = apportionment.insured_copayment_amount.value
        invoice.excess_copayment_amount = apportionment.excess_copayment_amount.value
        invoice.total_amount = apportionment.total_amount.value
        invoice.generated_at = datetime.utcnow()
        invoice.generated_by = command.actor
        return invoice

    @staticmethod
    def _record(result: GenerateInvoicesResultDTO, outcome: Optional[str], summary) -> None:
        if outcome in (GENERATED, REPLACED):
            result.generated += 1
            if outcome == REPLACED:
                result.replaced += 1
            result.invoices.append(summary)
        elif outcome == SKIPPED_EXISTING:
            result.skipped_existing += 1
        elif outcome == SKIPPED_FIXED:
            result.skipped_fixed += 1
        elif outcome == REMOVED:
            result.removed += 1

    @staticmethod
    def _record_failure(result: GenerateInvoicesResultDTO, client_id: int, error: BillingError) -> None:
        logger.warning(f"Client {client_id}: {error.code}: {error.message}")
        result.failed += 1
        result.failures.append(
            ClientFailureDTO(
                client_id=client_id,
                code=error.code,
                message=error.message,
                reason=error.reason,
            )
        )
