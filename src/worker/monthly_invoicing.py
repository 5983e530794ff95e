"""Monthly Invoicing Background Worker

Generates the care-insurance invoices of one tenant for a billing month.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Result
from src.app.use_cases.billing import (
    GenerateInvoicesCommandDTO,
    GenerateInvoicesResultDTO,
    GenerationMode,
)
from src.depends import get_generate_invoices, get_unit_of_work_factory

logger = logging.getLogger(__name__)


class MonthlyInvoicingWorker:
    """
    Background worker for monthly invoice generation

    Features:
    - Defaults to the previous month (typical run right after month end)
    - Each client is generated in its own transaction
    - Safe to re-run: drafts are replaced, fixed invoices are kept

    Usage:
        worker = MonthlyInvoicingWorker()
        result = await worker.run_once("tenant_meguro", year=2024, month=4)
        await worker.shutdown()
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        config=None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            config: Settings object (defaults to ApplicationConfig)
        """
        self.config = config or ApplicationConfig
        self.db_uri = db_uri or self.config.DB_URI

        # Create engine and session factory
        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
        self.generate_invoices = get_generate_invoices(
            get_unit_of_work_factory(self.async_session_factory), self.config
        )

        logger.info("MonthlyInvoicingWorker initialized")

    def _get_billing_month(self, year: Optional[int] = None, month: Optional[int] = None) -> date:
        """
        First day of the billing month; previous month when year/month are not given
        """
        if year is None or month is None:
            today = datetime.utcnow()
            if today.month == 1:
                year = today.year - 1
                month = 12
            else:
                year = today.year
                month = today.month - 1
        return date(year, month, 1)

    async def run_once(
        self,
        tenant_id: str,
        year: Optional[int] = None,
        month: Optional[int] = None,
        mode: Optional[str] = None,
        all_or_nothing: bool = False,
        actor: str = "monthly_invoicing",
    ) -> Result[GenerateInvoicesResultDTO]:
        """
        Run generation once for one tenant

        Args:
            tenant_id: Tenant identifier
            year: Year (optional, defaults to previous month)
            month: Month (optional, defaults to previous month)
            mode: replace or skip_existing (defaults to DEFAULT_GENERATION_MODE)
            all_or_nothing: Abort the batch on the first client failure
            actor: Recorded as generated_by

        Returns:
            Result of GenerateInvoices
        """
        billing_month = self._get_billing_month(year, month)
        command = GenerateInvoicesCommandDTO(
            tenant_id=tenant_id,
            billing_month=billing_month,
            mode=GenerationMode(mode or self.config.DEFAULT_GENERATION_MODE),
            actor=actor,
            all_or_nothing=all_or_nothing,
        )

        result = await self.generate_invoices.execute(command)
        if result.is_err():
            logger.error(
                f"Invoice generation failed for tenant {tenant_id}: "
                f"{result.error.code} {result.error.message}"
            )
        else:
            logger.info(
                f"Invoice generation for tenant {tenant_id} {billing_month.strftime('%Y-%m')}: "
                f"{result.value.generated} generated, {result.value.failed} failed"
            )
        return result

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("MonthlyInvoicingWorker shutdown complete")


async def main(argv=None) -> int:
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Previous month
        python -m src.worker.monthly_invoicing --tenant tenant_meguro

        # Specific month, keep existing invoices
        python -m src.worker.monthly_invoicing --tenant tenant_meguro --year 2024 --month 4 --mode skip_existing
    """
    import argparse

    parser = argparse.ArgumentParser(description="Monthly Invoicing Worker")
    parser.add_argument("--tenant", required=True, help="Tenant ID")
    parser.add_argument("--year", type=int, help="Billing year")
    parser.add_argument("--month", type=int, help="Billing month")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in GenerationMode],
        help="replace (default) or skip_existing",
    )
    parser.add_argument(
        "--all-or-nothing", action="store_true", help="Abort on the first client failure"
    )
    parser.add_argument("--actor", default="monthly_invoicing", help="Recorded as generated_by")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    worker = MonthlyInvoicingWorker()

    try:
        result = await worker.run_once(
            tenant_id=args.tenant,
            year=args.year,
            month=args.month,
            mode=args.mode,
            all_or_nothing=args.all_or_nothing,
            actor=args.actor,
        )
        if result.is_err():
            print(f"Invoice generation failed: {result.error.code} {result.error.message}")
            return 1

        summary = result.value
        print(f"Invoice generation complete:")
        print(f"  Generated: {summary.generated} (replaced {summary.replaced})")
        print(f"  Skipped existing: {summary.skipped_existing}")
        print(f"  Skipped fixed: {summary.skipped_fixed}")
        print(f"  Removed: {summary.removed}")
        print(f"  Failed: {summary.failed}")
        for failure in summary.failures:
            print(f"    client {failure.client_id}: {failure.code} {failure.message}")
        print(f"  Execution time: {summary.execution_time_ms}ms")
        return 0 if summary.failed == 0 else 2
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
        return 130
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
