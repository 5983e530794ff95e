from .tenant_repository import SqlAlchemyTenantRepository
from .client_repository import SqlAlchemyClientRepository
from .contract_repository import SqlAlchemyContractRepository
from .attendance_repository import SqlAlchemyAttendanceRepository
from .price_item_repository import SqlAlchemyPriceItemRepository
from .invoice_repository import SqlAlchemyInvoiceRepository
from .invoice_line_repository import SqlAlchemyInvoiceLineRepository

__all__ = [
    "SqlAlchemyTenantRepository",
    "SqlAlchemyClientRepository",
    "SqlAlchemyContractRepository",
    "SqlAlchemyAttendanceRepository",
    "SqlAlchemyPriceItemRepository",
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyInvoiceLineRepository",
]
