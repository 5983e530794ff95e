from .tenant_repository import TenantRepository
from .client_repository import ClientRepository
from .contract_repository import ContractRepository
from .attendance_repository import AttendanceRepository
from .price_item_repository import PriceItemRepository
from .invoice_repository import InvoiceRepository
from .invoice_line_repository import InvoiceLineRepository

__all__ = [
    "TenantRepository",
    "ClientRepository",
    "ContractRepository",
    "AttendanceRepository",
    "PriceItemRepository",
    "InvoiceRepository",
    "InvoiceLineRepository",
]
