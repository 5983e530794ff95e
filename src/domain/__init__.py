from .base import BaseModel
from .tenant import Tenant
from .client import Client
from .contract import Contract
from .attendance import Attendance, AttendanceStatus
from .price_item import PriceItem
from .invoice import Invoice, InvoiceStatus
from .invoice_line import InvoiceLine

__all__ = [
    "BaseModel",
    "Tenant",
    "Client",
    "Contract",
    "Attendance",
    "AttendanceStatus",
    "PriceItem",
    "Invoice",
    "InvoiceStatus",
    "InvoiceLine",
]
