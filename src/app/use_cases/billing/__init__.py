"""Billing domain use cases"""
from .generate_invoices import GenerateInvoices
from .get_invoice import GetInvoice
from .list_invoices import ListInvoices
from .build_receipt import BuildReceipt
from .export_transmission_csv import ExportTransmissionCsv
from .finalize_invoice import FinalizeInvoice
from .configure_tenant_billing import ConfigureTenantBilling
from .dtos import (
    GenerationMode,
    GenerateInvoicesCommandDTO,
    GenerateInvoicesResultDTO,
    InvoiceSummaryDTO,
    ClientFailureDTO,
    InvoiceLineDTO,
    InvoiceDetailDTO,
    InvoiceListDTO,
    InvoiceListMetaDTO,
    ReceiptItemDTO,
    ReceiptDTO,
    TransmissionCsvDTO,
    ConfigureTenantBillingCommandDTO,
    TenantBillingSettingsDTO,
)

__all__ = [
    "GenerateInvoices",
    "GetInvoice",
    "ListInvoices",
    "BuildReceipt",
    "ExportTransmissionCsv",
    "FinalizeInvoice",
    "ConfigureTenantBilling",
    "GenerationMode",
    "GenerateInvoicesCommandDTO",
    "GenerateInvoicesResultDTO",
    "InvoiceSummaryDTO",
    "ClientFailureDTO",
    "InvoiceLineDTO",
    "InvoiceDetailDTO",
    "InvoiceListDTO",
    "InvoiceListMetaDTO",
    "ReceiptItemDTO",
    "ReceiptDTO",
    "TransmissionCsvDTO",
    "ConfigureTenantBillingCommandDTO",
    "TenantBillingSettingsDTO",
]
