"""Background workers for the billing service"""
from .monthly_invoicing import MonthlyInvoicingWorker

__all__ = ["MonthlyInvoicingWorker"]
