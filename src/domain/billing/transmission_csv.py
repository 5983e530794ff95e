"""Claim transmission CSV

Record types: "1" header per invoice, "2" one per receipt item, "3" summary.
"""

import csv
import io
import re
from typing import List
from src.domain.billing.receipt import ReceiptItem


class TransmissionCsvGenerator:
    def __init__(self, invoice, receipt_items: List[ReceiptItem], tenant_slug: str = ""):
        if not all(isinstance(item, ReceiptItem) for item in receipt_items):
            raise TypeError("receipt_items must be a list of ReceiptItem")
        self.invoice = invoice
        self.receipt_items = receipt_items
        self.tenant_slug = tenant_slug or ""

    def generate(self) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(self._base_record())
        for item in self.receipt_items:
            writer.writerow(self._detail_record(item))
        writer.writerow(self._summary_record())
        return buffer.getvalue()

    def _base_record(self) -> list:
        return [
            "1",
            self.invoice.billing_month.strftime("%Y%m"),
            self.business_office_number(),
            str(self.invoice.client_id),
            str(self.invoice.copayment_rate),
        ]

    @staticmethod
    def _detail_record(item: ReceiptItem) -> list:
        return [
            "2",
            item.service_code,
            str(item.count),
            str(item.unit_score.value),
            str(item.total_units.value),
        ]

    def _summary_record(self) -> list:
        total_units = sum(item.total_units.value for item in self.receipt_items)
        return [
            "3",
            str(total_units),
            str(self.invoice.insurance_claim_amount),
            str(self.invoice.total_amount),
        ]

    def business_office_number(self) -> str:
        candidate = re.sub(r"\D", "", self.tenant_slug)
        if not candidate:
            candidate = re.sub(r"\D", "", str(self.invoice.tenant_id)) or "0"
        return candidate.rjust(10, "0")[-10:]
