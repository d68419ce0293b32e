# app/domain/services/installment_deriver.py
from datetime import date, timedelta
from typing import Callable, Optional

from app.domain.models.fiscal_document import FiscalDocument
from app.domain.models.installment import PayableInstallment, CATEGORY_NFE
from app.domain.ports.due_date_policy import DueDatePolicy

DEFAULT_DUE_DATE_OFFSET_DAYS = 30


class ProcessingDateOffsetPolicy(DueDatePolicy):
    """Vencimiento = fecha de procesamiento + N días corridos (no la fecha de emisión)."""

    def __init__(self, days: int = DEFAULT_DUE_DATE_OFFSET_DAYS):
        self.days = days

    def due_date(self, document: FiscalDocument, today: date) -> date:
        return today + timedelta(days=self.days)


class IssueDateOffsetPolicy(DueDatePolicy):
    """
    Vencimiento = fecha de emisión + N días. Si el documento no trae fecha
    de emisión válida, se cuenta desde la fecha de procesamiento.
    """

    def __init__(self, days: int = DEFAULT_DUE_DATE_OFFSET_DAYS):
        self.days = days

    def due_date(self, document: FiscalDocument, today: date) -> date:
        try:
            base = date.fromisoformat(document.issue_date)
        except ValueError:
            base = today
        return base + timedelta(days=self.days)


class InstallmentDeriver:
    def __init__(self, due_date_policy: Optional[DueDatePolicy] = None, clock: Callable[[], date] = date.today):
        self.due_date_policy = due_date_policy or ProcessingDateOffsetPolicy()
        self.clock = clock

    def derive(self, document: FiscalDocument, document_id: str) -> PayableInstallment:
        """Construye la primera (y única) parcela de la NFe persistida con id `document_id`."""
        return PayableInstallment(
            description=f"{document.document_type} {document.number} - {document.issuer_name}",
            supplier_name=document.issuer_name,
            amount=document.total_amount,
            total_title_amount=document.total_amount,
            due_date=self.due_date_policy.due_date(document, self.clock()),
            category=CATEGORY_NFE,
            document_ref=document_id,
            document_number=document.number,
        )
