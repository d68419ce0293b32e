# app/domain/ports/due_date_policy.py
from abc import ABC, abstractmethod
from datetime import date

from app.domain.models.fiscal_document import FiscalDocument


class DueDatePolicy(ABC):
    """Puerto para la regla que fija el vencimiento de la parcela derivada."""

    @abstractmethod
    def due_date(self, document: FiscalDocument, today: date) -> date:
        pass
