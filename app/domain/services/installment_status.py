# app/domain/services/installment_status.py
from datetime import date
from typing import Optional, Union

from app.domain.models.installment import InstallmentStatus


def resolve_status(stored_status: Optional[str], due_date: Union[date, str, None], today: date) -> InstallmentStatus:
    """
    El almacén solo guarda 'aberto' o 'pago'; 'vencido' se calcula al leer:
    una parcela no pagada con vencimiento anterior a hoy está vencida.
    """
    if stored_status == InstallmentStatus.PAID.value:
        return InstallmentStatus.PAID
    if isinstance(due_date, str):
        due_date = date.fromisoformat(due_date[:10]) if due_date else None
    if due_date is not None and due_date < today:
        return InstallmentStatus.OVERDUE
    return InstallmentStatus.OPEN
