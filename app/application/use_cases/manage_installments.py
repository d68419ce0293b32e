# app/application/use_cases/manage_installments.py
import logging
from datetime import date
from typing import Callable, Iterable, List, Optional

from app.domain.errors import StoreError
from app.domain.models.batch_result import BulkActionResult, FileError
from app.domain.models.installment import InstallmentStatus, InstallmentSummary, InstallmentView
from app.domain.ports.persistence_gateway import PersistenceGateway, INSTALLMENTS_COLLECTION
from app.domain.services.installment_status import resolve_status

logger = logging.getLogger(__name__)


class ManageInstallmentsUseCase:
    """Consulta de parcelas con estado calculado y acciones masivas (pagar, cancelar pago, eliminar)."""

    def __init__(self, gateway: PersistenceGateway, clock: Callable[[], date] = date.today):
        self.gateway = gateway
        self.clock = clock

    def _to_view(self, record: dict, today: date) -> InstallmentView:
        data = dict(record)
        data['id'] = str(data['id'])
        data['stored_status'] = data.get('status') or InstallmentStatus.OPEN.value
        data['status'] = resolve_status(data['stored_status'], data.get('data_vencimento'), today)
        return InstallmentView(**data)

    def list_installments(
        self,
        status: Optional[InstallmentStatus] = None,
        supplier: Optional[str] = None,
        due_from: Optional[date] = None,
        due_to: Optional[date] = None
    ) -> List[InstallmentView]:
        today = self.clock()
        views = [self._to_view(r, today) for r in self.gateway.select(INSTALLMENTS_COLLECTION)]

        if status is not None:
            views = [v for v in views if v.status == status]
        if supplier:
            needle = supplier.lower()
            views = [v for v in views if needle in v.supplier_name.lower()]
        if due_from is not None:
            views = [v for v in views if v.due_date >= due_from]
        if due_to is not None:
            views = [v for v in views if v.due_date <= due_to]

        return sorted(views, key=lambda v: (v.due_date, v.supplier_name))

    def summarize(
        self,
        supplier: Optional[str] = None,
        due_from: Optional[date] = None,
        due_to: Optional[date] = None
    ) -> InstallmentSummary:
        """
        Totales por estado calculado sobre las mismas parcelas que `list_installments`,
        más los contadores del panel: vencen hoy y pagadas en el mes en curso.
        """
        today = self.clock()
        summary = InstallmentSummary()
        by_status = {
            InstallmentStatus.OPEN: summary.open,
            InstallmentStatus.OVERDUE: summary.overdue,
            InstallmentStatus.PAID: summary.paid,
        }

        for view in self.list_installments(supplier=supplier, due_from=due_from, due_to=due_to):
            by_status[view.status].add(view.amount)
            summary.total.add(view.amount)
            if view.status == InstallmentStatus.OPEN and view.due_date == today:
                summary.due_today.add(view.amount)
            paid_on = view.payment_date
            if view.status == InstallmentStatus.PAID and paid_on and (paid_on.year, paid_on.month) == (today.year, today.month):
                summary.paid_this_month.add(view.amount)

        return summary

    def _apply(self, installment_ids: Iterable[str], action: Callable[[str], None], label: str) -> BulkActionResult:
        result = BulkActionResult()
        for installment_id in installment_ids:
            try:
                action(installment_id)
                result.updated.append(installment_id)
            except StoreError as e:
                logger.warning(f"[{installment_id}] No se pudo {label}: {e.message}")
                result.errors.append(FileError(source=installment_id, message=e.message))
        logger.info(f"Acción '{label}': {len(result.updated)} ok, {len(result.errors)} con error.")
        return result

    def mark_as_paid(
        self,
        installment_ids: Iterable[str],
        payment_date: Optional[date] = None,
        payment_method: Optional[str] = None,
        amount: Optional[float] = None
    ) -> BulkActionResult:
        changes = {
            'status': InstallmentStatus.PAID.value,
            'data_pagamento': (payment_date or self.clock()).isoformat(),
        }
        if payment_method:
            changes['forma_pagamento'] = payment_method
        if amount is not None:
            changes['valor'] = amount
        return self._apply(
            installment_ids,
            lambda i: self.gateway.update(INSTALLMENTS_COLLECTION, i, changes),
            "marcar como pagada"
        )

    def cancel_payment(self, installment_ids: Iterable[str]) -> BulkActionResult:
        changes = {
            'status': InstallmentStatus.OPEN.value,
            'data_pagamento': None,
            'forma_pagamento': None,
        }
        return self._apply(
            installment_ids,
            lambda i: self.gateway.update(INSTALLMENTS_COLLECTION, i, changes),
            "cancelar el pago"
        )

    def delete_installments(self, installment_ids: Iterable[str]) -> BulkActionResult:
        return self._apply(
            installment_ids,
            lambda i: self.gateway.delete(INSTALLMENTS_COLLECTION, i),
            "eliminar"
        )
