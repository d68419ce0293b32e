from datetime import date

from conftest import InMemoryGateway

from app.application.use_cases.manage_installments import ManageInstallmentsUseCase
from app.domain.models.installment import InstallmentStatus
from app.domain.ports.persistence_gateway import INSTALLMENTS_COLLECTION
from app.domain.services.installment_status import resolve_status

TODAY = date(2024, 3, 10)


def seed(gateway):
    rows = [
        {"descricao": "NFe 1 - Alfa", "fornecedor": "Alfa Ltda", "valor": 100.0, "data_vencimento": "2024-03-01", "status": "aberto"},
        {"descricao": "NFe 2 - Beta", "fornecedor": "Beta SA", "valor": 200.0, "data_vencimento": "2024-03-20", "status": "aberto"},
        {"descricao": "NFe 3 - Alfa", "fornecedor": "Alfa Ltda", "valor": 300.0, "data_vencimento": "2024-02-01", "status": "pago"},
    ]
    return [gateway.insert(INSTALLMENTS_COLLECTION, row)["id"] for row in rows]


def test_resolve_status():
    assert resolve_status("pago", date(2020, 1, 1), TODAY) == InstallmentStatus.PAID
    assert resolve_status("aberto", date(2024, 3, 9), TODAY) == InstallmentStatus.OVERDUE
    assert resolve_status("aberto", TODAY, TODAY) == InstallmentStatus.OPEN
    assert resolve_status("aberto", "2024-03-11", TODAY) == InstallmentStatus.OPEN


def test_list_computes_status_and_sorts_by_due_date(gateway):
    seed(gateway)
    views = ManageInstallmentsUseCase(gateway, clock=lambda: TODAY).list_installments()

    assert [v.description for v in views] == ["NFe 3 - Alfa", "NFe 1 - Alfa", "NFe 2 - Beta"]
    assert [v.status for v in views] == [InstallmentStatus.PAID, InstallmentStatus.OVERDUE, InstallmentStatus.OPEN]
    assert views[1].stored_status == "aberto"


def test_list_filters(gateway):
    seed(gateway)
    use_case = ManageInstallmentsUseCase(gateway, clock=lambda: TODAY)

    assert [v.description for v in use_case.list_installments(status=InstallmentStatus.OVERDUE)] == ["NFe 1 - Alfa"]
    assert len(use_case.list_installments(supplier="alfa")) == 2
    assert [v.description for v in use_case.list_installments(due_from=date(2024, 3, 1), due_to=date(2024, 3, 15))] == ["NFe 1 - Alfa"]


def test_mark_as_paid_and_cancel(gateway):
    ids = seed(gateway)
    use_case = ManageInstallmentsUseCase(gateway, clock=lambda: TODAY)

    result = use_case.mark_as_paid(ids[:2], payment_method="PIX")

    assert result.updated == ids[:2]
    assert result.errors == []
    row = gateway.collections[INSTALLMENTS_COLLECTION][ids[0]]
    assert row["status"] == "pago"
    assert row["data_pagamento"] == "2024-03-10"
    assert row["forma_pagamento"] == "PIX"

    use_case.cancel_payment([ids[0]])
    assert row["status"] == "aberto"
    assert row["data_pagamento"] is None


def test_bulk_action_reports_missing_ids(gateway):
    ids = seed(gateway)
    result = ManageInstallmentsUseCase(gateway).delete_installments([ids[0], "missing"])

    assert result.updated == [ids[0]]
    assert [e.source for e in result.errors] == ["missing"]
    assert len(gateway.rows(INSTALLMENTS_COLLECTION)) == 2


def test_store_failure_is_reported_per_id():
    gateway = InMemoryGateway(fail_on={INSTALLMENTS_COLLECTION})
    result = ManageInstallmentsUseCase(gateway).mark_as_paid(["a", "b"])

    assert result.updated == []
    assert len(result.errors) == 2


def test_summary_totals_by_computed_status(gateway):
    ids = seed(gateway)
    gateway.insert(INSTALLMENTS_COLLECTION, {
        "descricao": "NFe 4 - Gama", "fornecedor": "Gama ME", "valor": 50.0, "data_vencimento": "2024-03-10", "status": "aberto",
    })
    gateway.update(INSTALLMENTS_COLLECTION, ids[2], {"data_pagamento": "2024-02-28"})
    gateway.update(INSTALLMENTS_COLLECTION, ids[1], {"status": "pago", "data_pagamento": "2024-03-05"})
    use_case = ManageInstallmentsUseCase(gateway, clock=lambda: TODAY)

    summary = use_case.summarize()

    assert (summary.open.count, summary.open.amount) == (1, 50.0)
    assert (summary.overdue.count, summary.overdue.amount) == (1, 100.0)
    assert (summary.paid.count, summary.paid.amount) == (2, 500.0)
    assert (summary.total.count, summary.total.amount) == (4, 650.0)
    assert (summary.due_today.count, summary.due_today.amount) == (1, 50.0)
    assert (summary.paid_this_month.count, summary.paid_this_month.amount) == (1, 200.0)


def test_summary_respects_supplier_filter(gateway):
    seed(gateway)
    summary = ManageInstallmentsUseCase(gateway, clock=lambda: TODAY).summarize(supplier="beta")

    assert summary.total.count == 1
    assert summary.open.amount == 200.0
    assert summary.model_dump(by_alias=True)["dueToday"] == {"count": 0, "amount": 0.0}
