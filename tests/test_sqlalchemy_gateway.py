from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.application.use_cases.process_document_batch import ProcessDocumentBatchUseCase
from app.domain.errors import StoreError
from app.domain.models.batch_result import UploadedDocument
from app.domain.ports.persistence_gateway import DOCUMENTS_COLLECTION, INSTALLMENTS_COLLECTION
from app.domain.services.installment_deriver import InstallmentDeriver
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.sqlalchemy_gateway import SQLAlchemyPersistenceGateway


@pytest.fixture
def sql_gateway():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine)()
    try:
        yield SQLAlchemyPersistenceGateway(session)
    finally:
        session.close()
        engine.dispose()


def test_batch_persists_document_and_installment(sql_gateway, nfe_xml):
    use_case = ProcessDocumentBatchUseCase(sql_gateway, deriver=InstallmentDeriver(clock=lambda: date(2024, 1, 1)))

    result = use_case.execute([UploadedDocument(source="a.xml", content=nfe_xml)])

    assert result.success is True
    [document] = sql_gateway.select(DOCUMENTS_COLLECTION)
    [installment] = sql_gateway.select(INSTALLMENTS_COLLECTION, {"nfe_id": document["id"]})
    assert document["data_emissao"] == date(2024, 5, 1)
    assert document["valor_total"] == 1575.5
    assert installment["data_vencimento"] == date(2024, 1, 31)
    assert installment["status"] == "aberto"


def test_document_without_issue_date_is_stored_with_null_date(sql_gateway):
    created = sql_gateway.insert(DOCUMENTS_COLLECTION, {"numero_nfe": "1", "data_emissao": None, "campo_extra": "x"})

    assert created["id"]
    assert created["data_emissao"] is None
    assert "campo_extra" not in created


def test_update_and_delete(sql_gateway):
    created = sql_gateway.insert(INSTALLMENTS_COLLECTION, {
        "descricao": "NFe 1 - Alfa", "fornecedor": "Alfa", "valor": 10.0, "data_vencimento": "2024-01-31",
    })

    updated = sql_gateway.update(INSTALLMENTS_COLLECTION, created["id"], {"status": "pago", "data_pagamento": "2024-02-01"})
    assert updated["status"] == "pago"
    assert updated["data_pagamento"] == date(2024, 2, 1)

    sql_gateway.delete(INSTALLMENTS_COLLECTION, created["id"])
    assert sql_gateway.select(INSTALLMENTS_COLLECTION) == []


def test_constraint_violation_raises_store_error(sql_gateway):
    with pytest.raises(StoreError):
        sql_gateway.insert(INSTALLMENTS_COLLECTION, {"descricao": "sin fornecedor", "valor": 1.0, "data_vencimento": "2024-01-01"})

    # La sesión sigue siendo utilizable tras el rollback
    assert sql_gateway.select(INSTALLMENTS_COLLECTION) == []


def test_unknown_collection_and_missing_record(sql_gateway):
    with pytest.raises(StoreError):
        sql_gateway.insert("desconocida", {})
    with pytest.raises(StoreError):
        sql_gateway.update(INSTALLMENTS_COLLECTION, "no-existe", {"status": "pago"})
    with pytest.raises(StoreError):
        sql_gateway.delete(INSTALLMENTS_COLLECTION, "no-existe")


def test_installment_record_has_only_mapped_columns(sql_gateway):
    created = sql_gateway.insert(INSTALLMENTS_COLLECTION, {
        "descricao": "NFe 1 - Alfa", "fornecedor": "Alfa", "valor": 10.0, "data_vencimento": "2024-01-31",
        "observacoes": "ignorada",
    })

    assert "observacoes" not in created
    assert set(created) == {
        "id", "nfe_id", "descricao", "fornecedor", "valor", "valor_total_titulo", "data_vencimento", "categoria",
        "numero_documento", "numero_parcela", "total_parcelas", "status", "data_pagamento", "forma_pagamento",
        "created_at",
    }
