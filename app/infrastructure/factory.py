# app/infrastructure/factory.py
from contextlib import contextmanager
from typing import Iterator

import config
from app.application.use_cases.process_document_batch import ProcessDocumentBatchUseCase
from app.application.use_cases.manage_installments import ManageInstallmentsUseCase
from app.domain.ports.persistence_gateway import PersistenceGateway
from app.domain.services.installment_deriver import (
    InstallmentDeriver,
    IssueDateOffsetPolicy,
    ProcessingDateOffsetPolicy,
)


@contextmanager
def gateway_scope() -> Iterator[PersistenceGateway]:
    """Construye el almacén configurado y libera sus recursos al terminar."""
    if config.PERSISTENCE_BACKEND == "rest":
        from app.infrastructure.external.rest_gateway import RestPersistenceGateway
        gateway = RestPersistenceGateway(config.BAAS_URL, config.BAAS_SERVICE_KEY, timeout=config.BAAS_TIMEOUT_SECONDS)
        try:
            yield gateway
        finally:
            gateway.session.close()
        return

    from app.infrastructure.persistence.database import SessionLocal
    from app.infrastructure.persistence.sqlalchemy_gateway import SQLAlchemyPersistenceGateway
    db_session = SessionLocal()
    try:
        yield SQLAlchemyPersistenceGateway(db_session)
    finally:
        db_session.close()


def build_deriver() -> InstallmentDeriver:
    if config.DUE_DATE_POLICY == "issue":
        policy = IssueDateOffsetPolicy(config.DUE_DATE_OFFSET_DAYS)
    else:
        policy = ProcessingDateOffsetPolicy(config.DUE_DATE_OFFSET_DAYS)
    return InstallmentDeriver(due_date_policy=policy)


def build_batch_use_case(gateway: PersistenceGateway) -> ProcessDocumentBatchUseCase:
    return ProcessDocumentBatchUseCase(
        gateway=gateway,
        deriver=build_deriver(),
        enforce_unique_access_key=config.ENFORCE_UNIQUE_ACCESS_KEY
    )


def build_installments_use_case(gateway: PersistenceGateway) -> ManageInstallmentsUseCase:
    return ManageInstallmentsUseCase(gateway)
