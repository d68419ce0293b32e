# app/infrastructure/api/dependencies.py
from typing import Iterator

from app.domain.ports.persistence_gateway import PersistenceGateway
from app.infrastructure.factory import gateway_scope


def get_gateway() -> Iterator[PersistenceGateway]:
    with gateway_scope() as gateway:
        yield gateway
