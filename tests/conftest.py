import uuid
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from app.domain.errors import StoreError
from app.domain.ports.persistence_gateway import PersistenceGateway

FIXTURES = Path(__file__).parent / "fixtures"


class InMemoryGateway(PersistenceGateway):
    """Almacén en memoria. `fail_on` fuerza StoreError en las colecciones indicadas."""

    def __init__(self, fail_on: Optional[set] = None):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.fail_on = set(fail_on or ())
        self.calls: List[tuple] = []

    def _check(self, operation: str, collection: str):
        self.calls.append((operation, collection))
        if collection in self.fail_on:
            raise StoreError(f"insert into {collection} rejected")

    def insert(self, collection, record):
        self._check("insert", collection)
        row = dict(record, id=str(uuid.uuid4()))
        self.collections.setdefault(collection, {})[row["id"]] = row
        return dict(row)

    def select(self, collection, filters=None, limit=None):
        self._check("select", collection)
        rows = [
            dict(row) for row in self.collections.get(collection, {}).values()
            if all(row.get(k) == v for k, v in (filters or {}).items())
        ]
        return rows[:limit] if limit is not None else rows

    def update(self, collection, record_id, changes):
        self._check("update", collection)
        row = self.collections.get(collection, {}).get(record_id)
        if row is None:
            raise StoreError(f"Record {record_id} not found in '{collection}'")
        row.update(changes)
        return dict(row)

    def delete(self, collection, record_id):
        self._check("delete", collection)
        if self.collections.get(collection, {}).pop(record_id, None) is None:
            raise StoreError(f"Record {record_id} not found in '{collection}'")

    def rows(self, collection) -> List[Dict[str, Any]]:
        return list(self.collections.get(collection, {}).values())


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def nfe_xml() -> bytes:
    return (FIXTURES / "nfe_completa.xml").read_bytes()


@pytest.fixture
def nfe_without_recipient_xml() -> bytes:
    return (FIXTURES / "nfe_sin_destinatario.xml").read_bytes()


@pytest.fixture
def fixed_clock():
    return lambda: date(2024, 1, 1)
