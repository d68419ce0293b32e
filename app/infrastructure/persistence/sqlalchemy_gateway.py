# app/infrastructure/persistence/sqlalchemy_gateway.py
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import Date
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.errors import StoreError
from app.domain.ports.persistence_gateway import PersistenceGateway
from .models import NotaFiscal, Parcela

logger = logging.getLogger(__name__)

COLLECTION_MODELS = {
    NotaFiscal.__tablename__: NotaFiscal,
    Parcela.__tablename__: Parcela,
}


class SQLAlchemyPersistenceGateway(PersistenceGateway):
    """
    Implementación del almacén sobre SQLAlchemy. Cada llamada hace su propio
    commit, igual que una petición independiente al backend remoto.
    """

    def __init__(self, db: Session):
        self.db = db

    def _model(self, collection: str):
        model = COLLECTION_MODELS.get(collection)
        if model is None:
            raise StoreError(f"Colección desconocida: '{collection}'")
        return model

    def _coerce(self, model, record: Dict[str, Any]) -> Dict[str, Any]:
        """Descarta claves sin columna y convierte fechas ISO a `date`."""
        columns = model.__table__.columns
        values = {}
        for key, value in record.items():
            if key not in columns:
                continue
            if isinstance(value, str) and isinstance(columns[key].type, Date):
                value = date.fromisoformat(value) if value else None
            values[key] = value
        return values

    def _to_dict(self, row) -> Dict[str, Any]:
        data = {}
        for column in row.__table__.columns:
            value = getattr(row, column.name)
            if isinstance(value, Decimal):
                value = float(value)
            elif isinstance(value, datetime):
                value = value.isoformat()
            data[column.name] = value
        return data

    def _run(self, collection: str, operation):
        try:
            result = operation()
            self.db.commit()
            return result
        except StoreError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[{collection}] Error de base de datos: {e}")
            raise StoreError(f"Database error on '{collection}': {e.__class__.__name__}") from e
        except ValueError as e:
            self.db.rollback()
            raise StoreError(f"Invalid value for '{collection}': {e}") from e

    def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        model = self._model(collection)

        def operation():
            row = model(**self._coerce(model, record))
            self.db.add(row)
            self.db.flush()
            return self._to_dict(row)

        return self._run(collection, operation)

    def select(self, collection: str, filters: Optional[Dict[str, Any]] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        model = self._model(collection)

        def operation():
            query = self.db.query(model)
            for key, value in self._coerce(model, filters or {}).items():
                query = query.filter(getattr(model, key) == value)
            if limit is not None:
                query = query.limit(limit)
            return [self._to_dict(row) for row in query.all()]

        return self._run(collection, operation)

    def update(self, collection: str, record_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        model = self._model(collection)

        def operation():
            row = self.db.query(model).filter(model.id == record_id).first()
            if row is None:
                raise StoreError(f"Record {record_id} not found in '{collection}'")
            for key, value in self._coerce(model, changes).items():
                setattr(row, key, value)
            self.db.flush()
            return self._to_dict(row)

        return self._run(collection, operation)

    def delete(self, collection: str, record_id: str) -> None:
        model = self._model(collection)

        def operation():
            deleted = self.db.query(model).filter(model.id == record_id).delete()
            if not deleted:
                raise StoreError(f"Record {record_id} not found in '{collection}'")

        self._run(collection, operation)
