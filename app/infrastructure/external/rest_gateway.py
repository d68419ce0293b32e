# app/infrastructure/external/rest_gateway.py
import logging
from typing import Any, Dict, List, Optional

import requests

from app.domain.errors import StoreError
from app.domain.ports.persistence_gateway import PersistenceGateway

logger = logging.getLogger(__name__)


class RestPersistenceGateway(PersistenceGateway):
    """
    Adaptador para la API REST del backend-as-a-service (estilo PostgREST):
    /rest/v1/<colección>, filtros `columna=eq.valor` y
    `Prefer: return=representation` para recibir el registro creado.
    """

    def __init__(self, base_url: str, service_key: str, timeout: int = 30, session: Optional[requests.Session] = None):
        if not base_url or not service_key:
            raise ValueError("Faltan BAAS_URL o BAAS_SERVICE_KEY para el almacén REST")
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": service_key,
            "Authorization": f"Bearer {service_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        })

    def _url(self, collection: str) -> str:
        return f"{self.base_url}/rest/v1/{collection}"

    @staticmethod
    def _eq_filters(filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
        return {key: f"eq.{value}" for key, value in (filters or {}).items()}

    def _request(self, method: str, collection: str, **kwargs) -> Any:
        try:
            response = self.session.request(method, self._url(collection), timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            detail = e.response.text if e.response is not None else str(e)
            logger.error(f"[{collection}] Error en {method} al almacén: {detail}")
            raise StoreError(f"{method} {collection} failed: {detail}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise StoreError(f"Invalid response from store for '{collection}': {response.text}") from e

    @staticmethod
    def _single(rows: Any, collection: str) -> Dict[str, Any]:
        if isinstance(rows, list):
            if not rows:
                raise StoreError(f"Store returned no rows for '{collection}'")
            return rows[0]
        if isinstance(rows, dict):
            return rows
        raise StoreError(f"Unexpected response from store for '{collection}'")

    def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        return self._single(self._request("POST", collection, json=record), collection)

    def select(self, collection: str, filters: Optional[Dict[str, Any]] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"select": "*", **self._eq_filters(filters)}
        if limit is not None:
            params["limit"] = str(limit)
        return self._request("GET", collection, params=params) or []

    def update(self, collection: str, record_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._request("PATCH", collection, params=self._eq_filters({"id": record_id}), json=changes)
        return self._single(rows, collection)

    def delete(self, collection: str, record_id: str) -> None:
        # Con return=representation, un DELETE sin coincidencias responde 200 y []
        rows = self._request("DELETE", collection, params=self._eq_filters({"id": record_id}))
        self._single(rows, collection)
