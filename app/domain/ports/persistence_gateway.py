# app/domain/ports/persistence_gateway.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

DOCUMENTS_COLLECTION = "nfe_data"
INSTALLMENTS_COLLECTION = "ap_installments"


class PersistenceGateway(ABC):
    """
    Puerto hacia el almacén remoto (backend-as-a-service). Cada llamada es
    una petición/respuesta independiente; cualquier fallo se reporta como StoreError.
    """

    @abstractmethod
    def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Inserta `record` y retorna el registro creado, incluido su `id` generado."""
        pass

    @abstractmethod
    def select(self, collection: str, filters: Optional[Dict[str, Any]] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Retorna los registros cuyos campos coinciden exactamente con `filters`."""
        pass

    @abstractmethod
    def update(self, collection: str, record_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Actualiza un registro por id y retorna su versión actualizada."""
        pass

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> None:
        pass
