# app/domain/errors.py


class IngestionError(Exception):
    """Error base del pipeline de ingesta. `kind` identifica el tipo en los resultados."""
    kind = "unexpected_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedDocument(IngestionError):
    """Falta alguna de las estructuras obligatorias del documento (infNFe, ide, emit, total)."""
    kind = "malformed_document"


class StoreError(IngestionError):
    """El almacén remoto rechazó la operación (restricción, conectividad...)."""
    kind = "store_error"


class DuplicateDocument(IngestionError):
    kind = "duplicate_document"


class UnexpectedError(IngestionError):
    kind = "unexpected_error"
