# app/domain/models/batch_result.py
from typing import List, Optional, Union, Literal
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UploadedDocument(BaseModel):
    """Un archivo subido: su nombre (u otro identificador) y el contenido crudo."""
    source: str
    content: Union[bytes, str]


class DocumentProcessed(BaseModel):
    outcome: Literal["ok"] = "ok"
    source: str
    document_id: str
    installment_id: str


class DocumentFailed(BaseModel):
    outcome: Literal["error"] = "error"
    source: str
    kind: str
    message: str
    # Si el documento llegó a persistirse antes del fallo de la parcela
    document_id: Optional[str] = None


DocumentOutcome = Union[DocumentProcessed, DocumentFailed]


class FileError(BaseModel):
    source: str
    message: str


class BatchResult(BaseModel):
    """Resumen de un lote. Se serializa en camelCase para la interfaz."""
    success: bool = False
    processed_count: int = 0
    error_count: int = 0
    errors: List[FileError] = Field(default_factory=list)
    document_ids: List[str] = Field(default_factory=list)
    installment_ids: List[str] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BulkActionResult(BaseModel):
    updated: List[str] = Field(default_factory=list)
    errors: List[FileError] = Field(default_factory=list)
