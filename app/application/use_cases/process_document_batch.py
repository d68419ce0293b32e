# app/application/use_cases/process_document_batch.py
import logging
from typing import Optional, Sequence

from app.domain.errors import IngestionError, DuplicateDocument, StoreError, UnexpectedError
from app.domain.models.batch_result import (
    BatchResult,
    DocumentFailed,
    DocumentOutcome,
    DocumentProcessed,
    FileError,
    UploadedDocument,
)
from app.domain.models.fiscal_document import FiscalDocument
from app.domain.ports.persistence_gateway import (
    PersistenceGateway,
    DOCUMENTS_COLLECTION,
    INSTALLMENTS_COLLECTION,
)
from app.domain.services.document_normalizer import DocumentNormalizer
from app.domain.services.field_extractor import FieldExtractor
from app.domain.services.installment_deriver import InstallmentDeriver

logger = logging.getLogger(__name__)


class ProcessDocumentBatchUseCase:
    def __init__(
        self,
        gateway: PersistenceGateway,
        extractor: Optional[FieldExtractor] = None,
        normalizer: Optional[DocumentNormalizer] = None,
        deriver: Optional[InstallmentDeriver] = None,
        enforce_unique_access_key: bool = False
    ):
        self.gateway = gateway
        self.extractor = extractor or FieldExtractor()
        self.normalizer = normalizer or DocumentNormalizer()
        self.deriver = deriver or InstallmentDeriver()
        self.enforce_unique_access_key = enforce_unique_access_key

    def _insert(self, collection: str, record: dict) -> str:
        created = self.gateway.insert(collection, record)
        record_id = created.get('id') if created else None
        if not record_id:
            raise StoreError(f"El almacén no retornó un id para el registro en '{collection}'.")
        return str(record_id)

    def _check_unique(self, document: FiscalDocument):
        if not document.access_key:
            return
        existing = self.gateway.select(DOCUMENTS_COLLECTION, {'chave_acesso': document.access_key}, limit=1)
        if existing:
            raise DuplicateDocument(f"Document with access key {document.access_key} already exists")

    def process_document(self, upload: UploadedDocument) -> DocumentOutcome:
        """
        Pipeline de un documento: extracción -> normalización -> persistencia
        de la NFe -> derivación y persistencia de la parcela.
        Nunca lanza excepciones: todo fallo se retorna como DocumentFailed.
        """
        source = upload.source
        document_id = None
        try:
            raw = self.extractor.extract_payload(upload.content)
            document = self.normalizer.normalize(raw)

            if self.enforce_unique_access_key:
                self._check_unique(document)

            document_id = self._insert(DOCUMENTS_COLLECTION, document.to_record())
            logger.info(f"[{source}] NFe {document.number} guardada con id {document_id}.")

            installment = self.deriver.derive(document, document_id)
            # Si esta inserción falla, la NFe ya quedó guardada (no hay rollback)
            installment_id = self._insert(INSTALLMENTS_COLLECTION, installment.to_record())
            logger.info(f"[{source}] Parcela {installment_id} creada con vencimiento {installment.due_date}.")

            return DocumentProcessed(source=source, document_id=document_id, installment_id=installment_id)

        except IngestionError as e:
            logger.warning(f"[{source}] Documento rechazado ({e.kind}): {e.message}")
            return DocumentFailed(source=source, kind=e.kind, message=e.message, document_id=document_id)
        except Exception as e:
            logger.error(f"[{source}] Error inesperado procesando el documento.", exc_info=True)
            return DocumentFailed(source=source, kind=UnexpectedError.kind, message=str(e) or e.__class__.__name__, document_id=document_id)

    def execute(self, documents: Sequence[UploadedDocument]) -> BatchResult:
        """
        Procesa los documentos en orden y de forma secuencial. Un fallo solo
        afecta a su propio documento; el lote se considera exitoso si al menos
        un documento fue procesado.
        """
        logger.info(f"Procesando lote de {len(documents)} documento(s)...")
        result = BatchResult()

        for upload in documents:
            outcome = self.process_document(upload)
            if isinstance(outcome, DocumentProcessed):
                result.processed_count += 1
                result.document_ids.append(outcome.document_id)
                result.installment_ids.append(outcome.installment_id)
            else:
                result.error_count += 1
                result.errors.append(FileError(source=outcome.source, message=outcome.message))

        result.success = result.processed_count > 0
        logger.info(f"Lote terminado: {result.processed_count} procesado(s), {result.error_count} con error.")
        return result
