# app/infrastructure/api/routers/documents_router.py
import base64
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse

from app.domain.models.batch_result import BatchResult, FileError, UploadedDocument
from app.domain.ports.persistence_gateway import PersistenceGateway
from app.infrastructure.api.dependencies import get_gateway
from app.infrastructure.factory import build_batch_use_case

router = APIRouter(prefix="/api/v1/documents", tags=["Documentos"])


async def _read_uploads(xml_files: List[UploadFile]):
    """Separa los XML válidos de los archivos con otra extensión."""
    uploads, rejected = [], []
    for file in xml_files:
        filename = file.filename or ""
        if not filename.lower().endswith('.xml'):
            rejected.append(FileError(source=filename or "(sin nombre)", message="Only .xml files are accepted"))
            continue
        uploads.append(UploadedDocument(source=filename, content=await file.read()))
    return uploads, rejected


@router.post("/", response_model=BatchResult, summary="Procesar un lote de NFe en XML")
async def upload_documents(
    xml_files: List[UploadFile] = File(..., description="Archivos XML de las notas fiscales."),
    gateway: PersistenceGateway = Depends(get_gateway)
):
    """
    Procesa los XML en orden y retorna el resumen del lote. Responde 200 si al
    menos un documento fue procesado y 422 si ninguno lo fue.
    """
    uploads, rejected = await _read_uploads(xml_files)
    result = build_batch_use_case(gateway).execute(uploads)

    if rejected:
        result.errors = rejected + result.errors
        result.error_count += len(rejected)

    status_code = 200 if result.success else 422
    return JSONResponse(status_code=status_code, content=result.model_dump(by_alias=True))


@router.post("/async", status_code=202, summary="Encolar un lote de NFe para procesamiento en segundo plano")
async def upload_documents_async(
    xml_files: List[UploadFile] = File(..., description="Archivos XML de las notas fiscales.")
):
    # Importación diferida: el worker configura Celery al importarse
    from app.infrastructure.celery.worker import celery_app

    uploads, rejected = await _read_uploads(xml_files)
    if not uploads:
        raise HTTPException(status_code=400, detail="No se recibió ningún archivo XML.")

    payload = [
        {"source": u.source, "content_b64": base64.b64encode(u.content).decode("ascii")}
        for u in uploads
    ]
    task = celery_app.send_task('tasks.process_document_batch', args=[payload])
    return {
        "status": "processing_queued",
        "task_id": task.id,
        "rejected": [r.model_dump() for r in rejected],
    }
