# app/infrastructure/celery/worker.py
import base64
import logging
from typing import List, Dict

from celery import Celery

import config
from app.domain.models.batch_result import UploadedDocument
from app.infrastructure.factory import gateway_scope, build_batch_use_case

celery_app = Celery(
    'tasks',
    broker=config.CELERY_BROKER_URL,
    backend=None
)

celery_app.conf.update(
    # El resumen del lote queda en los logs; no hay backend de resultados
    task_ignore_result=True
)

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - [%(funcName)s] - %(message)s')


def decode_documents(payload: List[Dict[str, str]]) -> List[UploadedDocument]:
    return [
        UploadedDocument(source=item['source'], content=base64.b64decode(item['content_b64']))
        for item in payload
    ]


@celery_app.task(name="tasks.process_document_batch")
def process_document_batch(payload: List[Dict[str, str]]) -> dict:
    documents = decode_documents(payload)
    logging.info(f">>> INICIO DE LA TAREA: {len(documents)} documento(s).")
    with gateway_scope() as gateway:
        result = build_batch_use_case(gateway).execute(documents)

    if not result.success:
        logging.error(f"Ningún documento del lote fue procesado. Errores: {[e.model_dump() for e in result.errors]}")
    else:
        logging.info(f"Lote procesado: {result.processed_count} ok, {result.error_count} con error.")
    return result.model_dump(by_alias=True)
