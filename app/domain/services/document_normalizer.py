# app/domain/services/document_normalizer.py
import logging
import math

from app.domain.models.fiscal_document import RawFields, FiscalDocument

logger = logging.getLogger(__name__)

ACCESS_KEY_PREFIX = "NFe"


def strip_access_key_prefix(value: str) -> str:
    return value[len(ACCESS_KEY_PREFIX):] if value.startswith(ACCESS_KEY_PREFIX) else value


def truncate_issue_date(value: str) -> str:
    """'2024-05-01T10:00:00-03:00' -> '2024-05-01'. Un valor vacío sigue vacío."""
    return value.split('T', 1)[0]


def parse_amount(value: str) -> float:
    """Decimal con punto. Cualquier valor no numérico, infinito o negativo se toma como 0."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        logger.warning(f"Valor monetario fuera de rango '{value}'. Se usa 0.")
        return 0.0
    return amount


class DocumentNormalizer:
    """Convierte los campos crudos en un FiscalDocument tipado. Nunca falla."""

    def normalize(self, raw: RawFields) -> FiscalDocument:
        return FiscalDocument(
            access_key=strip_access_key_prefix(raw.access_key_attr),
            number=raw.number,
            series=raw.series,
            issue_date=truncate_issue_date(raw.issue_timestamp),
            issuer_tax_id=raw.issuer_tax_id,
            issuer_name=raw.issuer_name,
            recipient_tax_id=raw.recipient_tax_id,
            recipient_name=raw.recipient_name,
            total_amount=parse_amount(raw.total),
            icms_amount=parse_amount(raw.icms),
            ipi_amount=parse_amount(raw.ipi),
            pis_amount=parse_amount(raw.pis),
            cofins_amount=parse_amount(raw.cofins),
            raw_content=raw.raw_content,
        )
