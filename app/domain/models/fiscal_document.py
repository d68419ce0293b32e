# app/domain/models/fiscal_document.py
from typing import Dict, Any
from pydantic import BaseModel, Field, ConfigDict

DOCUMENT_TYPE_NFE = "NFe"


class RawFields(BaseModel):
    """
    Campos en texto plano tal como salen del XML. Ningún campo es obligatorio:
    un nodo ausente se representa con cadena vacía.
    """
    access_key_attr: str = ""
    number: str = ""
    series: str = ""
    issue_timestamp: str = ""
    issuer_tax_id: str = ""
    issuer_name: str = ""
    recipient_tax_id: str = ""
    recipient_name: str = ""
    total: str = ""
    icms: str = ""
    ipi: str = ""
    pis: str = ""
    cofins: str = ""
    raw_content: str = ""

    model_config = ConfigDict(frozen=True)


class FiscalDocument(BaseModel):
    """
    Forma canónica de una NFe. Los alias corresponden a las columnas de la
    colección `nfe_data` del almacén.
    """
    # --- Identificación ---
    access_key: str = Field("", alias="chave_acesso")
    number: str = Field("", alias="numero_nfe")
    series: str = Field("", alias="serie")
    issue_date: str = Field("", alias="data_emissao")  # YYYY-MM-DD o ""

    # --- Partes ---
    issuer_tax_id: str = Field("", alias="cnpj_emitente")
    issuer_name: str = Field("", alias="nome_emitente")
    recipient_tax_id: str = Field("", alias="cnpj_destinatario")
    recipient_name: str = Field("", alias="nome_destinatario")

    # --- Valores ---
    total_amount: float = Field(0.0, alias="valor_total", ge=0)
    icms_amount: float = Field(0.0, alias="valor_icms", ge=0)
    ipi_amount: float = Field(0.0, alias="valor_ipi", ge=0)
    pis_amount: float = Field(0.0, alias="valor_pis", ge=0)
    cofins_amount: float = Field(0.0, alias="valor_cofins", ge=0)

    raw_content: str = Field("", alias="xml_content")
    document_type: str = Field(DOCUMENT_TYPE_NFE, exclude=True)

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def tax_amounts(self) -> Dict[str, float]:
        return {
            "icms": self.icms_amount,
            "ipi": self.ipi_amount,
            "pis": self.pis_amount,
            "cofins": self.cofins_amount,
        }

    def to_record(self) -> Dict[str, Any]:
        """Registro listo para `PersistenceGateway.insert` (claves = columnas del almacén)."""
        record = self.model_dump(by_alias=True)
        # La columna data_emissao es de tipo fecha: vacío se guarda como NULL
        record["data_emissao"] = self.issue_date or None
        return record
