# app/domain/models/installment.py
from enum import Enum
from datetime import date
from typing import Dict, Any, Optional
from pydantic import AliasGenerator, BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

CATEGORY_NFE = "NFe"


class InstallmentStatus(str, Enum):
    OPEN = "aberto"
    OVERDUE = "vencido"
    PAID = "pago"


class PayableInstallment(BaseModel):
    """
    Parcela a pagar derivada de un documento fiscal. Los alias corresponden
    a las columnas de la colección `ap_installments`.
    """
    description: str = Field(alias="descricao")
    supplier_name: str = Field(alias="fornecedor")
    amount: float = Field(alias="valor")
    total_title_amount: float = Field(alias="valor_total_titulo")
    due_date: date = Field(alias="data_vencimento")
    category: str = Field(CATEGORY_NFE, alias="categoria")
    document_ref: str = Field(alias="nfe_id")
    document_number: str = Field("", alias="numero_documento")
    installment_number: int = Field(1, alias="numero_parcela")
    total_installments: int = Field(1, alias="total_parcelas")
    status: InstallmentStatus = InstallmentStatus.OPEN

    model_config = ConfigDict(populate_by_name=True, frozen=True, use_enum_values=True)

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class InstallmentView(BaseModel):
    """
    Parcela leída del almacén con el estado calculado (aberto/vencido/pago).
    Se construye con las columnas del almacén y se expone en camelCase, igual que BatchResult.
    """
    id: str
    description: str = Field(validation_alias="descricao")
    supplier_name: str = Field(validation_alias="fornecedor")
    amount: float = Field(validation_alias="valor")
    due_date: date = Field(validation_alias="data_vencimento")
    category: Optional[str] = Field(None, validation_alias="categoria")
    document_ref: Optional[str] = Field(None, validation_alias="nfe_id")
    status: InstallmentStatus
    stored_status: str
    payment_date: Optional[date] = Field(None, validation_alias="data_pagamento")
    payment_method: Optional[str] = Field(None, validation_alias="forma_pagamento")

    model_config = ConfigDict(alias_generator=AliasGenerator(serialization_alias=to_camel), populate_by_name=True)


class StatusTotals(BaseModel):
    count: int = 0
    amount: float = 0.0

    def add(self, amount: float):
        self.count += 1
        self.amount = round(self.amount + amount, 2)


class InstallmentSummary(BaseModel):
    """Totales por estado y contadores del panel (vence hoy, pagadas en el mes)."""
    open: StatusTotals = Field(default_factory=StatusTotals)
    overdue: StatusTotals = Field(default_factory=StatusTotals)
    paid: StatusTotals = Field(default_factory=StatusTotals)
    total: StatusTotals = Field(default_factory=StatusTotals)
    due_today: StatusTotals = Field(default_factory=StatusTotals)
    paid_this_month: StatusTotals = Field(default_factory=StatusTotals)

    model_config = ConfigDict(alias_generator=AliasGenerator(serialization_alias=to_camel), populate_by_name=True)
