# app/infrastructure/api/routers/installments_router.py
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.domain.models.batch_result import BulkActionResult
from app.domain.models.installment import InstallmentStatus, InstallmentSummary, InstallmentView
from app.domain.ports.persistence_gateway import PersistenceGateway
from app.infrastructure.api.dependencies import get_gateway
from app.infrastructure.factory import build_installments_use_case

router = APIRouter(prefix="/api/v1/installments", tags=["Parcelas"])


class BulkSelection(BaseModel):
    ids: List[str] = Field(..., min_length=1)


class BulkPayment(BulkSelection):
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0)


@router.get("/", response_model=List[InstallmentView], summary="Listar parcelas con estado calculado")
def list_installments(
    status: Optional[InstallmentStatus] = None,
    supplier: Optional[str] = None,
    due_from: Optional[date] = None,
    due_to: Optional[date] = None,
    gateway: PersistenceGateway = Depends(get_gateway)
):
    return build_installments_use_case(gateway).list_installments(
        status=status, supplier=supplier, due_from=due_from, due_to=due_to
    )


@router.get("/summary", response_model=InstallmentSummary, summary="Totales por estado y contadores del panel")
def summarize_installments(
    supplier: Optional[str] = None,
    due_from: Optional[date] = None,
    due_to: Optional[date] = None,
    gateway: PersistenceGateway = Depends(get_gateway)
):
    return build_installments_use_case(gateway).summarize(supplier=supplier, due_from=due_from, due_to=due_to)


@router.post("/pay", response_model=BulkActionResult, summary="Marcar parcelas como pagadas")
def pay_installments(body: BulkPayment, gateway: PersistenceGateway = Depends(get_gateway)):
    return build_installments_use_case(gateway).mark_as_paid(
        body.ids, payment_date=body.payment_date, payment_method=body.payment_method, amount=body.amount
    )


@router.post("/cancel-payment", response_model=BulkActionResult, summary="Cancelar el pago de parcelas")
def cancel_payment(body: BulkSelection, gateway: PersistenceGateway = Depends(get_gateway)):
    return build_installments_use_case(gateway).cancel_payment(body.ids)


@router.post("/delete", response_model=BulkActionResult, summary="Eliminar parcelas")
def delete_installments(body: BulkSelection, gateway: PersistenceGateway = Depends(get_gateway)):
    return build_installments_use_case(gateway).delete_installments(body.ids)
