# app/infrastructure/persistence/models.py
import uuid
from sqlalchemy import Column, String, Text, Date, DateTime, Numeric, Integer, ForeignKey, func
from sqlalchemy.orm import relationship

from .database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class NotaFiscal(Base):
    __tablename__ = "nfe_data"

    id = Column(String(36), primary_key=True, default=_new_id)
    # Sin restricción UNIQUE: la misma NFe puede ingresarse más de una vez
    chave_acesso = Column(String(44), index=True)
    numero_nfe = Column(String(20))
    serie = Column(String(5))
    data_emissao = Column(Date, nullable=True)
    cnpj_emitente = Column(String(14))
    nome_emitente = Column(String(255))
    cnpj_destinatario = Column(String(14))
    nome_destinatario = Column(String(255))
    valor_total = Column(Numeric(15, 2), default=0)
    valor_icms = Column(Numeric(15, 2), default=0)
    valor_ipi = Column(Numeric(15, 2), default=0)
    valor_pis = Column(Numeric(15, 2), default=0)
    valor_cofins = Column(Numeric(15, 2), default=0)
    xml_content = Column(Text)
    created_at = Column(DateTime, server_default=func.now())

    parcelas = relationship("Parcela", back_populates="nota_fiscal")


class Parcela(Base):
    __tablename__ = "ap_installments"

    id = Column(String(36), primary_key=True, default=_new_id)
    nfe_id = Column(String(36), ForeignKey("nfe_data.id"), nullable=True)
    descricao = Column(String(255), nullable=False)
    fornecedor = Column(String(255), nullable=False)
    valor = Column(Numeric(15, 2), nullable=False)
    valor_total_titulo = Column(Numeric(15, 2))
    data_vencimento = Column(Date, nullable=False)
    categoria = Column(String(50))
    numero_documento = Column(String(50))
    numero_parcela = Column(Integer)
    total_parcelas = Column(Integer)
    status = Column(String(20), nullable=False, default="aberto")
    data_pagamento = Column(Date, nullable=True)
    forma_pagamento = Column(String(50), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    nota_fiscal = relationship("NotaFiscal", back_populates="parcelas")
