from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


# ---------------------------
# Reference: poupeja_categories
# ---------------------------


class PoupejaCategory(Base):
    __tablename__ = "poupeja_categories"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    # 'income' | 'expense' for personal (PF) ledgers; business (PJ) ledgers use
    # cash-flow activity types such as 'operational_inflow'.
    type: Mapped[str] = mapped_column(String, nullable=False)
    color: Mapped[str | None] = mapped_column(String, nullable=True)
    icon: Mapped[str | None] = mapped_column(String, nullable=True)
    # Optional parent reference; when set, must point to a top-level category.
    # Two-level depth is enforced by the backend, not by recursive constraints.
    parent_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("poupeja_categories.id"),
        nullable=True,
    )
    is_default: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


# ---------------------------
# Core: poupeja_lancamentos
# ---------------------------


class PoupejaLancamento(Base):
    __tablename__ = "poupeja_lancamentos"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    account_type: Mapped[str] = mapped_column(String, nullable=False, default="PF")
    data_referencia: Mapped[date] = mapped_column(Date, nullable=False)
    classificacao: Mapped[str] = mapped_column(String, nullable=False)
    valor_original: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    juros_atraso: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    valor_pago: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    categoria_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("poupeja_categories.id"), nullable=True
    )
    subcategoria_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("poupeja_categories.id"), nullable=True
    )
    fornecedor_id: Mapped[str | None] = mapped_column(String, nullable=True)
    forma_pagamento_id: Mapped[str | None] = mapped_column(String, nullable=True)
    descricao: Mapped[str | None] = mapped_column(Text, nullable=True)
    tipo_lancamento: Mapped[str] = mapped_column(String, nullable=False, default="efetivo")
    data_vencimento: Mapped[date | None] = mapped_column(Date, nullable=True)
    data_pagamento: Mapped[date | None] = mapped_column(Date, nullable=True)
    status_pagamento: Mapped[str] = mapped_column(String, nullable=False, default="a_pagar")
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Mirrors the backend's embedded join select
    # (categoria:poupeja_categories!categoria_id, subcategoria:...!subcategoria_id).
    categoria: Mapped[PoupejaCategory | None] = relationship(
        foreign_keys=[categoria_id], lazy="joined"
    )
    subcategoria: Mapped[PoupejaCategory | None] = relationship(
        foreign_keys=[subcategoria_id], lazy="joined"
    )

    __table_args__ = (
        CheckConstraint(
            "classificacao in ('receita','despesa')",
            name="ck_lancamentos_classificacao",
        ),
        CheckConstraint(
            "status_pagamento in ('pago','a_pagar','atrasado')",
            name="ck_lancamentos_status_pagamento",
        ),
        CheckConstraint("valor_pago >= 0", name="ck_lancamentos_valor_pago"),
    )


# ---------------------------
# Balances: poupeja_accounts
# ---------------------------


class PoupejaAccount(Base):
    """A cash/credit holding. Maintained independently of ``poupeja_lancamentos``."""

    __tablename__ = "poupeja_accounts"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    # 'Conta Corrente' | 'Investimento' | 'Cartão de Crédito'
    type: Mapped[str] = mapped_column(String, nullable=False)
    # Current balance; negative for credit cards carrying a bill.
    value: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


__all__ = [
    "Base",
    "PoupejaAccount",
    "PoupejaCategory",
    "PoupejaLancamento",
]
