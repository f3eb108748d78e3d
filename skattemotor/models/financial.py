"""
Modeller för resultat- och balansräkning
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class StatementLine:
    """Rad i en sammanställd resultat- eller balansräkning"""
    label: str
    value: Decimal
    highlight: bool = False  # Delsumma eller slutsumma
    is_header: bool = False


@dataclass(frozen=True)
class FinancialItem:
    """Post i en sektion, normalt ett enskilt konto"""
    label: str
    value: Decimal
    account: Optional[str] = None
    previous_value: Optional[Decimal] = None


@dataclass(frozen=True)
class FinancialSection:
    """
    Sektion med kontoposter och summa

    previous_total sätts endast vid jämförelse mot föregående år.
    """
    title: str
    items: list[FinancialItem] = field(default_factory=list)
    total: Decimal = Decimal(0)
    previous_total: Optional[Decimal] = None
    is_highlight: bool = False
