"""
Deklarationsmodeller - SRU-fält och blanketter för inkomstdeklaration
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Union

from skattemotor.config import BlankettType


@dataclass(frozen=True)
class SRUField:
    """Ett fält i en deklaration (t.ex. 7410 Nettoomsättning)"""
    code: int
    value: Union[Decimal, str]


@dataclass(frozen=True)
class SRUDeclaration:
    """
    Blankett med fält

    period anges som beskattningsperiod, t.ex. "2024P4".
    """
    orgnr: str
    name: str
    blankett_type: BlankettType
    period: str
    fields: list[SRUField] = field(default_factory=list)
    system_info: Optional[str] = None

    def get(self, code: int) -> Optional[Union[Decimal, str]]:
        """Hämta värdet för en fältkod, None om fältet saknas"""
        for sru_field in self.fields:
            if sru_field.code == code:
                return sru_field.value
        return None


@dataclass(frozen=True)
class SRUSender:
    """Uppgiftslämnare i INFO.SRU"""
    orgnr: str
    name: str
    address: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    department: Optional[str] = None
    contact: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    fax: Optional[str] = None


@dataclass(frozen=True)
class SRUPackage:
    """Komplett leverans: uppgiftslämnare och blanketter"""
    sender: SRUSender
    declarations: list[SRUDeclaration] = field(default_factory=list)


@dataclass(frozen=True)
class Ink2Totals:
    """Nyckeltal från INK2-beräkningen"""
    total_assets: Decimal = Decimal(0)
    total_equity_and_liabilities: Decimal = Decimal(0)
    revenue: Decimal = Decimal(0)
    expenses: Decimal = Decimal(0)
    net_income: Decimal = Decimal(0)
    taxable_result: Decimal = Decimal(0)
    estimated_tax: Decimal = Decimal(0)


@dataclass(frozen=True)
class Ink2Result:
    """Resultat av en fullständig INK2-beräkning"""
    balance_sheet: list[SRUField]
    income_statement: list[SRUField]
    tax_adjustments: list[SRUField]
    totals: Ink2Totals

    @property
    def all_fields(self) -> list[SRUField]:
        return [*self.balance_sheet, *self.income_statement, *self.tax_adjustments]
