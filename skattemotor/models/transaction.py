"""
Verifikationer och konteringsrader - huvudbokens indata
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from dateutil.parser import isoparse


def to_decimal(value) -> Decimal:
    """Konvertera belopp till Decimal (None och tom sträng blir 0)"""
    if value is None or value == "":
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_date(value) -> date:
    """Konvertera ISO-sträng eller datetime till date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return isoparse(str(value)).date()


@dataclass(frozen=True)
class Posting:
    """
    Konteringsrad

    Endast de fyra första siffrorna i kontonumret är betydelsebärande.
    """
    account: str
    debit: Decimal = Decimal(0)
    credit: Decimal = Decimal(0)
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Posting":
        return cls(
            account=str(data["account"]).strip(),
            debit=to_decimal(data.get("debit")),
            credit=to_decimal(data.get("credit")),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class Verification:
    """
    Verifikation

    En balanserad affärshändelse med två eller fler konteringsrader.
    Ägs av den externa huvudboken, skattemotorn läser bara.
    """
    date: date
    description: str
    rows: tuple[Posting, ...] = field(default_factory=tuple)
    source_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Verification":
        """
        Skapa verifikation från externt format

        {"date": "2024-10-15", "description": "...", "rows": [...], "sourceType": "..."}
        """
        return cls(
            date=to_date(data["date"]),
            description=data.get("description") or "",
            rows=tuple(Posting.from_dict(row) for row in data.get("rows") or []),
            source_type=data.get("sourceType", data.get("source_type")),
        )

    @property
    def total_debit(self) -> Decimal:
        """Total debet för verifikationen"""
        return sum((row.debit for row in self.rows), Decimal(0))

    @property
    def total_credit(self) -> Decimal:
        """Total kredit för verifikationen"""
        return sum((row.credit for row in self.rows), Decimal(0))

    @property
    def is_balanced(self) -> bool:
        """Kontrollera att debet = kredit"""
        return self.total_debit == self.total_credit
