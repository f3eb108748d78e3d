"""
Momsmodeller - Momsdeklaration (SKV 4700) och underlag
"""
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Optional

from skattemotor.config import VatStatus

# Rutorna i blankettens ordning (ruta 49 beräknas)
VAT_BOXES = (
    # Momspliktig försäljning
    "ruta05", "ruta06", "ruta07", "ruta08",
    # Utgående moms på försäljning
    "ruta10", "ruta11", "ruta12",
    # Momspliktiga inköp vid omvänd skattskyldighet
    "ruta20", "ruta21", "ruta22", "ruta23", "ruta24",
    # Utgående moms på inköp
    "ruta30", "ruta31", "ruta32",
    # Import
    "ruta50",
    "ruta60", "ruta61", "ruta62",
    # Försäljning m.m. som är undantagen från moms
    "ruta35", "ruta36", "ruta37", "ruta38", "ruta39", "ruta40", "ruta41", "ruta42",
    # Ingående moms
    "ruta48",
)

# Rutor som bär utgående moms
OUTPUT_VAT_BOXES = (
    "ruta10", "ruta11", "ruta12",
    "ruta30", "ruta31", "ruta32",
    "ruta60", "ruta61", "ruta62",
)


@dataclass(frozen=True)
class VatReport:
    """
    Momsdeklaration för ett kvartal

    Alla rutor är förstklassiga fält och är noll om de inte fylls i.
    Rapporten kan alltid återskapas från huvudboken; endast status
    "submitted" kommer utifrån.
    """
    period: str
    due_date: date
    status: VatStatus = VatStatus.UPCOMING

    ruta05: Decimal = Decimal(0)  # Momspliktig försäljning 25%
    ruta06: Decimal = Decimal(0)  # Momspliktig försäljning 12%
    ruta07: Decimal = Decimal(0)  # Momspliktig försäljning 6%
    ruta08: Decimal = Decimal(0)  # Hyresinkomster vid frivillig skattskyldighet
    ruta10: Decimal = Decimal(0)  # Utgående moms 25%
    ruta11: Decimal = Decimal(0)  # Utgående moms 12%
    ruta12: Decimal = Decimal(0)  # Utgående moms 6%
    ruta20: Decimal = Decimal(0)  # Inköp av varor från annat EU-land
    ruta21: Decimal = Decimal(0)  # Inköp av tjänster från annat EU-land
    ruta22: Decimal = Decimal(0)  # Inköp av tjänster från land utanför EU
    ruta23: Decimal = Decimal(0)  # Inköp av varor i Sverige (omvänd skattskyldighet)
    ruta24: Decimal = Decimal(0)  # Övriga inköp av tjänster
    ruta30: Decimal = Decimal(0)  # Utgående moms 25% på inköp
    ruta31: Decimal = Decimal(0)  # Utgående moms 12% på inköp
    ruta32: Decimal = Decimal(0)  # Utgående moms 6% på inköp
    ruta35: Decimal = Decimal(0)  # Försäljning av varor till annat EU-land
    ruta36: Decimal = Decimal(0)  # Försäljning av varor utanför EU
    ruta37: Decimal = Decimal(0)  # Mellanmans inköp vid trepartshandel
    ruta38: Decimal = Decimal(0)  # Mellanmans försäljning vid trepartshandel
    ruta39: Decimal = Decimal(0)  # Försäljning av tjänster till annat EU-land
    ruta40: Decimal = Decimal(0)  # Övrig försäljning av tjänster utanför Sverige
    ruta41: Decimal = Decimal(0)  # Försäljning med omvänd skattskyldighet
    ruta42: Decimal = Decimal(0)  # Övrig försäljning m.m.
    ruta48: Decimal = Decimal(0)  # Ingående moms att dra av
    ruta49: Decimal = Decimal(0)  # Moms att betala eller få tillbaka
    ruta50: Decimal = Decimal(0)  # Beskattningsunderlag vid import
    ruta60: Decimal = Decimal(0)  # Utgående moms 25% vid import
    ruta61: Decimal = Decimal(0)  # Utgående moms 12% vid import
    ruta62: Decimal = Decimal(0)  # Utgående moms 6% vid import

    sales_vat: Decimal = Decimal(0)
    input_vat: Decimal = Decimal(0)
    net_vat: Decimal = Decimal(0)

    def recalculated(self) -> "VatReport":
        """Beräkna summeringsfälten och ruta 49 från rutorna"""
        sales_vat = sum((getattr(self, box) for box in OUTPUT_VAT_BOXES), Decimal(0))
        input_vat = self.ruta48
        net_vat = sales_vat - input_vat
        return replace(
            self,
            sales_vat=sales_vat,
            input_vat=input_vat,
            net_vat=net_vat,
            ruta49=net_vat,
        )

    def with_values(self, **boxes) -> "VatReport":
        """Ändra en eller flera rutor och räkna om"""
        unknown = set(boxes) - set(VAT_BOXES)
        if unknown:
            raise ValueError(f"Okända rutor: {', '.join(sorted(unknown))}")
        values = {name: Decimal(str(value)) for name, value in boxes.items()}
        return replace(self, **values).recalculated()

    def boxes(self) -> dict[str, Decimal]:
        """Alla rutor i blankettens ordning, inklusive ruta 49"""
        values = {name: getattr(self, name) for name in VAT_BOXES}
        values["ruta49"] = self.ruta49
        return values


@dataclass(frozen=True)
class VatTransaction:
    """
    Transaktion med momsbelopp

    vat_amount > 0 är utgående moms, vat_amount < 0 är ingående moms.
    vat_rate anges i procent (25, 12 eller 6).
    """
    date: date
    amount: Decimal
    vat_amount: Optional[Decimal] = None
    vat_rate: Optional[int] = None


@dataclass(frozen=True)
class CustomerInvoice:
    """Kundfaktura - underlag för utgående moms"""
    issue_date: date
    vat_amount: Optional[Decimal] = None
    vat_rate: Optional[int] = None


@dataclass(frozen=True)
class SupplierInvoice:
    """Leverantörsfaktura - underlag för ingående moms"""
    invoice_date: date
    vat_amount: Decimal = Decimal(0)


@dataclass(frozen=True)
class Receipt:
    """Kvitto - underlag för ingående moms"""
    date: date
    vat_amount: Optional[Decimal] = None
