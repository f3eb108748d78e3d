"""
Momsrapportering - Momsdeklaration (SKV 4700)

Rapporten kan beräknas från det underlag som finns tillgängligt:
- Verifikationer i huvudboken (momskontona 2610-2649)
- Transaktioner med momsbelopp och momssats
- Kund- och leverantörsfakturor samt kvitton

Alla vägar summerar moms per sats och lämnar över till samma
rapportbyggare, som räknar fram försäljningsunderlag och ruta 49.
"""
import logging
import re
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from skattemotor.config import VAT_DEADLINES, VAT_RATES, VatStatus
from skattemotor.errors import InvalidPeriodError
from skattemotor.models import (
    CustomerInvoice, Receipt, SupplierInvoice, VatReport, VatTransaction, Verification
)
from skattemotor.services.balances import Balances, aggregate, iter_balances
from skattemotor.services.kontoplan import AccountCategory, classify

logger = logging.getLogger(__name__)

PERIOD_PATTERN = re.compile(r"^\s*Q([1-4])\s+(\d{4})\s*$", re.IGNORECASE)

# Utgående moms per konto-kategori (momssats i procent)
OUTPUT_VAT_CATEGORIES = {
    AccountCategory.OUTPUT_VAT_25: 25,
    AccountCategory.OUTPUT_VAT_12: 12,
    AccountCategory.OUTPUT_VAT_6: 6,
}

# Ruta för utgående moms och för försäljningsunderlaget per momssats
OUTPUT_VAT_BOX = {25: "ruta10", 12: "ruta11", 6: "ruta12"}
SALES_BASE_BOX = {25: "ruta05", 12: "ruta06", 6: "ruta07"}


# === PERIODER ===

def parse_period(period: str) -> tuple[int, int]:
    """Tolka "Q4 2024" till (kvartal, år)"""
    match = PERIOD_PATTERN.match(period) if isinstance(period, str) else None
    if not match:
        raise InvalidPeriodError(
            f"Ogiltig momsperiod: {period!r}. Förväntat format är 'Q1 2024'"
        )
    return int(match.group(1)), int(match.group(2))


def quarter_window(quarter: int, year: int) -> tuple[date, date]:
    """Första och sista dagen i kvartalet"""
    start = date(year, (quarter - 1) * 3 + 1, 1)
    end = start + relativedelta(months=3, days=-1)
    return start, end


def vat_deadline(quarter: int, year: int) -> date:
    """
    Sista dag att deklarera och betala moms för kvartalet

    Q1 12 maj, Q2 17 augusti, Q3 12 november, Q4 12 februari året efter.
    """
    month, day, year_offset = VAT_DEADLINES[quarter]
    return date(year + year_offset, month, day)


def vat_status(
    due_date: date,
    today: Optional[date] = None,
    submitted: bool = False
) -> VatStatus:
    """Status utifrån förfallodag; inskickad sätts bara av anroparen"""
    if submitted:
        return VatStatus.SUBMITTED
    today = today or date.today()
    return VatStatus.OVERDUE if today > due_date else VatStatus.UPCOMING


# === RAPPORTBYGGARE ===

@dataclass
class VatTotals:
    """Moms summerad per sats under uppbyggnad av en rapport"""
    output_vat: dict[int, Decimal] = field(
        default_factory=lambda: {rate: Decimal(0) for rate in VAT_RATES}
    )
    input_vat: Decimal = Decimal(0)

    def add_output(self, rate, amount: Decimal) -> bool:
        """Lägg till utgående moms, False om momssatsen är okänd"""
        if rate is None or rate not in VAT_RATES:
            return False
        self.output_vat[int(rate)] += amount
        return True

    def add_input(self, amount: Decimal):
        self.input_vat += amount


def create_empty_vat_report(
    period: str,
    today: Optional[date] = None,
    submitted: bool = False
) -> VatReport:
    """Nollställd rapport med förfallodag och status för perioden"""
    quarter, year = parse_period(period)
    due_date = vat_deadline(quarter, year)
    return VatReport(
        period=f"Q{quarter} {year}",
        due_date=due_date,
        status=vat_status(due_date, today, submitted),
    )


def recalculate_vat_report(report: VatReport) -> VatReport:
    """
    Räkna om summeringsfälten

    sales_vat = rutorna 10-12, 30-32 och 60-62
    input_vat = ruta 48
    net_vat = ruta 49 = sales_vat - input_vat
    """
    return report.recalculated()


def sales_base(output_vat: Decimal, rate: int) -> Decimal:
    """
    Försäljningsunderlag baklänges från utgående moms

    Förenkling: underlaget borde summeras från intäktskontona 3000-3799,
    men beräknas här som moms / momssats, avrundat till hela kronor.
    """
    if output_vat <= 0:
        return Decimal(0)
    return (output_vat / VAT_RATES[rate]).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def build_vat_report(
    period: str,
    totals: VatTotals,
    today: Optional[date] = None,
    submitted: bool = False
) -> VatReport:
    """Bygg rapporten från summerad moms och räkna om"""
    report = create_empty_vat_report(period, today, submitted)

    boxes = {"ruta48": totals.input_vat}
    for rate, amount in totals.output_vat.items():
        boxes[OUTPUT_VAT_BOX[rate]] = amount
        boxes[SALES_BASE_BOX[rate]] = sales_base(amount, rate)

    report = recalculate_vat_report(replace(report, **boxes))
    logger.debug(
        "Momsrapport %s: utgående %s, ingående %s, netto %s",
        report.period, report.sales_vat, report.input_vat, report.net_vat
    )
    return report


# === INDATAVÄGAR ===

def calculate_vat_period(
    verifications: Iterable[Verification],
    period: str,
    today: Optional[date] = None,
    submitted: bool = False
) -> VatReport:
    """
    Momsrapport från huvudbokens verifikationer

    Momskonton enligt BAS:
    - 2610-2619: Utgående moms 25% (ruta 10), kreditsidan
    - 2620-2629: Utgående moms 12% (ruta 11), kreditsidan
    - 2630-2639: Utgående moms 6% (ruta 12), kreditsidan
    - 2640-2649: Ingående moms (ruta 48), debetsidan
    """
    quarter, year = parse_period(period)
    start, end = quarter_window(quarter, year)
    balances = aggregate(verifications, start, end)

    totals = VatTotals()
    for item in balances.values():
        category = classify(item.account)
        if category in OUTPUT_VAT_CATEGORIES:
            totals.add_output(OUTPUT_VAT_CATEGORIES[category], item.credit)
        elif category == AccountCategory.INPUT_VAT:
            totals.add_input(item.debit)

    return build_vat_report(period, totals, today, submitted)


def calculate_vat_from_balances(
    balances: Balances,
    period: str,
    today: Optional[date] = None,
    submitted: bool = False
) -> VatReport:
    """
    Momsrapport från redan summerade saldon för kvartalet

    Använder nettosaldot: kredit - debet för utgående moms,
    debet - kredit för ingående moms.
    """
    totals = VatTotals()
    for item in iter_balances(balances):
        category = classify(item.account)
        if category in OUTPUT_VAT_CATEGORIES:
            totals.add_output(OUTPUT_VAT_CATEGORIES[category], item.balance)
        elif category == AccountCategory.INPUT_VAT:
            totals.add_input(-item.balance)

    return build_vat_report(period, totals, today, submitted)


def calculate_vat_from_transactions(
    transactions: Iterable[VatTransaction],
    period: str,
    today: Optional[date] = None,
    submitted: bool = False
) -> VatReport:
    """
    Momsrapport från transaktioner med momsbelopp

    Positivt momsbelopp är utgående moms och hamnar i rutan för sin
    momssats, negativt belopp är ingående moms.
    """
    quarter, year = parse_period(period)
    start, end = quarter_window(quarter, year)

    totals = VatTotals()
    for transaction in transactions:
        if not start <= transaction.date <= end or not transaction.vat_amount:
            continue
        if transaction.vat_amount > 0:
            if not totals.add_output(transaction.vat_rate, transaction.vat_amount):
                logger.debug(
                    "Okänd momssats %s för transaktion %s",
                    transaction.vat_rate, transaction.date
                )
        else:
            totals.add_input(abs(transaction.vat_amount))

    return build_vat_report(period, totals, today, submitted)


def calculate_vat_from_documents(
    period: str,
    customer_invoices: Iterable[CustomerInvoice],
    supplier_invoices: Iterable[SupplierInvoice],
    receipts: Iterable[Receipt] = (),
    today: Optional[date] = None,
    submitted: bool = False
) -> VatReport:
    """
    Momsrapport från underlag

    Kundfakturor ger utgående moms per momssats. Leverantörsfakturor
    och kvitton ger ingående moms oavsett momssats.
    """
    quarter, year = parse_period(period)
    start, end = quarter_window(quarter, year)

    totals = VatTotals()
    for invoice in customer_invoices:
        if start <= invoice.issue_date <= end and invoice.vat_amount:
            totals.add_output(invoice.vat_rate, invoice.vat_amount)

    for invoice in supplier_invoices:
        if start <= invoice.invoice_date <= end:
            totals.add_input(invoice.vat_amount)

    for receipt in receipts:
        if start <= receipt.date <= end and receipt.vat_amount:
            totals.add_input(receipt.vat_amount)

    return build_vat_report(period, totals, today, submitted)
