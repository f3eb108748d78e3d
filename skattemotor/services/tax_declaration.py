"""
Skattedeklarationstjänst - Beräknar INK2, INK2R och INK2S från huvudboken

Flöde:
1. Saldon per konto (balansposter till räkenskapsårets slut,
   resultatposter för räkenskapsåret)
2. INK2R balansräkning och resultaträkning via BAS-intervall per SRU-kod
3. INK2S skattemässiga justeringar utifrån bokfört resultat
4. Tre deklarationer stämplade med orgnr, namn, blankett och period

Fält vars intervall summerar till noll utelämnas helt, de skrivs inte
som nollor. SRU-filen ska bara innehålla ifyllda uppgifter.
"""
import logging
import re
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from skattemotor.config import (
    CORPORATE_TAX_RATE, PROGRAM_NAME, REPRESENTATION_NON_DEDUCTIBLE_SHARE,
    BlankettType
)
from skattemotor.errors import InvalidPeriodError
from skattemotor.models import (
    Company, Ink2Result, Ink2Totals, SRUDeclaration, SRUField, Verification
)
from skattemotor.services.balances import (
    Balances, aggregate, result_for_period, sum_account_range,
    unmapped_accounts
)
from skattemotor.services.ink2_fields import (
    BALANCE_SHEET_FIELDS, BALANCE_SHEET_TABLE, FIELDS_BY_CODE,
    INCOME_STATEMENT_FIELDS, INCOME_STATEMENT_TABLE, Ink2Field
)
from skattemotor.services.kontoplan import account_number

logger = logging.getLogger(__name__)

TAX_PERIOD_PATTERN = re.compile(r"^(\d{4})P([1-4])$")

# Fält som inte är tillgångar har kod från 7300 och uppåt
EQUITY_AND_LIABILITIES_FROM = 7300


def _kronor(value: Decimal) -> Decimal:
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def _get(fields: Iterable[SRUField], code: int) -> Decimal:
    for sru_field in fields:
        if sru_field.code == code:
            return sru_field.value
    return Decimal(0)


def _range_sum(balances: Balances, field: Ink2Field) -> Decimal:
    return sum(
        (sum_account_range(balances, start, end) for start, end in field.ranges),
        Decimal(0)
    )


def _map_fields(balances: Balances, fields: list[Ink2Field]) -> list[SRUField]:
    """
    Summera varje fälts intervall

    Vanliga fält får beloppets absolutvärde. Fält med minuskod skriver
    pluskoden när summan (kredit - debet) är positiv, annars minuskoden.
    """
    result = []
    for field in fields:
        if not field.ranges:
            continue
        total = _range_sum(balances, field)
        if total == 0:
            continue
        if field.negative_code and total < 0:
            result.append(SRUField(field.negative_code, abs(total)))
        else:
            result.append(SRUField(field.code, abs(total)))
    return result


def _warn_unmapped(balances: Balances, table, start: int, end: int, form: str):
    unmapped = unmapped_accounts(
        balances,
        lambda account: (
            table.key_for(account) is not None
            or not start <= (account_number(account) or 0) <= end
        )
    )
    if unmapped:
        logger.warning(
            "%s: %d konton med saldo saknar SRU-kod och utelämnas: %s",
            form, len(unmapped), ", ".join(unmapped)
        )


# === INK2R ===

def calculate_balance_sheet(balances: Balances) -> list[SRUField]:
    """INK2R balansräkning (fält 2.1-2.50) från saldon vid årets slut"""
    _warn_unmapped(balances, BALANCE_SHEET_TABLE, 1000, 2999, "INK2R balansräkning")
    return _map_fields(balances, BALANCE_SHEET_FIELDS)


def calculate_income_statement(balances: Balances) -> list[SRUField]:
    """
    INK2R resultaträkning (fält 3.1-3.27) från årets saldon

    Årets resultat är summan av alla resultatkonton 3000-8999 och ger
    antingen 7450 (vinst) eller 7550 (förlust), aldrig båda.
    """
    _warn_unmapped(balances, INCOME_STATEMENT_TABLE, 3000, 8999, "INK2R resultaträkning")
    fields = _map_fields(balances, INCOME_STATEMENT_FIELDS)

    net_result = result_for_period(balances)
    if net_result > 0:
        fields.append(SRUField(7450, net_result))
    elif net_result < 0:
        fields.append(SRUField(7550, abs(net_result)))
    return fields


# === INK2S ===

def representation_add_back(balances: Balances) -> Decimal:
    """Ej avdragsgill del av representation (konto 6070-6079), hela kronor"""
    representation = abs(sum_account_range(balances, 6070, 6079))
    return _kronor(representation * REPRESENTATION_NON_DEDUCTIBLE_SHARE)


def calculate_tax_adjustments(
    income_statement_fields: list[SRUField],
    balances: Balances
) -> list[SRUField]:
    """
    INK2S skattemässiga justeringar

    Utgår från bokfört resultat (7450/7550) och lägger tillbaka kostnader
    som inte är avdragsgilla:
    - Skatt på årets resultat (7651)
    - Nedskrivning av finansiella tillgångar (7652)
    - 50% av representation (7653)

    Skattemässigt resultat >= 0 ger 7670 (överskott), annars 7770.
    """
    profit = _get(income_statement_fields, 7450)
    loss = _get(income_statement_fields, 7550)
    tax = _get(income_statement_fields, 7528)
    impairment = _get(income_statement_fields, 7521)
    representation = representation_add_back(balances)

    fields = []
    if profit:
        fields.append(SRUField(7650, profit))
    if loss:
        fields.append(SRUField(7750, loss))
    for code, amount in ((7651, tax), (7652, impairment), (7653, representation)):
        if amount:
            fields.append(SRUField(code, amount))

    taxable = (profit - loss) + tax + impairment + representation
    if taxable >= 0:
        fields.append(SRUField(7670, taxable))
    else:
        fields.append(SRUField(7770, abs(taxable)))
    return fields


def taxable_result(tax_adjustment_fields: list[SRUField]) -> Decimal:
    """Skattemässigt resultat med tecken (överskott positivt)"""
    return _get(tax_adjustment_fields, 7670) - _get(tax_adjustment_fields, 7770)


# === PERIODER ===

def tax_period_for(fiscal_year_end: date) -> str:
    """
    Beskattningsperiod för ett räkenskapsår

    Perioden bestäms av månaden då räkenskapsåret slutar:
    P1 jan-apr, P2 maj-jun, P3 jul-aug, P4 sep-dec.
    """
    month = fiscal_year_end.month
    if month <= 4:
        period = 1
    elif month <= 6:
        period = 2
    elif month <= 8:
        period = 3
    else:
        period = 4
    return f"{fiscal_year_end.year}P{period}"


def parse_tax_period(period: str) -> tuple[int, int]:
    """Tolka "2024P4" till (år, period)"""
    match = TAX_PERIOD_PATTERN.match(period) if isinstance(period, str) else None
    if not match:
        raise InvalidPeriodError(
            f"Ogiltig beskattningsperiod: {period!r}. Förväntat format är '2024P4'"
        )
    return int(match.group(1)), int(match.group(2))


# === SAMMANSTÄLLNING ===

def calculate_totals(
    balance_sheet_fields: list[SRUField],
    income_statement_fields: list[SRUField],
    tax_adjustment_fields: list[SRUField],
    net_income: Decimal
) -> Ink2Totals:
    """Nyckeltal: summor, resultat och beräknad bolagsskatt"""
    total_assets = sum(
        (f.value for f in balance_sheet_fields if f.code < EQUITY_AND_LIABILITIES_FROM),
        Decimal(0)
    )
    total_equity_and_liabilities = sum(
        (f.value for f in balance_sheet_fields if f.code >= EQUITY_AND_LIABILITIES_FROM),
        Decimal(0)
    )
    result_codes = (7450, 7550)
    revenue = sum(
        (f.value for f in income_statement_fields
         if 7400 <= f.code < 7500 and f.code not in result_codes),
        Decimal(0)
    )
    expenses = sum(
        (f.value for f in income_statement_fields
         if 7500 <= f.code < 7600 and f.code not in result_codes),
        Decimal(0)
    )
    taxable = taxable_result(tax_adjustment_fields)
    estimated_tax = _kronor(max(taxable, Decimal(0)) * CORPORATE_TAX_RATE)

    return Ink2Totals(
        total_assets=total_assets,
        total_equity_and_liabilities=total_equity_and_liabilities,
        revenue=revenue,
        expenses=expenses,
        net_income=net_income,
        taxable_result=taxable,
        estimated_tax=estimated_tax,
    )


def calculate_ink2(
    balance_sheet_balances: Balances,
    income_balances: Balances
) -> Ink2Result:
    """Alla INK2-fält från färdiga saldon"""
    balance_sheet_fields = calculate_balance_sheet(balance_sheet_balances)
    income_statement_fields = calculate_income_statement(income_balances)
    tax_adjustment_fields = calculate_tax_adjustments(income_statement_fields, income_balances)

    return Ink2Result(
        balance_sheet=balance_sheet_fields,
        income_statement=income_statement_fields,
        tax_adjustments=tax_adjustment_fields,
        totals=calculate_totals(
            balance_sheet_fields,
            income_statement_fields,
            tax_adjustment_fields,
            result_for_period(income_balances),
        ),
    )


def fields_by_section(fields: Iterable[SRUField]) -> dict[str, list[SRUField]]:
    """Gruppera fält per sektion, i den ordning fälten kommer"""
    sections: dict[str, list[SRUField]] = {}
    for sru_field in fields:
        info = FIELDS_BY_CODE.get(sru_field.code)
        section = info.section if info else "Övrigt"
        sections.setdefault(section, []).append(sru_field)
    return sections


class TaxDeclarationService:
    """
    Tjänst för inkomstdeklaration (aktiebolag)

    Räkenskapsåret tas från företaget. Balansposterna summeras från
    huvudbokens början till årets slut, resultatposterna för året.
    """

    def __init__(self, company: Company):
        self.company = company

    @property
    def period(self) -> str:
        return tax_period_for(self.company.fiscal_year_end)

    def calculate_all(self, verifications: Iterable[Verification]) -> Ink2Result:
        """Beräkna alla INK2-fält för räkenskapsåret"""
        verifications = list(verifications)
        closing = aggregate(verifications, end=self.company.fiscal_year_end)
        for_year = aggregate(
            v for v in verifications if self.company.contains_date(v.date)
        )
        return calculate_ink2(closing, for_year)

    def main_form_fields(self, result: Ink2Result) -> list[SRUField]:
        """INK2 huvudblankett: räkenskapsår och överskott eller underskott"""
        fields = [
            SRUField(7011, self.company.fiscal_year_start.strftime("%Y%m%d")),
            SRUField(7012, self.company.fiscal_year_end.strftime("%Y%m%d")),
        ]
        taxable = result.totals.taxable_result
        if taxable > 0:
            fields.append(SRUField(7104, taxable))
        elif taxable < 0:
            fields.append(SRUField(7114, abs(taxable)))
        return fields

    def generate_declarations(
        self,
        verifications: Iterable[Verification],
        created: Optional[date] = None
    ) -> list[SRUDeclaration]:
        """
        Skapa INK2, INK2R och INK2S

        INK2R innehåller balans- och resultaträkning, INK2S endast de
        skattemässiga justeringarna.
        """
        result = self.calculate_all(verifications)
        created = created or date.today()
        system_info = f"{PROGRAM_NAME} {created.strftime('%Y%m%d')}"

        blanketter = [
            (BlankettType.INK2, self.main_form_fields(result)),
            (BlankettType.INK2R, [*result.balance_sheet, *result.income_statement]),
            (BlankettType.INK2S, result.tax_adjustments),
        ]
        declarations = [
            SRUDeclaration(
                orgnr=self.company.orgnr,
                name=self.company.name,
                blankett_type=blankett_type,
                period=self.period,
                fields=fields,
                system_info=system_info,
            )
            for blankett_type, fields in blanketter
        ]

        logger.info(
            "Deklarationer för %s %s: %s",
            self.company.orgnr, self.period,
            ", ".join(f"{d.blankett_type.value} ({len(d.fields)} fält)" for d in declarations)
        )
        return declarations

    def fields_by_section(self, verifications: Iterable[Verification]) -> dict[str, list[SRUField]]:
        """Alla fält för räkenskapsåret grupperade per sektion"""
        return fields_by_section(self.calculate_all(verifications).all_fields)
