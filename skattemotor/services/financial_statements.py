"""
Resultat- och balansräkning

Två varianter av samma rapporter:
- Sammanställd: en rad per kategori med delsummor (bruttoresultat, EBITDA...)
- Detaljerad: sektioner med en post per konto, för utfällbara tabeller

Saldon anges som kredit - debet. Tillgångar vänds för visning, skulder och
eget kapital behåller bokföringens tecken. Resultatposter summeras med sitt
tecken, så kostnader (negativa) minskar resultatet.

Varianterna använder olika intervall för avskrivningar och rörelseintäkter:
- Sammanställd: intäkter 3000-3999, avskrivningar 7700-7999
- Detaljerad: nettoomsättning 3000-3799, övriga rörelseintäkter 3900-3999,
  avskrivningar 7800-7899
"""
import logging
from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Optional, Union

from skattemotor.config import AMOUNT_THRESHOLD
from skattemotor.models import (
    Account, FinancialItem, FinancialSection, StatementLine
)
from skattemotor.services.balances import (
    Balances, iter_balances, result_for_period, unmapped_accounts
)
from skattemotor.services.kontoplan import (
    AccountRange, RangeTable, account_label, account_names, account_number,
    load_chart_of_accounts
)

logger = logging.getLogger(__name__)

UNBOOKED_RESULT_LABEL = "Årets resultat (ej bokfört)"
NET_RESULT_LABEL = "Nettoresultat"

# Sammanställd resultaträkning
INCOME_LINES = RangeTable([
    AccountRange(3000, 3999, "revenue"),
    AccountRange(4000, 4999, "direct_costs"),
    AccountRange(5000, 6999, "other_external"),
    AccountRange(7000, 7699, "personnel"),
    AccountRange(7700, 7999, "depreciation"),
    AccountRange(8000, 8899, "financial"),
    AccountRange(8900, 8999, "tax"),
])

# Sammanställd balansräkning (tillgångar vänds för visning)
BALANCE_LINES = RangeTable([
    AccountRange(1000, 1399, "fixed_assets"),
    AccountRange(1400, 1999, "current_assets"),
    AccountRange(2000, 2099, "equity"),
    AccountRange(2100, 2199, "untaxed_reserves"),
    AccountRange(2200, 2299, "provisions"),
    AccountRange(2300, 2399, "long_term"),
    AccountRange(2400, 2999, "short_term"),
])

ASSET_LINES = ("fixed_assets", "current_assets")

# Detaljerad resultaträkning: sektionsrubrik per intervall
INCOME_SECTIONS = RangeTable([
    AccountRange(3000, 3799, "Nettoomsättning"),
    AccountRange(3900, 3999, "Övriga rörelseintäkter"),
    AccountRange(4000, 4999, "Kostnader för material och varor"),
    AccountRange(5000, 6999, "Övriga externa kostnader"),
    AccountRange(7000, 7699, "Personalkostnader"),
    AccountRange(7800, 7899, "Avskrivningar"),
    AccountRange(8000, 8899, "Finansiella poster"),
    AccountRange(8900, 8999, "Skatt"),
])

# Detaljerad balansräkning
ASSET_SECTIONS = RangeTable([
    AccountRange(1000, 1399, "Anläggningstillgångar"),
    AccountRange(1400, 1999, "Omsättningstillgångar"),
])

EQUITY_AND_LIABILITY_SECTIONS = RangeTable([
    AccountRange(2000, 2099, "Eget kapital"),
    AccountRange(2100, 2199, "Obeskattade reserver"),
    AccountRange(2200, 2299, "Avsättningar"),
    AccountRange(2300, 2399, "Långfristiga skulder"),
    AccountRange(2400, 2999, "Kortfristiga skulder"),
])


def _totals_by_key(balances: Balances, table: RangeTable) -> dict:
    totals = {r.key: Decimal(0) for r in table.ranges}
    for item in iter_balances(balances):
        key = table.key_for(item.account)
        if key is not None:
            totals[key] += item.balance
    return totals


def _warn_unmapped(balances: Balances, tables: Iterable[RangeTable], report: str):
    tables = list(tables)
    unmapped = unmapped_accounts(
        balances,
        lambda account: any(t.key_for(account) is not None for t in tables)
    )
    if unmapped:
        logger.warning(
            "%s: %d konton med saldo saknar kategori och utelämnas: %s",
            report, len(unmapped), ", ".join(unmapped)
        )


# === SAMMANSTÄLLD ===

def income_statement(balances: Balances) -> list[StatementLine]:
    """
    Resultaträkning med delsummor

    bruttoresultat = intäkter + material
    EBITDA = bruttoresultat + övriga externa + personal
    EBIT = EBITDA + avskrivningar
    resultat före skatt = EBIT + finansiella poster
    årets resultat = resultat före skatt + skatt
    """
    _warn_unmapped(balances, [INCOME_LINES], "Resultaträkning")
    t = _totals_by_key(balances, INCOME_LINES)

    gross_profit = t["revenue"] + t["direct_costs"]
    ebitda = gross_profit + t["other_external"] + t["personnel"]
    ebit = ebitda + t["depreciation"]
    ebt = ebit + t["financial"]
    net_income = ebt + t["tax"]

    return [
        StatementLine("Rörelsens intäkter", t["revenue"]),
        StatementLine("Rörelsekostnader", Decimal(0), is_header=True),
        StatementLine("Material och varor", t["direct_costs"]),
        StatementLine("Bruttoresultat", gross_profit, highlight=True),
        StatementLine("Övriga externa kostnader", t["other_external"]),
        StatementLine("Personalkostnader", t["personnel"]),
        StatementLine("Rörelseresultat före avskrivningar (EBITDA)", ebitda, highlight=True),
        StatementLine("Avskrivningar", t["depreciation"]),
        StatementLine("Rörelseresultat (EBIT)", ebit, highlight=True),
        StatementLine("Finansiella poster", t["financial"]),
        StatementLine("Resultat före skatt", ebt, highlight=True),
        StatementLine("Skatt", t["tax"]),
        StatementLine("ÅRETS RESULTAT", net_income, highlight=True),
    ]


def balance_sheet(balances: Balances) -> list[StatementLine]:
    """
    Balansräkning per kategori

    Periodens resultat som ännu inte bokats mot eget kapital visas på en
    egen rad, så att summa tillgångar = summa eget kapital och skulder
    för en balanserad huvudbok.
    """
    _warn_unmapped(balances, [BALANCE_LINES, INCOME_LINES], "Balansräkning")
    t = _totals_by_key(balances, BALANCE_LINES)
    for key in ASSET_LINES:
        t[key] = -t[key]

    unbooked = result_for_period(balances)
    total_assets = t["fixed_assets"] + t["current_assets"]
    total_equity_and_liabilities = (
        t["equity"] + unbooked + t["untaxed_reserves"] + t["provisions"]
        + t["long_term"] + t["short_term"]
    )

    return [
        StatementLine("TILLGÅNGAR", Decimal(0), is_header=True),
        StatementLine("Anläggningstillgångar", t["fixed_assets"]),
        StatementLine("Omsättningstillgångar", t["current_assets"]),
        StatementLine("SUMMA TILLGÅNGAR", total_assets, highlight=True),
        StatementLine("EGET KAPITAL OCH SKULDER", Decimal(0), is_header=True),
        StatementLine("Eget kapital", t["equity"]),
        StatementLine(UNBOOKED_RESULT_LABEL, unbooked),
        StatementLine("Obeskattade reserver", t["untaxed_reserves"]),
        StatementLine("Avsättningar", t["provisions"]),
        StatementLine("Långfristiga skulder", t["long_term"]),
        StatementLine("Kortfristiga skulder", t["short_term"]),
        StatementLine("SUMMA EGET KAPITAL OCH SKULDER", total_equity_and_liabilities, highlight=True),
    ]


def empty_income_statement() -> list[StatementLine]:
    """Resultaträkningens struktur med nollor"""
    return income_statement([])


def empty_balance_sheet() -> list[StatementLine]:
    """Balansräkningens struktur med nollor"""
    return balance_sheet([])


# === DETALJERAD ===

class FinancialStatementService:
    """
    Resultat- och balansräkning med en post per konto

    Kontonamn hämtas från kontoplanen. Utan angiven kontoplan används
    den medföljande BAS-kontoplanen.
    """

    def __init__(self, chart: Optional[Iterable[Union[Account, dict]]] = None):
        if chart is None:
            chart = load_chart_of_accounts()
        self.names = account_names(chart)

    def _items(
        self,
        balances: Balances,
        table: RangeTable,
        key: str,
        sign: int,
        previous: Optional[dict[str, Decimal]]
    ) -> list[FinancialItem]:
        """Poster för ett intervall, sorterade på kontonummer"""
        current = {
            item.account: item.balance * sign
            for item in iter_balances(balances)
            if table.key_for(item.account) == key
        }
        previous_values = {
            account: value * sign
            for account, value in (previous or {}).items()
            if table.key_for(account) == key
        }

        accounts = {
            account for account, value in current.items()
            if abs(value) > AMOUNT_THRESHOLD
        }
        accounts |= {
            account for account, value in previous_values.items()
            if abs(value) > AMOUNT_THRESHOLD
        }

        items = []
        for account in sorted(accounts, key=lambda a: (account_number(a), a)):
            items.append(FinancialItem(
                label=account_label(account, self.names),
                value=current.get(account, Decimal(0)),
                account=account,
                previous_value=(
                    previous_values.get(account, Decimal(0))
                    if previous is not None else None
                ),
            ))
        return items

    def _sections(
        self,
        balances: Balances,
        table: RangeTable,
        sign: int,
        previous_balances: Optional[Balances]
    ) -> list[FinancialSection]:
        """
        En sektion per intervall

        Summan tar med alla konton i intervallet, även belopp under
        tröskeln som inte visas som egna poster.
        """
        previous = _as_dict(previous_balances)
        totals = _totals_by_key(balances, table)
        previous_totals = (
            _totals_by_key(previous_balances, table)
            if previous_balances is not None else None
        )
        return [
            FinancialSection(
                title=r.key,
                items=self._items(balances, table, r.key, sign, previous),
                total=totals[r.key] * sign,
                previous_total=(
                    previous_totals[r.key] * sign
                    if previous_totals is not None else None
                ),
            )
            for r in table.ranges
        ]

    def income_statement_sections(
        self,
        balances: Balances,
        previous_balances: Optional[Balances] = None
    ) -> list[FinancialSection]:
        """
        Resultaträkning i sektioner

        Sista sektionen "Årets resultat" är markerad och har en post,
        nettoresultatet, som är summan av alla sektioner.
        """
        _warn_unmapped(balances, [INCOME_SECTIONS, BALANCE_LINES], "Resultaträkning (detaljerad)")

        sections = self._sections(balances, INCOME_SECTIONS, 1, previous_balances)

        net_income = sum((s.total for s in sections), Decimal(0))
        previous_net = (
            sum((s.previous_total for s in sections), Decimal(0))
            if previous_balances is not None else None
        )
        sections.append(FinancialSection(
            title="Årets resultat",
            items=[FinancialItem(NET_RESULT_LABEL, net_income, previous_value=previous_net)],
            total=net_income,
            previous_total=previous_net,
            is_highlight=True,
        ))
        return sections

    def balance_sheet_sections(
        self,
        balances: Balances,
        previous_balances: Optional[Balances] = None
    ) -> list[FinancialSection]:
        """
        Balansräkning i sektioner

        Tillgångssektionerna följs av "Summa tillgångar", skuldsektionerna
        av "Summa eget kapital och skulder". Periodens resultat som inte
        bokats mot eget kapital ingår i Eget kapital, och visas som en
        egen post när det inte är noll.
        """
        _warn_unmapped(
            balances, [ASSET_SECTIONS, EQUITY_AND_LIABILITY_SECTIONS, INCOME_LINES],
            "Balansräkning (detaljerad)"
        )
        compare = previous_balances is not None

        assets = self._sections(balances, ASSET_SECTIONS, -1, previous_balances)
        liabilities = self._sections(
            balances, EQUITY_AND_LIABILITY_SECTIONS, 1, previous_balances
        )

        unbooked = result_for_period(balances)
        previous_unbooked = result_for_period(previous_balances) if compare else None
        equity = liabilities[0]
        items = equity.items
        if abs(unbooked) > AMOUNT_THRESHOLD or (
            compare and abs(previous_unbooked) > AMOUNT_THRESHOLD
        ):
            items = [*items, FinancialItem(
                UNBOOKED_RESULT_LABEL, unbooked, previous_value=previous_unbooked
            )]
        liabilities[0] = replace(
            equity,
            items=items,
            total=equity.total + unbooked,
            previous_total=(
                equity.previous_total + previous_unbooked if compare else None
            ),
        )

        return [
            *assets,
            self._summary("Summa tillgångar", assets, compare),
            *liabilities,
            self._summary("Summa eget kapital och skulder", liabilities, compare),
        ]

    def _summary(
        self,
        title: str,
        sections: list[FinancialSection],
        compare: bool
    ) -> FinancialSection:
        return FinancialSection(
            title=title,
            items=[],
            total=sum((s.total for s in sections), Decimal(0)),
            previous_total=(
                sum((s.previous_total for s in sections), Decimal(0))
                if compare else None
            ),
            is_highlight=True,
        )

    def empty_income_statement_sections(self) -> list[FinancialSection]:
        """Sektionerna utan poster och med nollsummor"""
        return self.income_statement_sections([])

    def empty_balance_sheet_sections(self) -> list[FinancialSection]:
        return self.balance_sheet_sections([])


def _as_dict(balances: Optional[Balances]) -> Optional[dict[str, Decimal]]:
    if balances is None:
        return None
    return {item.account: item.balance for item in iter_balances(balances)}
