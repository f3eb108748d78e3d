"""
Kontoplan - Klassificering av BAS-konton

Alla kalkylatorer slår upp konton i samma intervalltabell så att moms,
resultaträkning och balansräkning inte glider isär. Tabellerna kontrolleras
mot överlapp när modulen laddas.
"""
import bisect
import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Hashable, Iterable, Optional, Union

from skattemotor.config import BAS_CHART_FILE, AccountType
from skattemotor.errors import InvalidAccountError
from skattemotor.models import Account


class AccountCategory(str, Enum):
    """Semantisk kategori för ett kontointervall"""
    FIXED_ASSETS = "Anläggningstillgångar"
    CURRENT_ASSETS = "Omsättningstillgångar"
    EQUITY = "Eget kapital"
    UNTAXED_RESERVES = "Obeskattade reserver"
    PROVISIONS = "Avsättningar"
    LONG_TERM_LIABILITIES = "Långfristiga skulder"
    SHORT_TERM_LIABILITIES = "Kortfristiga skulder"
    OUTPUT_VAT_25 = "Utgående moms 25%"
    OUTPUT_VAT_12 = "Utgående moms 12%"
    OUTPUT_VAT_6 = "Utgående moms 6%"
    INPUT_VAT = "Ingående moms"
    NET_SALES = "Nettoomsättning"
    CAPITALIZED_WORK = "Aktiverat arbete för egen räkning"
    OTHER_OPERATING_INCOME = "Övriga rörelseintäkter"
    MATERIALS = "Material och varor"
    OTHER_EXTERNAL_COSTS = "Övriga externa kostnader"
    PERSONNEL = "Personalkostnader"
    WRITE_DOWNS = "Nedskrivningar"
    DEPRECIATION = "Avskrivningar"
    OTHER_OPERATING_COSTS = "Övriga rörelsekostnader"
    FINANCIAL_ITEMS = "Finansiella poster"
    INCOME_TAX = "Skatt"


@dataclass(frozen=True)
class AccountRange:
    """Slutet intervall av kontonummer med en nyckel (kategori eller SRU-kod)"""
    start: int
    end: int
    key: Hashable

    def __contains__(self, number: int) -> bool:
        return self.start <= number <= self.end


class RangeTable:
    """
    Sorterad tabell av kontointervall utan överlapp

    Uppslagning sker med binärsökning på intervallens startnummer.
    """

    def __init__(self, ranges: Iterable[AccountRange]):
        self.ranges = tuple(sorted(ranges, key=lambda r: r.start))
        for previous, current in zip(self.ranges, self.ranges[1:]):
            if current.start <= previous.end:
                raise ValueError(
                    f"Överlappande kontointervall: {previous.start}-{previous.end} "
                    f"och {current.start}-{current.end}"
                )
        self._starts = [r.start for r in self.ranges]

    def lookup(self, number: int) -> Optional[AccountRange]:
        """Hitta intervallet som innehåller kontonumret"""
        index = bisect.bisect_right(self._starts, number) - 1
        if index >= 0 and number in self.ranges[index]:
            return self.ranges[index]
        return None

    def key_for(self, account: str) -> Optional[Hashable]:
        """Nyckeln för ett kontonummer, None om kontot inte täcks"""
        number = account_number(account)
        if number is None:
            return None
        found = self.lookup(number)
        return found.key if found else None


def account_number(code: Union[str, int, None]) -> Optional[int]:
    """
    Tolka de fyra första tecknen i ett kontonummer som heltal

    Icke-numeriska eller tomma koder ger None.
    """
    text = str(code if code is not None else "").strip()[:4]
    if not text.isdecimal():
        return None
    return int(text)


def parse_account_number(code: Union[str, int, None]) -> int:
    """Som account_number men kastar InvalidAccountError för ogiltiga koder"""
    number = account_number(code)
    if number is None:
        raise InvalidAccountError(f"Ogiltigt kontonummer: {code!r}")
    return number


# Intervalltabell enligt BAS. Momskontona bryts ut ur de kortfristiga
# skulderna så att varje konto hamnar i exakt en kategori.
BAS_RANGES = RangeTable([
    AccountRange(1000, 1399, AccountCategory.FIXED_ASSETS),
    AccountRange(1400, 1999, AccountCategory.CURRENT_ASSETS),
    AccountRange(2000, 2099, AccountCategory.EQUITY),
    AccountRange(2100, 2199, AccountCategory.UNTAXED_RESERVES),
    AccountRange(2200, 2299, AccountCategory.PROVISIONS),
    AccountRange(2300, 2399, AccountCategory.LONG_TERM_LIABILITIES),
    AccountRange(2400, 2609, AccountCategory.SHORT_TERM_LIABILITIES),
    AccountRange(2610, 2619, AccountCategory.OUTPUT_VAT_25),
    AccountRange(2620, 2629, AccountCategory.OUTPUT_VAT_12),
    AccountRange(2630, 2639, AccountCategory.OUTPUT_VAT_6),
    AccountRange(2640, 2649, AccountCategory.INPUT_VAT),
    AccountRange(2650, 2999, AccountCategory.SHORT_TERM_LIABILITIES),
    AccountRange(3000, 3799, AccountCategory.NET_SALES),
    AccountRange(3800, 3899, AccountCategory.CAPITALIZED_WORK),
    AccountRange(3900, 3999, AccountCategory.OTHER_OPERATING_INCOME),
    AccountRange(4000, 4999, AccountCategory.MATERIALS),
    AccountRange(5000, 6999, AccountCategory.OTHER_EXTERNAL_COSTS),
    AccountRange(7000, 7699, AccountCategory.PERSONNEL),
    AccountRange(7700, 7799, AccountCategory.WRITE_DOWNS),
    AccountRange(7800, 7899, AccountCategory.DEPRECIATION),
    AccountRange(7900, 7999, AccountCategory.OTHER_OPERATING_COSTS),
    AccountRange(8000, 8899, AccountCategory.FINANCIAL_ITEMS),
    AccountRange(8900, 8999, AccountCategory.INCOME_TAX),
])


def classify(account: Union[str, int, None]) -> Optional[AccountCategory]:
    """Klassificera ett konto, None om det inte täcks av BAS-tabellen"""
    return BAS_RANGES.key_for(account)


def is_result_account(account: str) -> bool:
    """Resultatkonto (3000-8999)?"""
    number = account_number(account)
    return number is not None and 3000 <= number <= 8999


# === KONTOPLAN ===

def load_chart_of_accounts(path: Optional[Path] = None) -> list[Account]:
    """
    Ladda BAS-kontoplan från JSON

    Filformat: {"accounts": [{"number": "1930", "name": "...", "type": "Tillgång"}]}
    Utan sökväg används den medföljande kontoplanen.
    """
    chart_file = Path(path) if path else BAS_CHART_FILE

    with open(chart_file, "r", encoding="utf-8") as f:
        data = json.load(f)

    type_mapping = {account_type.value: account_type for account_type in AccountType}

    accounts = []
    for acc_data in data["accounts"]:
        number = str(acc_data["number"])
        parse_account_number(number)
        accounts.append(Account(
            number=number,
            name=acc_data["name"],
            account_type=type_mapping.get(acc_data.get("type"), AccountType.ASSET),
        ))
    return accounts


def account_names(accounts: Iterable[Union[Account, dict]]) -> dict[str, str]:
    """Bygg uppslag kontonummer -> namn från konton eller {number, name}-dicts"""
    names = {}
    for account in accounts:
        if isinstance(account, dict):
            names[str(account["number"])] = account["name"]
        else:
            names[account.number] = account.name
    return names


def account_label(account: str, names: dict[str, str]) -> str:
    """Kontonamn, eller "Konto 1234" om kontot saknas i kontoplanen"""
    return names.get(account) or f"Konto {account}"
