"""
Saldoberäkning - Summerar konteringsrader per konto över ett datumintervall
"""
import logging
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Optional, Union

from skattemotor.config import AMOUNT_THRESHOLD
from skattemotor.errors import UnbalancedVerificationError
from skattemotor.models import AccountBalance, Verification
from skattemotor.services.kontoplan import account_number, is_result_account

logger = logging.getLogger(__name__)

Balances = Union[Mapping[str, AccountBalance], Iterable[AccountBalance]]


def load_verifications(data: Iterable[dict]) -> list[Verification]:
    """Skapa verifikationer från huvudbokens externa format"""
    return [Verification.from_dict(item) for item in data]


def aggregate(
    verifications: Iterable[Verification],
    start: Optional[date] = None,
    end: Optional[date] = None
) -> dict[str, AccountBalance]:
    """
    Summera debet och kredit per konto

    Verifikationer med start <= datum <= end tas med. Utelämnad start eller
    end ger ett öppet intervall. Konton utan rader i intervallet saknas i
    resultatet, de får inget nollsaldo.
    """
    totals: dict[str, tuple[Decimal, Decimal]] = {}
    included = 0

    for verification in verifications:
        if start is not None and verification.date < start:
            continue
        if end is not None and verification.date > end:
            continue
        included += 1

        for row in verification.rows:
            debit, credit = totals.get(row.account, (Decimal(0), Decimal(0)))
            totals[row.account] = (debit + row.debit, credit + row.credit)

    logger.debug(
        "Saldon %s - %s: %d verifikationer, %d konton",
        start, end, included, len(totals)
    )

    return {
        account: AccountBalance(account=account, debit=debit, credit=credit)
        for account, (debit, credit) in totals.items()
    }


def iter_balances(balances: Balances) -> list[AccountBalance]:
    """Saldon som lista, oavsett om de ges som dict eller sekvens"""
    if isinstance(balances, Mapping):
        return list(balances.values())
    return list(balances)


def sum_account_range(balances: Balances, start: int, end: int) -> Decimal:
    """Summera saldot (kredit - debet) för konton i intervallet start-end"""
    total = Decimal(0)
    for item in iter_balances(balances):
        number = account_number(item.account)
        if number is not None and start <= number <= end:
            total += item.balance
    return total


def result_for_period(balances: Balances) -> Decimal:
    """Periodens resultat: summan av alla resultatkonton (3000-8999)"""
    return sum(
        (item.balance for item in iter_balances(balances) if is_result_account(item.account)),
        Decimal(0)
    )


def unmapped_accounts(
    balances: Balances,
    is_mapped: Callable[[str], bool]
) -> list[str]:
    """Konton med saldo som ingen tabell i den aktuella beräkningen täcker"""
    return sorted(
        item.account
        for item in iter_balances(balances)
        if abs(item.balance) > AMOUNT_THRESHOLD and not is_mapped(item.account)
    )


# === VALIDERING ===

def unbalanced_verifications(verifications: Iterable[Verification]) -> list[Verification]:
    """Hitta verifikationer där debet och kredit skiljer sig"""
    return [v for v in verifications if not v.is_balanced]


def validate_balanced(verifications: Iterable[Verification]) -> None:
    """
    Kontrollera att varje verifikation balanserar

    Frivillig kontroll, beräkningarna förutsätter balanserad indata.
    Kastar UnbalancedVerificationError för den första obalanserade.
    """
    unbalanced = unbalanced_verifications(verifications)
    if unbalanced:
        first = unbalanced[0]
        raise UnbalancedVerificationError(
            f"Verifikationen {first.date} '{first.description}' "
            f"balanserar inte: debet={first.total_debit}, kredit={first.total_credit}"
        )
