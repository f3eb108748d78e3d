"""
Kontomodeller - BAS-kontoplan och kontosaldon
"""
from dataclasses import dataclass
from decimal import Decimal

from skattemotor.config import AccountType


@dataclass(frozen=True)
class Account:
    """
    Konto enligt BAS-kontoplan

    BAS-kontoplanen är indelad i klasser:
    - 1xxx: Tillgångar
    - 2xxx: Eget kapital och skulder
    - 3xxx: Rörelsens intäkter
    - 4xxx: Rörelsens kostnader (varor)
    - 5-6xxx: Övriga externa kostnader
    - 7xxx: Personal
    - 8xxx: Finansiella poster och skatter
    """
    number: str
    name: str
    account_type: AccountType = AccountType.ASSET

    @property
    def account_class(self) -> int:
        """Returnera kontoklass (1-8) baserat på kontonummer"""
        if self.number:
            return int(self.number[0])
        return 0

    @property
    def is_balance_account(self) -> bool:
        """Är detta ett balanskonto (klass 1-2)?"""
        return self.account_class in [1, 2]

    @property
    def is_result_account(self) -> bool:
        """Är detta ett resultatkonto (klass 3-8)?"""
        return self.account_class in [3, 4, 5, 6, 7, 8]


@dataclass(frozen=True)
class AccountBalance:
    """
    Saldo för ett konto över ett datumintervall

    balance = kredit - debet för alla konton. Tillgångar och kostnader
    blir alltså negativa, skulder, eget kapital och intäkter positiva.
    """
    account: str
    debit: Decimal = Decimal(0)
    credit: Decimal = Decimal(0)

    @property
    def balance(self) -> Decimal:
        return self.credit - self.debit
