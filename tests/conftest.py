"""
Gemensamma fixtures: ett litet aktiebolag med ett års verifikationer
"""
import pytest
from datetime import date
from decimal import Decimal

from skattemotor.models import Company, Posting, Verification


def verification(day: str, description: str, *rows) -> Verification:
    """Verifikation från (konto, debet, kredit)-tupler"""
    return Verification(
        date=date.fromisoformat(day),
        description=description,
        rows=tuple(
            Posting(account=account, debit=Decimal(debit), credit=Decimal(credit))
            for account, debit, credit in rows
        ),
    )


@pytest.fixture
def company():
    return Company(
        orgnr="556000-0000",
        name="Testbolaget AB",
        fiscal_year_start=date(2024, 1, 1),
        fiscal_year_end=date(2024, 12, 31),
    )


@pytest.fixture
def ledger():
    """
    Räkenskapsår 2024

    Resultat 9 000 kr: försäljning 15 000, hyra 4 000,
    representation 1 000 och skatt 1 000.
    """
    return [
        verification("2024-01-02", "Insättning aktiekapital",
                     ("1930", 50000, 0), ("2081", 0, 50000)),
        verification("2024-03-15", "Kundfaktura 1001",
                     ("1510", 12500, 0), ("3010", 0, 10000), ("2610", 0, 2500)),
        verification("2024-04-10", "Inbetalning kundfaktura 1001",
                     ("1930", 12500, 0), ("1510", 0, 12500)),
        verification("2024-05-20", "Lokalhyra maj",
                     ("5010", 4000, 0), ("2640", 1000, 0), ("2440", 0, 5000)),
        verification("2024-06-01", "Kundlunch",
                     ("6072", 1000, 0), ("1930", 0, 1000)),
        verification("2024-10-05", "Kontantförsäljning",
                     ("1930", 6250, 0), ("3010", 0, 5000), ("2610", 0, 1250)),
        verification("2024-12-31", "Skatt på årets resultat",
                     ("8910", 1000, 0), ("2510", 0, 1000)),
    ]


@pytest.fixture
def chart():
    return [
        {"number": "1930", "name": "Företagskonto"},
        {"number": "2610", "name": "Utgående moms, 25%"},
        {"number": "3010", "name": "Försäljning tjänster, 25% moms"},
        {"number": "5010", "name": "Lokalhyra"},
    ]
