"""
Företagsmodell - uppgifter som stämplas på deklarationer
"""
from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Company:
    """
    Företag med räkenskapsår

    De flesta svenska företag har kalenderår (jan-dec),
    men brutet räkenskapsår är också möjligt.
    """
    orgnr: str
    name: str
    fiscal_year_start: date
    fiscal_year_end: date

    def __repr__(self):
        return f"<Company(name='{self.name}', org={self.orgnr})>"

    @property
    def year(self) -> int:
        """Returnera huvudåret (baserat på slutdatum)"""
        return self.fiscal_year_end.year

    def contains_date(self, check_date: date) -> bool:
        """Kontrollera om ett datum ligger inom räkenskapsåret"""
        return self.fiscal_year_start <= check_date <= self.fiscal_year_end
