"""
SRU-export - Filer för elektronisk inlämning av inkomstdeklaration

En leverans består av två filer:
- INFO.SRU: uppgiftslämnare och beskrivning av leveransen
- BLANKETTER.SRU: en post per blankett med #UPPGIFT-rader

Filerna skrivs med CR+LF och kodas som ISO-8859-1.
"""
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from skattemotor.config import PROGRAM_NAME, PROGRAM_VERSION
from skattemotor.models import SRUDeclaration, SRUPackage, SRUSender
from skattemotor.services.tax_declaration import parse_tax_period

LINE_END = "\r\n"
SRU_ENCODING = "iso-8859-1"

INFO_FILENAME = "INFO.SRU"
BLANKETTER_FILENAME = "BLANKETTER.SRU"


def format_orgnr(orgnr: str) -> str:
    """Organisationsnummer utan bindestreck"""
    return orgnr.replace("-", "").strip()


def format_value(value) -> str:
    """Belopp avrundas till hela kronor, text skrivs som den är"""
    if isinstance(value, (Decimal, int, float)):
        amount = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return str(int(amount))
    return str(value)


def _timestamp(created: datetime) -> str:
    return created.strftime("%Y%m%d %H%M%S")


def _join(lines: list[str]) -> str:
    return LINE_END.join(lines) + LINE_END


def generate_info_sru(sender: SRUSender, created: Optional[datetime] = None) -> str:
    """INFO.SRU med uppgiftslämnare. Tomma kontaktuppgifter utelämnas."""
    created = created or datetime.now()

    lines = [
        "#DATABESKRIVNING_START",
        "#PRODUKT SRU",
        f"#SKAPAD {_timestamp(created)}",
        f"#PROGRAM {PROGRAM_NAME} {PROGRAM_VERSION}",
        f"#FILNAMN {BLANKETTER_FILENAME}",
        "#DATABESKRIVNING_SLUT",
        "#MEDIELEV_START",
        f"#ORGNR {format_orgnr(sender.orgnr)}",
        f"#NAMN {sender.name}",
    ]

    optional = [
        ("#ADRESS", sender.address),
        ("#POSTNR", sender.postal_code),
        ("#POSTORT", sender.city),
        ("#AVDELNING", sender.department),
        ("#KONTAKT", sender.contact),
        ("#EMAIL", sender.email),
        ("#TELEFON", sender.phone),
        ("#FAX", sender.fax),
    ]
    for tag, value in optional:
        if value:
            lines.append(f"{tag} {value}")

    lines.append("#MEDIELEV_SLUT")
    return _join(lines)


def generate_blanketter_sru(
    declarations: Iterable[SRUDeclaration],
    created: Optional[datetime] = None
) -> str:
    """
    BLANKETTER.SRU med en blankett per deklaration

    Blankettnamnet är typ och period, t.ex. "INK2R-2024P4".
    """
    created = created or datetime.now()
    lines = []

    for declaration in declarations:
        parse_tax_period(declaration.period)
        lines.append(f"#BLANKETT {declaration.blankett_type.value}-{declaration.period}")
        lines.append(f"#IDENTITET {format_orgnr(declaration.orgnr)} {_timestamp(created)}")
        lines.append(f"#NAMN {declaration.name}")
        if declaration.system_info:
            lines.append(f"#SYSTEMINFO {declaration.system_info}")
        for sru_field in declaration.fields:
            lines.append(f"#UPPGIFT {sru_field.code} {format_value(sru_field.value)}")
        lines.append("#BLANKETTSLUT")

    lines.append("#FIL_SLUT")
    return _join(lines)


def generate_sru_files(
    package: SRUPackage,
    created: Optional[datetime] = None
) -> dict[str, str]:
    """Båda filerna för en leverans, filnamn -> innehåll"""
    created = created or datetime.now()
    return {
        INFO_FILENAME: generate_info_sru(package.sender, created),
        BLANKETTER_FILENAME: generate_blanketter_sru(package.declarations, created),
    }


def encode_sru(content: str) -> bytes:
    """
    Koda filinnehåll som ISO-8859-1

    Tecken utanför teckenuppsättningen (t.ex. tankstreck) ersätts med "?".
    """
    return content.encode(SRU_ENCODING, errors="replace")
