"""
Export av momsdeklaration till XML (förenklat eSKD-format)

Mallen ligger i skattemotor/templates/momsdeklaration.xml och renderas
med Jinja2, på samma sätt som övriga dokument genereras från mallar.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from skattemotor.config import PROGRAM_NAME, PROGRAM_VERSION, TEMPLATE_DIR
from skattemotor.models import Company, VatReport
from skattemotor.models.vat import VAT_BOXES
from skattemotor.services.vat import parse_period

VAT_TEMPLATE = "momsdeklaration.xml"


def kronor(value) -> str:
    """Belopp i hela kronor"""
    if value is None:
        return "0"
    amount = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return str(int(amount))


def eskd_period(period: str) -> str:
    """Kvartalets sista månad som ÅÅÅÅMM, t.ex. "Q4 2024" -> "202412" """
    quarter, year = parse_period(period)
    return f"{year}{quarter * 3:02d}"


def create_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(['html', 'xml'])
    )
    env.filters['kronor'] = kronor
    return env


def render_vat_xml(
    report: VatReport,
    company: Optional[Company] = None,
    orgnr: Optional[str] = None
) -> str:
    """
    Rendera momsdeklarationen som XML

    Organisationsnumret tas från company om det anges, annars från orgnr.
    Rutorna skrivs i blankettens ordning, Ruta05 till Ruta48, följt av
    AttBetalaEllerFaTillbaka (ruta 49).
    """
    number = company.orgnr if company else orgnr
    if not number:
        raise ValueError("Organisationsnummer saknas för momsdeklarationen")

    boxes = [(f"Ruta{name[4:]}", getattr(report, name)) for name in VAT_BOXES]

    template = create_environment().get_template(VAT_TEMPLATE)
    return template.render(
        program=f"{PROGRAM_NAME} {PROGRAM_VERSION}",
        orgnr=number.replace("-", ""),
        period=eskd_period(report.period),
        boxes=boxes,
        net_vat=report.net_vat,
    )
