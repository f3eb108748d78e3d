"""
INK2-fält - SRU-koder med fältnummer, ledtext, sektion och BAS-intervall

- INK2 Huvudblankett (1.1-1.2 samt räkenskapsår)
- INK2R Balansräkning (2.1-2.50)
- INK2R Resultaträkning (3.1-3.27)
- INK2S Skattemässiga justeringar (4.1-4.16)

Fält med både plus- och minuskod (t.ex. 3.2 förändring av lager) har
intervallen på pluskoden och minuskoden i negative_code.
"""
from dataclasses import dataclass
from typing import Optional

from skattemotor.config import BlankettType
from skattemotor.services.kontoplan import AccountRange, RangeTable


@dataclass(frozen=True)
class Ink2Field:
    """Ett fält på blanketten"""
    code: int
    field: str
    label: str
    section: str
    blankett: BlankettType
    ranges: tuple[tuple[int, int], ...] = ()
    negative_code: Optional[int] = None


def _fields(blankett: BlankettType, rows: list[tuple]) -> list[Ink2Field]:
    fields = []
    for row in rows:
        code, field_no, label, section, ranges, *rest = row
        negative_code = rest[0] if rest else None
        fields.append(Ink2Field(
            code, field_no, label, section, blankett, tuple(ranges), negative_code
        ))
        if negative_code:
            fields.append(Ink2Field(
                negative_code, field_no.replace("+", "-"), label.replace("(+)", "(-)"),
                section, blankett
            ))
    return fields


INK2_MAIN_FIELDS = _fields(BlankettType.INK2, [
    (7011, "", "Räkenskapsårets början", "Räkenskapsår", []),
    (7012, "", "Räkenskapsårets slut", "Räkenskapsår", []),
    (7104, "1.1", "Överskott av näringsverksamhet", "Underlag för inkomstskatt", []),
    (7114, "1.2", "Underskott av näringsverksamhet", "Underlag för inkomstskatt", []),
])

BALANCE_SHEET_FIELDS = _fields(BlankettType.INK2R, [
    # Immateriella anläggningstillgångar
    (7201, "2.1", "Koncessioner, patent, licenser, varumärken, hyresrätter, goodwill och liknande rättigheter",
     "Immateriella anläggningstillgångar", [(1000, 1079)]),
    (7202, "2.2", "Förskott avseende immateriella anläggningstillgångar",
     "Immateriella anläggningstillgångar", [(1080, 1099)]),
    # Materiella anläggningstillgångar
    (7214, "2.3", "Byggnader och mark",
     "Materiella anläggningstillgångar", [(1100, 1119), (1130, 1179), (1190, 1199)]),
    (7215, "2.4", "Maskiner, inventarier och övriga materiella anläggningstillgångar",
     "Materiella anläggningstillgångar", [(1200, 1299)]),
    (7216, "2.5", "Förbättringsutgifter på annans fastighet",
     "Materiella anläggningstillgångar", [(1120, 1129)]),
    (7217, "2.6", "Pågående nyanläggningar och förskott avseende materiella anläggningstillgångar",
     "Materiella anläggningstillgångar", [(1180, 1189)]),
    # Finansiella anläggningstillgångar
    (7230, "2.7", "Andelar i koncernföretag",
     "Finansiella anläggningstillgångar", [(1310, 1319)]),
    (7231, "2.8", "Andelar i intresseföretag och gemensamt styrda företag",
     "Finansiella anläggningstillgångar", [(1330, 1339)]),
    (7233, "2.9", "Ägarintressen i övriga företag och andra långfristiga värdepappersinnehav",
     "Finansiella anläggningstillgångar", [(1350, 1359)]),
    (7232, "2.10", "Fordringar hos koncern-, intresse- och gemensamt styrda företag",
     "Finansiella anläggningstillgångar", [(1320, 1329), (1340, 1349)]),
    (7234, "2.11", "Lån till delägare eller närstående",
     "Finansiella anläggningstillgångar", [(1360, 1369)]),
    (7235, "2.12", "Fordringar hos övriga företag som det finns ett ägarintresse i och andra långfristiga fordringar",
     "Finansiella anläggningstillgångar", [(1370, 1399)]),
    # Varulager m.m.
    (7241, "2.13", "Råvaror och förnödenheter", "Varulager m.m.", [(1400, 1429)]),
    (7242, "2.14", "Varor under tillverkning", "Varulager m.m.", [(1430, 1449)]),
    (7243, "2.15", "Färdiga varor och handelsvaror", "Varulager m.m.", [(1450, 1469)]),
    (7244, "2.16", "Övriga lagertillgångar", "Varulager m.m.", [(1470, 1479)]),
    (7245, "2.17", "Pågående arbeten för annans räkning", "Varulager m.m.", [(1480, 1489)]),
    (7246, "2.18", "Förskott till leverantörer", "Varulager m.m.", [(1490, 1499)]),
    # Kortfristiga fordringar
    (7251, "2.19", "Kundfordringar", "Kortfristiga fordringar", [(1500, 1519)]),
    (7252, "2.20", "Fordringar hos koncern-, intresse- och gemensamt styrda företag",
     "Kortfristiga fordringar", [(1560, 1579)]),
    (7261, "2.21", "Fordringar hos övriga företag som det finns ett ägarintresse i och övriga fordringar",
     "Kortfristiga fordringar", [(1520, 1559), (1580, 1619), (1630, 1699)]),
    (7262, "2.22", "Upparbetad men ej fakturerad intäkt", "Kortfristiga fordringar", [(1620, 1629)]),
    (7263, "2.23", "Förutbetalda kostnader och upplupna intäkter", "Kortfristiga fordringar", [(1700, 1799)]),
    # Kortfristiga placeringar
    (7270, "2.24", "Andelar i koncernföretag", "Kortfristiga placeringar", [(1860, 1869)]),
    (7271, "2.25", "Övriga kortfristiga placeringar",
     "Kortfristiga placeringar", [(1800, 1859), (1870, 1899)]),
    # Kassa och bank
    (7281, "2.26", "Kassa, bank och redovisningsmedel", "Kassa och bank", [(1900, 1999)]),
    # Eget kapital
    (7301, "2.27", "Bundet eget kapital", "Eget kapital", [(2081, 2089)]),
    (7302, "2.28", "Fritt eget kapital", "Eget kapital", [(2090, 2099)]),
    # Obeskattade reserver
    (7321, "2.29", "Periodiseringsfonder", "Obeskattade reserver", [(2110, 2149)]),
    (7322, "2.30", "Ackumulerade överavskrivningar", "Obeskattade reserver", [(2150, 2159)]),
    (7323, "2.31", "Övriga obeskattade reserver", "Obeskattade reserver", [(2160, 2199)]),
    # Avsättningar
    (7331, "2.32", "Avsättningar för pensioner och liknande förpliktelser enligt lag (1967:531) "
                   "om tryggande av pensionsutfästelse m.m.", "Avsättningar", [(2210, 2219)]),
    (7332, "2.33", "Övriga avsättningar för pensioner och liknande förpliktelser",
     "Avsättningar", [(2220, 2239)]),
    (7333, "2.34", "Övriga avsättningar", "Avsättningar", [(2240, 2299)]),
    # Långfristiga skulder
    (7350, "2.35", "Obligationslån", "Långfristiga skulder", [(2310, 2329)]),
    (7351, "2.36", "Checkräkningskredit", "Långfristiga skulder", [(2330, 2339)]),
    (7352, "2.37", "Övriga skulder till kreditinstitut", "Långfristiga skulder", [(2340, 2359)]),
    (7353, "2.38", "Skulder till koncern-, intresse- och gemensamt styrda företag",
     "Långfristiga skulder", [(2360, 2379)]),
    (7354, "2.39", "Skulder till övriga företag som det finns ett ägarintresse i och övriga skulder",
     "Långfristiga skulder", [(2380, 2399)]),
    # Kortfristiga skulder
    (7360, "2.40", "Checkräkningskredit", "Kortfristiga skulder", [(2480, 2489)]),
    (7361, "2.41", "Övriga skulder till kreditinstitut", "Kortfristiga skulder", [(2410, 2419)]),
    (7362, "2.42", "Förskott från kunder", "Kortfristiga skulder", [(2420, 2429)]),
    (7363, "2.43", "Pågående arbeten för annans räkning", "Kortfristiga skulder", [(2430, 2439)]),
    (7364, "2.44", "Fakturerad men ej upparbetad intäkt", "Kortfristiga skulder", [(2450, 2459)]),
    (7365, "2.45", "Leverantörsskulder", "Kortfristiga skulder", [(2440, 2449)]),
    (7366, "2.46", "Växelskulder", "Kortfristiga skulder", [(2490, 2499)]),
    (7367, "2.47", "Skulder till koncern-, intresse- och gemensamt styrda företag",
     "Kortfristiga skulder", [(2460, 2479)]),
    (7369, "2.48", "Skulder till övriga företag som det finns ett ägarintresse i och övriga skulder",
     "Kortfristiga skulder", [(2600, 2899)]),
    (7368, "2.49", "Skatteskulder", "Kortfristiga skulder", [(2500, 2599)]),
    (7370, "2.50", "Upplupna kostnader och förutbetalda intäkter", "Kortfristiga skulder", [(2900, 2999)]),
])

INCOME_STATEMENT_FIELDS = _fields(BlankettType.INK2R, [
    # Rörelseintäkter
    (7410, "3.1", "Nettoomsättning", "Rörelseintäkter", [(3000, 3799)]),
    (7411, "3.2+", "Förändring av lager av produkter i arbete, färdiga varor och pågående arbete "
                   "för annans räkning (+)", "Rörelseintäkter", [(4900, 4999)], 7510),
    (7412, "3.3", "Aktiverat arbete för egen räkning", "Rörelseintäkter", [(3800, 3899)]),
    (7413, "3.4", "Övriga rörelseintäkter", "Rörelseintäkter", [(3900, 3999)]),
    # Rörelsekostnader
    (7511, "3.5", "Råvaror och förnödenheter", "Rörelsekostnader", [(4000, 4099)]),
    (7512, "3.6", "Handelsvaror", "Rörelsekostnader", [(4100, 4899)]),
    (7513, "3.7", "Övriga externa kostnader", "Rörelsekostnader", [(5000, 6999)]),
    (7514, "3.8", "Personalkostnader", "Rörelsekostnader", [(7000, 7699)]),
    (7515, "3.9", "Av- och nedskrivningar av materiella och immateriella anläggningstillgångar",
     "Rörelsekostnader", [(7700, 7719), (7730, 7899)]),
    (7516, "3.10", "Nedskrivningar av omsättningstillgångar utöver normala nedskrivningar",
     "Rörelsekostnader", [(7720, 7729)]),
    (7517, "3.11", "Övriga rörelsekostnader", "Rörelsekostnader", [(7900, 7999)]),
    # Finansiella poster
    (7414, "3.12+", "Resultat från andelar i koncernföretag (+)",
     "Finansiella poster", [(8000, 8099)], 7518),
    (7415, "3.13+", "Resultat från andelar i intresseföretag och gemensamt styrda företag (+)",
     "Finansiella poster", [(8100, 8199)], 7519),
    (7416, "3.15+", "Resultat från övriga finansiella anläggningstillgångar (+)",
     "Finansiella poster", [(8200, 8269), (8280, 8299)], 7520),
    (7417, "3.16", "Övriga ränteintäkter och liknande resultatposter",
     "Finansiella poster", [(8300, 8399)]),
    (7521, "3.17", "Nedskrivningar av finansiella anläggningstillgångar och kortfristiga placeringar",
     "Finansiella poster", [(8270, 8279)]),
    (7522, "3.18", "Räntekostnader och liknande resultatposter", "Finansiella poster", [(8400, 8499)]),
    # Bokslutsdispositioner
    (7524, "3.19", "Lämnade koncernbidrag", "Bokslutsdispositioner", [(8830, 8839)]),
    (7419, "3.20", "Mottagna koncernbidrag", "Bokslutsdispositioner", [(8820, 8829)]),
    (7420, "3.21", "Återföring av periodiseringsfond", "Bokslutsdispositioner", [(8819, 8819)]),
    (7525, "3.22", "Avsättning till periodiseringsfond", "Bokslutsdispositioner", [(8810, 8818)]),
    (7421, "3.23+", "Förändring av överavskrivningar (+)",
     "Bokslutsdispositioner", [(8850, 8859)], 7526),
    (7422, "3.24+", "Övriga bokslutsdispositioner (+)",
     "Bokslutsdispositioner", [(8860, 8899)], 7527),
    # Skatt och resultat
    (7528, "3.25", "Skatt på årets resultat", "Skatt och resultat", [(8900, 8999)]),
    (7450, "3.26", "Årets resultat, vinst", "Skatt och resultat", []),
    (7550, "3.27", "Årets resultat, förlust", "Skatt och resultat", []),
])

TAX_ADJUSTMENT_FIELDS = _fields(BlankettType.INK2S, [
    (7650, "4.1", "Årets resultat, vinst", "Årets resultat", []),
    (7750, "4.2", "Årets resultat, förlust", "Årets resultat", []),
    (7651, "4.3a", "Skatt på årets resultat", "Ej avdragsgilla kostnader", []),
    (7652, "4.3b", "Nedskrivning av finansiella tillgångar", "Ej avdragsgilla kostnader", []),
    (7653, "4.3c", "Andra bokförda kostnader (ej avdragsgilla)", "Ej avdragsgilla kostnader", []),
    (7670, "4.15", "Överskott (till p. 1.1)", "Slutligt resultat", []),
    (7770, "4.16", "Underskott (till p. 1.2)", "Slutligt resultat", []),
])

ALL_FIELDS = [
    *INK2_MAIN_FIELDS, *BALANCE_SHEET_FIELDS, *INCOME_STATEMENT_FIELDS, *TAX_ADJUSTMENT_FIELDS
]
FIELDS_BY_CODE = {f.code: f for f in ALL_FIELDS}


def _range_table(fields: list[Ink2Field]) -> RangeTable:
    return RangeTable(
        AccountRange(start, end, f.code)
        for f in fields
        for start, end in f.ranges
    )


# Kontrolleras mot överlapp när modulen laddas
BALANCE_SHEET_TABLE = _range_table(BALANCE_SHEET_FIELDS)
INCOME_STATEMENT_TABLE = _range_table(INCOME_STATEMENT_FIELDS)


def describe(code: int) -> Optional[Ink2Field]:
    """Fältbeskrivning för en SRU-kod"""
    return FIELDS_BY_CODE.get(code)
