"""
Konfiguration för skattemotorn
"""
from decimal import Decimal
from enum import Enum
from pathlib import Path

# Paketrot
BASE_DIR = Path(__file__).resolve().parent

# Medföljande data och mallar
DATA_DIR = BASE_DIR / "data"
TEMPLATE_DIR = BASE_DIR / "templates"
BAS_CHART_FILE = DATA_DIR / "bas_kontoplan.json"

# Programidentitet i SRU- och eSKD-filer
PROGRAM_NAME = "Skattemotor"
PROGRAM_VERSION = "1.0"


class AccountType(str, Enum):
    """Kontotyper enligt BAS"""
    ASSET = "Tillgång"
    LIABILITY = "Skuld"
    EQUITY = "Eget kapital"
    REVENUE = "Intäkt"
    EXPENSE = "Kostnad"


class VatStatus(str, Enum):
    """Status för en momsperiod"""
    UPCOMING = "upcoming"
    SUBMITTED = "submitted"  # Sätts endast av extern hantering
    OVERDUE = "overdue"


class BlankettType(str, Enum):
    """Blanketter i inkomstdeklarationen för aktiebolag"""
    INK2 = "INK2"    # Huvudblankett
    INK2R = "INK2R"  # Räkenskapsschema
    INK2S = "INK2S"  # Skattemässiga justeringar


# Momssatser i Sverige (procent -> andel)
VAT_RATES = {
    25: Decimal("0.25"),  # de flesta varor och tjänster
    12: Decimal("0.12"),  # livsmedel, hotell, restaurang
    6: Decimal("0.06"),   # böcker, tidningar, kultur, persontransport
}

# Sista deklarationsdag per kvartal: (månad, dag, årsförskjutning)
VAT_DEADLINES = {
    1: (5, 12, 0),
    2: (8, 17, 0),
    3: (11, 12, 0),
    4: (2, 12, 1),
}

# Belopp under tröskeln räknas som avrundningsbrus
AMOUNT_THRESHOLD = Decimal("0.01")

# Representation: hälften är ej avdragsgill
REPRESENTATION_NON_DEDUCTIBLE_SHARE = Decimal("0.5")

# Bolagsskatt 2024
CORPORATE_TAX_RATE = Decimal("0.206")  # 20.6%
