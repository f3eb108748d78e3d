"""
Felklasser för skattemotorn

Alla fel ärver ValueError så att anropare som fångar ValueError
fortsätter att fungera.
"""


class InvalidPeriodError(ValueError):
    """Perioden följer inte formatet 'Qn ÅÅÅÅ' eller 'ÅÅÅÅPn'"""


class InvalidAccountError(ValueError):
    """Kontonumret är inte numeriskt där ett nummer krävs"""


class UnbalancedVerificationError(ValueError):
    """Debet och kredit är inte lika inom en verifikation"""
