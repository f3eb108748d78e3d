"""
Modeller för skattemotorn
"""
from skattemotor.models.account import Account, AccountBalance
from skattemotor.models.company import Company
from skattemotor.models.transaction import Posting, Verification
from skattemotor.models.vat import (
    VatReport, VatTransaction, CustomerInvoice, SupplierInvoice, Receipt
)
from skattemotor.models.financial import StatementLine, FinancialItem, FinancialSection
from skattemotor.models.tax_declaration import (
    SRUField, SRUDeclaration, SRUSender, SRUPackage, Ink2Result, Ink2Totals
)

__all__ = [
    "Account",
    "AccountBalance",
    "Company",
    "Posting",
    "Verification",
    "VatReport",
    "VatTransaction",
    "CustomerInvoice",
    "SupplierInvoice",
    "Receipt",
    "StatementLine",
    "FinancialItem",
    "FinancialSection",
    "SRUField",
    "SRUDeclaration",
    "SRUSender",
    "SRUPackage",
    "Ink2Result",
    "Ink2Totals",
]
