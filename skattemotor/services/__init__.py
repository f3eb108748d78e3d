"""
Beräkningstjänster för skattemotorn
"""
from skattemotor.services.balances import aggregate, load_verifications, validate_balanced
from skattemotor.services.kontoplan import classify, load_chart_of_accounts
from skattemotor.services.vat import (
    calculate_vat_period, calculate_vat_from_balances,
    calculate_vat_from_transactions, calculate_vat_from_documents,
    create_empty_vat_report, recalculate_vat_report
)
from skattemotor.services.vat_export import render_vat_xml
from skattemotor.services.financial_statements import (
    FinancialStatementService, income_statement, balance_sheet
)
from skattemotor.services.tax_declaration import TaxDeclarationService
from skattemotor.services.sru_export import generate_sru_files, encode_sru

__all__ = [
    "aggregate",
    "load_verifications",
    "validate_balanced",
    "classify",
    "load_chart_of_accounts",
    "calculate_vat_period",
    "calculate_vat_from_balances",
    "calculate_vat_from_transactions",
    "calculate_vat_from_documents",
    "create_empty_vat_report",
    "recalculate_vat_report",
    "render_vat_xml",
    "FinancialStatementService",
    "income_statement",
    "balance_sheet",
    "TaxDeclarationService",
    "generate_sru_files",
    "encode_sru",
]
