"""
Tester för resultat- och balansräkning
"""
import logging
from decimal import Decimal

import pytest

from skattemotor.models import AccountBalance
from skattemotor.services.balances import aggregate
from skattemotor.services.financial_statements import (
    UNBOOKED_RESULT_LABEL, FinancialStatementService, balance_sheet,
    empty_balance_sheet, empty_income_statement, income_statement
)

from conftest import verification


def line(lines, label):
    return next(l for l in lines if l.label == label)


def section(sections, title):
    return next(s for s in sections if s.title == title)


@pytest.fixture
def balances(ledger):
    return aggregate(ledger)


@pytest.fixture
def service(chart):
    return FinancialStatementService(chart)


class TestIncomeStatement:
    def test_roll_up(self, balances):
        """Testa delsummorna i resultaträkningen"""
        lines = income_statement(balances)

        assert line(lines, "Rörelsens intäkter").value == Decimal(15000)
        assert line(lines, "Bruttoresultat").value == Decimal(15000)
        assert line(lines, "Övriga externa kostnader").value == Decimal(-5000)
        assert line(lines, "Rörelseresultat före avskrivningar (EBITDA)").value == Decimal(10000)
        assert line(lines, "Resultat före skatt").value == Decimal(10000)
        assert line(lines, "Skatt").value == Decimal(-1000)
        assert line(lines, "ÅRETS RESULTAT").value == Decimal(9000)

    def test_highlight_and_header_rows(self, balances):
        lines = income_statement(balances)
        assert line(lines, "Rörelsekostnader").is_header
        assert [l.label for l in lines if l.highlight] == [
            "Bruttoresultat",
            "Rörelseresultat före avskrivningar (EBITDA)",
            "Rörelseresultat (EBIT)",
            "Resultat före skatt",
            "ÅRETS RESULTAT",
        ]

    def test_flat_depreciation_range(self):
        """Testa att sammanställd variant räknar 7700-7999 som avskrivningar"""
        lines = income_statement([
            AccountBalance("7720", debit=Decimal(100)),
            AccountBalance("7832", debit=Decimal(200)),
            AccountBalance("7970", debit=Decimal(300)),
        ])
        assert line(lines, "Avskrivningar").value == Decimal(-600)

    def test_empty(self):
        """Testa att tom resultaträkning har samma rader med nollor"""
        lines = empty_income_statement()
        assert len(lines) == 13
        assert all(l.value == 0 for l in lines)


class TestBalanceSheet:
    def test_accounting_equation(self, balances):
        """Testa att summa tillgångar = summa eget kapital och skulder"""
        lines = balance_sheet(balances)

        assert line(lines, "Omsättningstillgångar").value == Decimal(67750)
        assert line(lines, UNBOOKED_RESULT_LABEL).value == Decimal(9000)
        assert line(lines, "Kortfristiga skulder").value == Decimal(8750)
        assert line(lines, "SUMMA TILLGÅNGAR").value == Decimal(67750)
        assert line(lines, "SUMMA EGET KAPITAL OCH SKULDER").value == Decimal(67750)

    def test_provisions_line(self):
        """Testa att avsättningar ingår i summan"""
        ledger = [verification("2024-01-01", "Avsättning", ("1930", 500, 0), ("2250", 0, 500))]
        lines = balance_sheet(aggregate(ledger))
        assert line(lines, "Avsättningar").value == Decimal(500)
        assert line(lines, "SUMMA EGET KAPITAL OCH SKULDER").value == Decimal(500)

    def test_empty(self):
        lines = empty_balance_sheet()
        assert line(lines, "SUMMA TILLGÅNGAR").value == 0
        assert line(lines, "TILLGÅNGAR").is_header


class TestIncomeStatementSections:
    def test_sections(self, service, balances):
        """Testa sektioner med en post per konto"""
        sections = service.income_statement_sections(balances)

        assert [s.title for s in sections] == [
            "Nettoomsättning",
            "Övriga rörelseintäkter",
            "Kostnader för material och varor",
            "Övriga externa kostnader",
            "Personalkostnader",
            "Avskrivningar",
            "Finansiella poster",
            "Skatt",
            "Årets resultat",
        ]
        external = section(sections, "Övriga externa kostnader")
        assert [(i.account, i.label, i.value) for i in external.items] == [
            ("5010", "Lokalhyra", Decimal(-4000)),
            ("6072", "Konto 6072", Decimal(-1000)),
        ]
        assert external.total == Decimal(-5000)

    def test_net_result_highlight(self, service, balances):
        result = service.income_statement_sections(balances)[-1]
        assert result.is_highlight
        assert result.total == Decimal(9000)
        assert result.items[0].label == "Nettoresultat"

    def test_other_operating_income_separate(self, service):
        """Testa att övriga rörelseintäkter redovisas separat"""
        sections = service.income_statement_sections([
            AccountBalance("3010", credit=Decimal(1000)),
            AccountBalance("3990", credit=Decimal(50)),
        ])
        assert section(sections, "Nettoomsättning").total == Decimal(1000)
        assert section(sections, "Övriga rörelseintäkter").total == Decimal(50)

    def test_depreciation_range_and_unmapped_warning(self, service, caplog):
        """Testa att detaljerad variant bara tar 7800-7899 och varnar för resten"""
        with caplog.at_level(logging.WARNING, logger="skattemotor.services.financial_statements"):
            sections = service.income_statement_sections([
                AccountBalance("7832", debit=Decimal(200)),
                AccountBalance("7970", debit=Decimal(300)),
            ])

        assert section(sections, "Avskrivningar").total == Decimal(-200)
        assert sections[-1].total == Decimal(-200)
        assert "7970" in caplog.text

    def test_noise_suppressed(self, service):
        """Testa att belopp under 0,01 inte blir poster"""
        sections = service.income_statement_sections([AccountBalance("3010", credit=Decimal("0.004"))])
        assert section(sections, "Nettoomsättning").items == []

    def test_previous_year(self, service, balances):
        """Testa jämförelse mot föregående år"""
        previous = [AccountBalance("3010", credit=Decimal(8000)), AccountBalance("3020", credit=Decimal(500))]
        sections = service.income_statement_sections(balances, previous)

        sales = section(sections, "Nettoomsättning")
        assert [(i.account, i.value, i.previous_value) for i in sales.items] == [
            ("3010", Decimal(15000), Decimal(8000)),
            ("3020", Decimal(0), Decimal(500)),
        ]
        assert sales.previous_total == Decimal(8500)
        assert section(sections, "Personalkostnader").previous_total == Decimal(0)
        assert sections[-1].previous_total == Decimal(8500)

    def test_net_result_includes_amounts_below_threshold(self, service):
        """Testa att årets resultat tar med belopp som inte visas som poster"""
        sections = service.income_statement_sections([
            AccountBalance("3010", credit=Decimal(1000)),
            AccountBalance("3020", credit=Decimal("0.01")),
        ])
        sales = section(sections, "Nettoomsättning")
        assert [i.account for i in sales.items] == ["3010"]
        assert sales.total == Decimal("1000.01")
        assert sections[-1].total == Decimal("1000.01")

    def test_without_previous_year(self, service, balances):
        sections = service.income_statement_sections(balances)
        assert all(s.previous_total is None for s in sections)

    def test_empty(self, service, balances):
        """Testa att tomt skelett har samma sektioner som med data"""
        empty = service.empty_income_statement_sections()
        populated = service.income_statement_sections(balances)

        assert [s.title for s in empty] == [s.title for s in populated]
        assert all(s.total == 0 for s in empty)
        assert all(s.items == [] for s in empty[:-1])


class TestBalanceSheetSections:
    def test_accounting_equation(self, service, balances):
        """Testa att detaljerad balansräkning också balanserar"""
        sections = service.balance_sheet_sections(balances)

        assets = section(sections, "Summa tillgångar")
        equity_and_liabilities = section(sections, "Summa eget kapital och skulder")
        assert assets.is_highlight and equity_and_liabilities.is_highlight
        assert assets.total == equity_and_liabilities.total == Decimal(67750)

    def test_agrees_with_flat_variant(self, service, balances):
        sections = service.balance_sheet_sections(balances)
        lines = balance_sheet(balances)
        assert section(sections, "Summa tillgångar").total == line(lines, "SUMMA TILLGÅNGAR").value

    def test_liabilities_keep_ledger_sign(self, service, balances):
        """Testa att tillgångar vänds och skulder behåller tecken"""
        sections = service.balance_sheet_sections(balances)

        current = section(sections, "Omsättningstillgångar")
        assert [(i.account, i.value) for i in current.items] == [("1930", Decimal(67750))]

        short = section(sections, "Kortfristiga skulder")
        assert [(i.account, i.value) for i in short.items] == [
            ("2440", Decimal(5000)),
            ("2510", Decimal(1000)),
            ("2610", Decimal(3750)),
            ("2640", Decimal(-1000)),
        ]

    def test_amounts_below_threshold_count_in_totals(self, service):
        """Testa att ören som inte visas som poster ändå ingår i summorna"""
        ledger = [verification(
            "2024-03-01", "Öresavrundning",
            ("1930", Decimal("100.01"), 0), ("2440", 0, 100), ("2999", 0, Decimal("0.01"))
        )]
        balances = aggregate(ledger)
        sections = service.balance_sheet_sections(balances)

        short = section(sections, "Kortfristiga skulder")
        assert [i.account for i in short.items] == ["2440"]
        assert short.total == Decimal("100.01")
        assert section(sections, "Summa tillgångar").total == Decimal("100.01")
        assert section(sections, "Summa eget kapital och skulder").total == Decimal("100.01")
        assert (section(sections, "Summa eget kapital och skulder").total
                == line(balance_sheet(balances), "SUMMA EGET KAPITAL OCH SKULDER").value)

    def test_small_unbooked_result_counts_in_equity(self, service):
        """Testa att ett resultat på ett öre ingår i eget kapital utan egen post"""
        ledger = [verification(
            "2024-03-01", "Ränta", ("1930", Decimal("0.01"), 0), ("8310", 0, Decimal("0.01"))
        )]
        sections = service.balance_sheet_sections(aggregate(ledger))

        equity = section(sections, "Eget kapital")
        assert equity.items == []
        assert equity.total == Decimal("0.01")
        assert section(sections, "Summa eget kapital och skulder").total == Decimal("0.01")
        assert section(sections, "Summa tillgångar").total == Decimal("0.01")

    def test_previous_totals_include_small_amounts(self, service, balances):
        previous = [
            AccountBalance("1930", debit=Decimal("500.01")),
            AccountBalance("2440", credit=Decimal(500)),
            AccountBalance("2999", credit=Decimal("0.01")),
        ]
        sections = service.balance_sheet_sections(balances, previous)
        assert section(sections, "Kortfristiga skulder").previous_total == Decimal("500.01")
        assert section(sections, "Summa eget kapital och skulder").previous_total == Decimal("500.01")
        assert section(sections, "Summa tillgångar").previous_total == Decimal("500.01")

    def test_unbooked_result_under_equity(self, service, balances):
        equity = section(service.balance_sheet_sections(balances), "Eget kapital")
        assert equity.items[-1].label == UNBOOKED_RESULT_LABEL
        assert equity.items[-1].value == Decimal(9000)
        assert equity.total == Decimal(59000)

    def test_empty(self, service):
        sections = service.empty_balance_sheet_sections()
        assert [s.title for s in sections] == [
            "Anläggningstillgångar",
            "Omsättningstillgångar",
            "Summa tillgångar",
            "Eget kapital",
            "Obeskattade reserver",
            "Avsättningar",
            "Långfristiga skulder",
            "Kortfristiga skulder",
            "Summa eget kapital och skulder",
        ]
        assert all(s.total == 0 and s.items == [] for s in sections)


class TestDefaultChart:
    def test_bundled_names(self, balances):
        """Testa att medföljande kontoplan används som standard"""
        sections = FinancialStatementService().income_statement_sections(balances)
        external = section(sections, "Övriga externa kostnader")
        assert external.items[1].label == "Utställning representation"
