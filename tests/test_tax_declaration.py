"""
Tester för INK2-beräkningen
"""
import logging
import pytest
from datetime import date
from decimal import Decimal

from skattemotor.config import BlankettType
from skattemotor.errors import InvalidPeriodError
from skattemotor.models import AccountBalance, Company, SRUField
from skattemotor.services.balances import aggregate
from skattemotor.services.ink2_fields import (
    ALL_FIELDS, BALANCE_SHEET_TABLE, INCOME_STATEMENT_TABLE, describe
)
from skattemotor.services.tax_declaration import (
    TaxDeclarationService, calculate_balance_sheet, calculate_income_statement,
    calculate_tax_adjustments, fields_by_section, parse_tax_period,
    representation_add_back, tax_period_for, taxable_result
)

from conftest import verification


def as_dict(fields):
    return {f.code: f.value for f in fields}


@pytest.fixture
def service(company):
    return TaxDeclarationService(company)


class TestBalanceSheetFields:
    def test_ledger(self, ledger):
        """Testa INK2R balansräkning för testbolaget"""
        fields = as_dict(calculate_balance_sheet(aggregate(ledger)))
        assert fields == {
            7281: Decimal(67750),
            7301: Decimal(50000),
            7365: Decimal(5000),
            7368: Decimal(1000),
            7369: Decimal(2750),
        }

    def test_zero_range_is_omitted(self, ledger):
        """Testa att intervall som summerar till noll utelämnas"""
        codes = [f.code for f in calculate_balance_sheet(aggregate(ledger))]
        assert 7251 not in codes

    def test_empty_balances(self):
        assert calculate_balance_sheet([]) == []

    def test_unmapped_account_warning(self, caplog):
        """Testa att konton utan SRU-kod loggas"""
        with caplog.at_level(logging.WARNING, logger="skattemotor.services.tax_declaration"):
            fields = calculate_balance_sheet([AccountBalance("2050", credit=Decimal(100))])
        assert fields == []
        assert "2050" in caplog.text


class TestIncomeStatementFields:
    def test_ledger(self, ledger):
        fields = as_dict(calculate_income_statement(aggregate(ledger)))
        assert fields == {
            7410: Decimal(15000),
            7513: Decimal(5000),
            7528: Decimal(1000),
            7450: Decimal(9000),
        }

    def test_loss_gives_7550(self):
        """Testa att förlust ger 7550 och aldrig 7450"""
        fields = as_dict(calculate_income_statement([AccountBalance("5010", debit=Decimal(800))]))
        assert fields[7550] == Decimal(800)
        assert 7450 not in fields

    def test_zero_result_gives_neither(self):
        fields = as_dict(calculate_income_statement([
            AccountBalance("3010", credit=Decimal(500)),
            AccountBalance("5010", debit=Decimal(500)),
        ]))
        assert 7450 not in fields
        assert 7550 not in fields

    def test_signed_pair(self):
        """Testa att lagerförändring ger plus- eller minuskod efter tecken"""
        increase = as_dict(calculate_income_statement([AccountBalance("4900", credit=Decimal(300))]))
        decrease = as_dict(calculate_income_statement([AccountBalance("4900", debit=Decimal(300))]))

        assert increase[7411] == Decimal(300)
        assert 7510 not in increase
        assert decrease[7510] == Decimal(300)
        assert 7411 not in decrease

    def test_split_ranges(self):
        """Testa fält med flera intervall och intervall som delar ett fält"""
        fields = as_dict(calculate_income_statement([
            AccountBalance("7710", debit=Decimal(100)),
            AccountBalance("7832", debit=Decimal(200)),
            AccountBalance("7720", debit=Decimal(50)),
            AccountBalance("8275", debit=Decimal(70)),
        ]))
        assert fields[7515] == Decimal(300)
        assert fields[7516] == Decimal(50)
        assert fields[7521] == Decimal(70)


class TestTaxAdjustments:
    def test_representation(self):
        """Testa att hälften av representation läggs tillbaka (7653)"""
        balances = [AccountBalance("6075", debit=Decimal(1000))]
        fields = as_dict(calculate_tax_adjustments(calculate_income_statement(balances), balances))

        assert fields[7653] == Decimal(500)
        assert fields[7750] == Decimal(1000)
        assert fields[7770] == Decimal(500)
        assert 7670 not in fields

    def test_representation_rounds_half_up(self):
        assert representation_add_back([AccountBalance("6071", debit=Decimal(333))]) == Decimal(167)

    def test_ledger(self, ledger):
        """Testa justeringar för testbolaget"""
        balances = aggregate(ledger)
        fields = calculate_tax_adjustments(calculate_income_statement(balances), balances)

        assert as_dict(fields) == {
            7650: Decimal(9000),
            7651: Decimal(1000),
            7653: Decimal(500),
            7670: Decimal(10500),
        }
        assert taxable_result(fields) == Decimal(10500)

    def test_impairment_added_back(self):
        balances = [
            AccountBalance("3010", credit=Decimal(1000)),
            AccountBalance("8270", debit=Decimal(200)),
        ]
        fields = as_dict(calculate_tax_adjustments(calculate_income_statement(balances), balances))
        assert fields[7652] == Decimal(200)
        assert fields[7670] == Decimal(1000)

    def test_zero_taxable_result(self):
        """Testa att resultat noll ger 7670 med noll"""
        fields = as_dict(calculate_tax_adjustments([], []))
        assert fields == {7670: Decimal(0)}


class TestTaxPeriod:
    @pytest.mark.parametrize("end, expected", [
        (date(2024, 12, 31), "2024P4"),
        (date(2024, 9, 30), "2024P4"),
        (date(2024, 8, 31), "2024P3"),
        (date(2024, 6, 30), "2024P2"),
        (date(2024, 4, 30), "2024P1"),
    ])
    def test_tax_period_for(self, end, expected):
        assert tax_period_for(end) == expected

    def test_parse_tax_period(self):
        assert parse_tax_period("2024P4") == (2024, 4)

    @pytest.mark.parametrize("period", ["2024P5", "2024-P4", "Q4 2024", "", None])
    def test_invalid_tax_period(self, period):
        with pytest.raises(InvalidPeriodError):
            parse_tax_period(period)


class TestFieldTables:
    def test_tables_are_built(self):
        """Testa att intervalltabellerna byggs utan överlapp"""
        assert BALANCE_SHEET_TABLE.key_for("1930") == 7281
        assert INCOME_STATEMENT_TABLE.key_for("8819") == 7420
        assert INCOME_STATEMENT_TABLE.key_for("8818") == 7525

    def test_codes_are_unique(self):
        codes = [f.code for f in ALL_FIELDS]
        assert len(codes) == len(set(codes))

    def test_negative_code_description(self):
        """Testa att minuskoder får egen beskrivning"""
        field = describe(7510)
        assert field.field == "3.2-"
        assert field.blankett == BlankettType.INK2R
        assert describe(9999) is None

    def test_fields_by_section(self):
        sections = fields_by_section([
            SRUField(7410, Decimal(1)), SRUField(7528, Decimal(2)), SRUField(9999, Decimal(3))
        ])
        assert list(sections) == ["Rörelseintäkter", "Skatt och resultat", "Övrigt"]


class TestTaxDeclarationService:
    def test_period(self, service):
        assert service.period == "2024P4"

    def test_totals(self, service, ledger):
        """Testa nyckeltal för testbolaget"""
        totals = service.calculate_all(ledger).totals

        assert totals.total_assets == Decimal(67750)
        assert totals.total_equity_and_liabilities == Decimal(58750)
        assert totals.revenue == Decimal(15000)
        assert totals.expenses == Decimal(6000)
        assert totals.net_income == Decimal(9000)
        assert totals.taxable_result == Decimal(10500)
        assert totals.estimated_tax == Decimal(2163)

    def test_fiscal_year_window(self, service, ledger):
        """Testa att resultatposter före räkenskapsåret inte räknas"""
        earlier = [
            *ledger,
            verification(
                "2023-06-01", "Försäljning 2023", ("1930", 2000, 0), ("3010", 0, 2000)
            ),
        ]
        result = service.calculate_all(earlier)

        assert as_dict(result.income_statement)[7410] == Decimal(15000)
        assert as_dict(result.balance_sheet)[7281] == Decimal(69750)

    def test_broken_fiscal_year(self, ledger):
        """Testa brutet räkenskapsår: resultat för året, balans vid årets slut"""
        company = Company("556000-0000", "Brutet AB", date(2024, 3, 1), date(2024, 8, 31))
        result = TaxDeclarationService(company).calculate_all(ledger)

        assert as_dict(result.income_statement)[7410] == Decimal(10000)
        assert as_dict(result.balance_sheet)[7281] == Decimal(61500)
        assert TaxDeclarationService(company).period == "2024P3"

    def test_generate_declarations(self, service, ledger):
        """Testa att tre blanketter skapas med orgnr, namn och period"""
        declarations = service.generate_declarations(ledger, created=date(2025, 1, 15))
        ink2, ink2r, ink2s = declarations

        assert [d.blankett_type for d in declarations] == [
            BlankettType.INK2, BlankettType.INK2R, BlankettType.INK2S
        ]
        assert all(d.orgnr == "556000-0000" for d in declarations)
        assert all(d.name == "Testbolaget AB" for d in declarations)
        assert all(d.period == "2024P4" for d in declarations)
        assert ink2.system_info == "Skattemotor 20250115"

        assert ink2.get(7011) == "20240101"
        assert ink2.get(7012) == "20241231"
        assert ink2.get(7104) == Decimal(10500)
        assert ink2.get(7114) is None

        assert ink2r.get(7281) == Decimal(67750)
        assert ink2r.get(7450) == Decimal(9000)
        assert ink2s.get(7653) == Decimal(500)
        assert ink2s.get(7410) is None

    def test_fields_by_section(self, service, ledger):
        sections = service.fields_by_section(ledger)
        assert [f.code for f in sections["Kassa och bank"]] == [7281]
        assert [f.code for f in sections["Slutligt resultat"]] == [7670]

    def test_empty_ledger(self, service):
        """Testa att tom huvudbok ger endast räkenskapsår och 7670"""
        ink2, ink2r, ink2s = service.generate_declarations([], created=date(2025, 1, 15))
        assert [f.code for f in ink2.fields] == [7011, 7012]
        assert ink2r.fields == []
        assert [f.code for f in ink2s.fields] == [7670]
