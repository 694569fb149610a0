from __future__ import annotations

import math

import pytest

from pfcalc.core.errors import MissingFieldError, StatementFormatError
from pfcalc.domain.statement import (
    calculator_inputs,
    from_manual_fields,
    match_label,
    parse_amount,
    parse_statement,
    parse_year,
)


def test_parse_statement_reads_all_fields(statement_csv):
    record = parse_statement(statement_csv)

    assert record.year == 2024
    assert record.opening_balance == 120000.0
    assert record.employee_contributions == 72000.0
    assert record.employer_contributions == 72000.0
    assert record.interest_earned == 10500.5
    assert record.closing_balance == 274500.5
    assert record.monthly_employee_contribution == 6000.0
    assert record.monthly_employer_contribution == 6000.0
    assert record.monthly_salary == pytest.approx(50000)


def test_row_order_does_not_matter():
    text = "\n".join(
        [
            "Interest,900",
            "Employer Contribution,1200",
            "Opening Balance,10000",
            "Employee Contribution,1800",
            "Year,2023",
        ]
    )

    record = parse_statement(text)

    assert record.year == 2023
    assert record.closing_balance == 10000 + 1800 + 1200 + 900


def test_missing_interest_row_raises_missing_field():
    text = "\n".join(
        [
            "Year,2023",
            "Opening Balance,10000",
            "Employee Contribution,1800",
            "Employer Contribution,1200",
            "Closing Balance,13000",
        ]
    )

    with pytest.raises(MissingFieldError) as excinfo:
        parse_statement(text)

    assert excinfo.value.fields == ["interest_earned"]
    assert excinfo.value.code == "missing_field"


def test_unparseable_value_counts_as_missing():
    text = "Year,2023\nOpening Balance,n/a\nEmployee Contribution,1800\nEmployer Contribution,1200\nInterest,50"

    with pytest.raises(MissingFieldError) as excinfo:
        parse_statement(text)

    assert excinfo.value.fields == ["opening_balance"]


def test_every_missing_field_is_reported():
    with pytest.raises(MissingFieldError) as excinfo:
        parse_statement("Name,Jane Doe\nUAN,100200300400")

    assert excinfo.value.fields == [
        "year",
        "opening_balance",
        "employee_contributions",
        "employer_contributions",
        "interest_earned",
    ]


@pytest.mark.parametrize("text", ["", "   \n\n", "Year,2023"])
def test_too_few_rows_is_a_format_error(text):
    with pytest.raises(StatementFormatError):
        parse_statement(text)


def test_last_matching_row_wins():
    text = "\n".join(
        [
            "Year,2022",
            "Opening Balance,5000",
            "Employee Contribution,1000",
            "Employer Contribution,1000",
            "Interest,100",
            "Interest (revised),150",
        ]
    )

    record = parse_statement(text)

    assert record.interest_earned == 150
    assert record.closing_balance == 7150


def test_unrecognised_rows_and_extra_columns_are_ignored():
    text = "\n".join(
        [
            "Member Name,Jane Doe,extra",
            "FY,2021-22,ignored",
            "Opening Balance,5000,INR",
            "Employee Contribution,1000",
            "Employer Contribution,1000",
            "Interest for the year,100",
            "Pension Fund,999",
        ]
    )

    record = parse_statement(text)

    assert record.year == 2021
    assert record.interest_earned == 100


def test_unclosed_quote_only_affects_its_own_row():
    text = "\n".join(
        [
            "Year,2023",
            'Member Name,"Jane Doe',
            "Opening Balance,10000",
            "Employee Contribution,1800",
            "Employer Contribution,1200",
            "Interest,900",
        ]
    )

    record = parse_statement(text)

    assert record.year == 2023
    assert record.opening_balance == 10000
    assert record.interest_earned == 900
    assert record.closing_balance == 13900


def test_quoted_grouped_amount_stays_one_cell():
    text = 'Year,2023\nOpening Balance,"1,23,456.00"\nEmployee Contribution,1800\nEmployer Contribution,1200\nInterest,900'

    assert parse_statement(text).opening_balance == 123456.0


def test_oversized_cell_is_a_format_error():
    text = "Year,2023\nRemarks," + "x" * 200000 + "\nOpening Balance,10000"

    with pytest.raises(StatementFormatError) as excinfo:
        parse_statement(text)

    assert excinfo.value.code == "invalid_statement_format"
    assert excinfo.value.errors[0].startswith("row 2 could not be read")


def test_year_label_with_large_amount_keeps_real_year():
    text = "\n".join(
        [
            "Year,2023",
            "Opening Balance,10000",
            "Employee Contribution,1800",
            "Employer Contribution,1200",
            "Interest,900",
            "Total contribution for the year,144000",
        ]
    )

    assert parse_statement(text).year == 2023


def test_explicit_closing_balance_is_kept():
    text = "Year,2023\nOpening Balance,100\nEmployee Contribution,10\nEmployer Contribution,10\nInterest,5\nClosing Balance,126"

    assert parse_statement(text).closing_balance == 126


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("₹1,23,456.50", 123456.5),
        ("Rs. 2500", 2500.0),
        ("-120.75", -120.75),
        ("1.2.3", 1.2),
        (".5", 0.5),
        ("none", None),
        ("", None),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [("FY 2024-25", 2024), ("2019", 2019), ("19-20", None), ("144000", None)],
)
def test_parse_year(raw, expected):
    assert parse_year(raw) == expected


@pytest.mark.parametrize(
    "label, expected",
    [
        ("OPENING BALANCE", "opening_balance"),
        ("Employee Contribution (EE)", "employee_contributions"),
        ("employer contributions", "employer_contributions"),
        ("Interest credited for the year", "interest_earned"),
        ("Financial Year", "year"),
        ("FY", "year"),
        ("Member ID", None),
    ],
)
def test_match_label(label, expected):
    assert match_label(label) == expected


def test_manual_fields_derive_closing_balance_exactly():
    fields = {
        "year": 2023,
        "opening_balance": 98765.43,
        "employee_contributions": 43210.98,
        "employer_contributions": 13245.67,
        "interest_earned": 7654.32,
    }

    record = from_manual_fields(fields)

    assert record.closing_balance == 98765.43 + 43210.98 + 13245.67 + 7654.32
    assert record.monthly_salary == 43210.98 / 0.12 / 12
    assert record.monthly_employee_contribution == 43210.98 / 12
    assert record.monthly_employer_contribution == 13245.67 / 12


def test_manual_fields_missing_value_raises():
    with pytest.raises(MissingFieldError) as excinfo:
        from_manual_fields(
            {
                "year": 2023,
                "opening_balance": 1000,
                "employee_contributions": math.nan,
                "employer_contributions": 100,
            }
        )

    assert excinfo.value.fields == ["employee_contributions", "interest_earned"]


def test_manual_fields_missing_closing_balance_is_derived():
    record = from_manual_fields(
        {
            "year": 2023,
            "opening_balance": 1000,
            "employee_contributions": 120,
            "employer_contributions": 120,
            "interest_earned": 40,
            "closing_balance": None,
        }
    )

    assert record.closing_balance == 1280


def test_calculator_inputs_from_statement(statement_csv):
    inputs = calculator_inputs(parse_statement(statement_csv))

    assert inputs.salary == 50000
    assert inputs.employee_rate_percent == 12.0
    assert inputs.employer_rate_percent == 12.0


def test_calculator_inputs_with_zero_contributions():
    record = from_manual_fields(
        {
            "year": 2023,
            "opening_balance": 1000,
            "employee_contributions": 0,
            "employer_contributions": 0,
            "interest_earned": 80,
        }
    )

    inputs = calculator_inputs(record)

    assert inputs.salary == 0
    assert inputs.employee_rate_percent == 0
    assert inputs.employer_rate_percent == 0
