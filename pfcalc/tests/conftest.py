from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from pfcalc.app import create_app
from pfcalc.app.config import TestingConfig


@pytest.fixture()
def client() -> FlaskClient:
    app = create_app(TestingConfig)
    with app.test_client() as test_client:
        yield test_client


STATEMENT_CSV = """Field,Value
Financial Year,FY 2024-25
Opening Balance,"1,20,000.00"
Employee Contribution,72000
Employer Contribution,"₹72,000"
Interest Earned,10500.50
Closing Balance,"2,74,500.50"
"""


@pytest.fixture()
def statement_csv() -> str:
    return STATEMENT_CSV
