import pytest
from fastapi.testclient import TestClient

from main import app
from app.core.upi import UpiLinkBuilder, PayeeConfig, get_link_builder

TEST_PAYEE = PayeeConfig(payee_address="chai@okaxis", payee_name="Chai Fund")


@pytest.fixture
def builder():
    return UpiLinkBuilder(TEST_PAYEE)


@pytest.fixture
def client(builder):
    app.dependency_overrides[get_link_builder] = lambda: builder
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
