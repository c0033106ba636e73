"""Shared fixtures for carnes tests."""

from __future__ import annotations

from datetime import date

import pytest

from carnes.lifecycle import BillService, FixedClock
from carnes.models import BillInput, Store
from carnes.repository import InMemoryRepository, JsonFileRepository

TODAY = date(2024, 6, 1)


@pytest.fixture
def clock():
    """Clock frozen on 2024-06-01."""
    return FixedClock(TODAY)


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def service(repo, clock):
    return BillService(repo, clock=clock)


@pytest.fixture
def file_repo(tmp_path):
    return JsonFileRepository(tmp_path / "carnes.json")


@pytest.fixture
def bill_input_factory():
    """Build BillInput objects with sensible defaults."""

    def _factory(**overrides) -> BillInput:
        params = {
            "number": "1001",
            "issue_date": date(2024, 1, 10),
            "store": Store.LOJA_2,
            "customer": "Maria Souza",
            "total_installments": 3,
            "installment_value": 100.0,
            "due_day": 5,
        }
        params.update(overrides)
        return BillInput(**params)

    return _factory


@pytest.fixture
def bill(service, bill_input_factory):
    """A stored 3-installment bill issued 2024-01-10, due day 5."""
    return service.create_bill(bill_input_factory())


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Run CLI commands against a data file in a temp directory."""
    monkeypatch.chdir(tmp_path)
    data_file = tmp_path / "carnes.json"
    monkeypatch.setenv("CARNES_DATA_FILE", str(data_file))
    monkeypatch.delenv("CARNES_LOG_LEVEL", raising=False)
    return data_file
