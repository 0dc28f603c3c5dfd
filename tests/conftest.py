from collections.abc import Generator
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

import compat_catalog.models  # noqa: F401 - register all tables
from compat_catalog.database import get_session
from compat_catalog.main import app
from compat_catalog.models.catalog import Author, Catalog, Mod
from compat_catalog.services.change_ledger import ChangeLedger
from compat_catalog.services.import_driver import apply_line
from compat_catalog.services.mutations.engine import MutationEngine

REVIEW_DATE = date(2024, 5, 1)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(eng)
    return eng


@pytest.fixture
def session(engine, monkeypatch):
    with Session(engine) as sess:
        monkeypatch.setattr("compat_catalog.database.engine", engine)
        yield sess


@pytest.fixture
def client(engine, monkeypatch):
    monkeypatch.setattr("compat_catalog.database.engine", engine)

    def _override_session() -> Generator[Session, None, None]:
        with Session(engine) as sess:
            yield sess

    app.dependency_overrides[get_session] = _override_session
    with TestClient(app, raise_server_exceptions=False) as tc:
        yield tc
    app.dependency_overrides.clear()


@pytest.fixture
def catalog() -> Catalog:
    return Catalog.first_catalog()


@pytest.fixture
def ledger() -> ChangeLedger:
    return ChangeLedger()


@pytest.fixture
def mut(catalog, ledger) -> MutationEngine:
    return MutationEngine(catalog, ledger, review_date=REVIEW_DATE)


@pytest.fixture
def run(mut):
    """Parse and apply one command line, returning the error text or None."""

    def _run(line: str) -> str | None:
        return apply_line(mut, line)

    return _run


@pytest.fixture
def make_mod(catalog):
    """Add a mod straight to the store, bypassing the ledger."""

    def _make(
        mod_id: int,
        name: str = "",
        author_id: int | None = None,
        author_url: str = "",
    ) -> Mod:
        mod = catalog.add_mod(mod_id)
        mod.name = name or f"Mod {mod_id}"
        mod.author_id = author_id
        mod.author_url = author_url
        return mod

    return _make


@pytest.fixture
def make_author(catalog):
    def _make(
        author_id: int | None = None,
        author_url: str = "",
        name: str = "",
        last_seen: date | None = None,
        retired: bool = False,
    ) -> Author:
        author = catalog.add_author(author_id, author_url, name)
        author.last_seen = last_seen
        author.retired = retired
        return author

    return _make
