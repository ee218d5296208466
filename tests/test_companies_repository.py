import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from bouncehouse.data import companies_repository
from bouncehouse.data.companies_repository import (
    InMemoryCompanyRepository,
    SupabaseCompanyRepository,
    _load_companies_from_file,
    company_from_row,
)
from bouncehouse.models.domain import DEFAULT_DELIVERY_RADIUS_MILES, Company, Coordinates
from bouncehouse.services.tenancy import resolve_tenant


def _row(cid: str, **overrides) -> dict:
    row = {
        "id": cid,
        "name": f"Company {cid}",
        "subdomain": cid.lower(),
        "domain": None,
        "is_active": True,
        "street": "1 Main St",
        "city": "Springfield",
        "state": "IL",
        "zip_code": "62701",
        "latitude": 39.78,
        "longitude": -89.65,
        "delivery_radius": 30,
        "delivery_fee": 60,
    }
    row.update(overrides)
    return row


class FakeQuery:
    def __init__(self, client: "FakeSupabase"):
        self.client = client
        self.filters: list[tuple[str, object]] = []
        self.patterns: list[tuple[str, str]] = []
        self.payload: dict | None = None
        self.row_limit: int | None = None

    def select(self, columns):
        return self

    def update(self, payload):
        self.payload = payload
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def ilike(self, column, pattern):
        self.patterns.append((column, pattern))
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def execute(self):
        if self.payload is not None:
            self.client.updates.append((self.payload, self.filters))
            return SimpleNamespace(data=[])
        rows = [
            row
            for row in self.client.rows
            if all(row.get(col) == val for col, val in self.filters)
            and all(str(row.get(col) or "").lower() == pattern.lower() for col, pattern in self.patterns)
        ]
        if self.row_limit is not None:
            rows = rows[: self.row_limit]
        return SimpleNamespace(data=rows)


class FakeSupabase:
    def __init__(self, rows):
        self.rows = rows
        self.tables: list[str] = []
        self.updates: list = []

    def table(self, name):
        self.tables.append(name)
        return FakeQuery(self)


def test_company_from_row_maps_flat_columns():
    company = company_from_row(_row("C1", domain="c1rentals.com", branding={"primaryColor": "#000"}))

    assert company.domain == "c1rentals.com"
    assert company.address.city == "Springfield"
    assert company.coordinates == Coordinates(latitude=39.78, longitude=-89.65)
    assert company.delivery_radius == 30
    assert company.delivery_fee == 60
    assert company.branding == {"primaryColor": "#000"}


def test_company_from_row_tolerates_missing_location_and_policy():
    company = company_from_row(_row("C1", latitude="", longitude=None, delivery_radius=None, delivery_fee=None))

    assert company.coordinates is None
    assert company.delivery_radius is None
    assert company.effective_delivery_radius == DEFAULT_DELIVERY_RADIUS_MILES
    assert company.delivery_fee == 50


def test_company_from_row_requires_id_and_subdomain():
    with pytest.raises(KeyError):
        company_from_row({"name": "No id"})


def test_company_from_row_lowercases_host_labels():
    company = company_from_row(_row("C1", subdomain=" ABC ", domain="CustomRental.com"))

    assert company.subdomain == "abc"
    assert company.domain == "customrental.com"


@pytest.mark.parametrize(
    "value, expected",
    [(True, True), (False, False), ("false", False), ("FALSE", False), ("0", False), ("true", True), (None, True)],
)
def test_company_from_row_parses_active_flag(value, expected):
    assert company_from_row(_row("C1", is_active=value)).is_active is expected


def test_company_from_row_rejects_unreadable_active_flag():
    with pytest.raises(ValueError):
        company_from_row(_row("C1", is_active="maybe"))


def test_seed_entry_marked_inactive_as_string_is_inactive(tmp_path: Path):
    seed = tmp_path / "companies.json"
    seed.write_text(json.dumps([_row("C1", is_active="false")]), encoding="utf-8")

    repository = InMemoryCompanyRepository(_load_companies_from_file(seed))

    assert repository.list_active() == []


def test_mixed_case_custom_domain_resolves_tenant():
    repository = InMemoryCompanyRepository(
        [
            company_from_row({"id": "C1", "subdomain": "abc", "domain": "CustomRental.com"}),
            Company(id="C2", name="Raw", subdomain="Party", domain="PartyTime.com"),
        ]
    )

    assert resolve_tenant("CustomRental.com", repository, platform_domain="platformdomain.com").company.id == "C1"
    assert resolve_tenant("partytime.com", repository, platform_domain="platformdomain.com").company.id == "C2"
    assert resolve_tenant("party.platformdomain.com", repository, platform_domain="platformdomain.com").company.id == "C2"


def test_supabase_lookup_matches_mixed_case_stored_domain():
    client = FakeSupabase([_row("C1", domain="CustomRental.com", subdomain="Abc")])
    repository = SupabaseCompanyRepository(client)

    assert repository.find_active_by_domain("customrental.com").id == "C1"
    assert repository.find_active_by_subdomain("abc").id == "C1"


def test_in_memory_lookups_ignore_inactive_companies():
    repository = InMemoryCompanyRepository(
        [
            company_from_row(_row("C1", domain="one.com")),
            company_from_row(_row("C2", domain="two.com", is_active=False)),
        ]
    )

    assert repository.find_active_by_domain("one.com").id == "C1"
    assert repository.find_active_by_domain("two.com") is None
    assert repository.find_active_by_subdomain("c2") is None
    assert [company.id for company in repository.list_active()] == ["C1"]
    assert repository.get("C2").is_active is False


def test_in_memory_save_coordinates_replaces_record():
    original = company_from_row(_row("C1", latitude=None, longitude=None))
    repository = InMemoryCompanyRepository([original])

    repository.save_coordinates("C1", Coordinates(latitude=1.5, longitude=2.5))

    assert repository.get("C1").coordinates == Coordinates(latitude=1.5, longitude=2.5)
    assert original.coordinates is None
    with pytest.raises(KeyError):
        repository.save_coordinates("missing", Coordinates(latitude=0.0, longitude=0.0))


def test_supabase_repository_queries_active_companies():
    client = FakeSupabase(
        [
            _row("C1", domain="one.com"),
            _row("C2", is_active=False),
            _row("C3"),
        ]
    )
    repository = SupabaseCompanyRepository(client)

    assert repository.find_active_by_domain("one.com").id == "C1"
    assert repository.find_active_by_subdomain("c2") is None
    assert repository.find_active_by_subdomain("c3").id == "C3"
    assert [company.id for company in repository.list_active()] == ["C1", "C3"]
    assert repository.get("C2").id == "C2"
    assert set(client.tables) == {"companies"}


def test_supabase_repository_skips_invalid_rows():
    client = FakeSupabase([_row("C1"), {"id": "BROKEN", "is_active": True}])

    assert [company.id for company in SupabaseCompanyRepository(client).list_active()] == ["C1"]


def test_supabase_repository_saves_coordinates():
    client = FakeSupabase([_row("C1")])

    SupabaseCompanyRepository(client).save_coordinates("C1", Coordinates(latitude=10.0, longitude=20.0))

    assert client.updates == [({"latitude": 10.0, "longitude": 20.0}, [("id", "C1")])]


def test_load_companies_from_file(tmp_path: Path):
    seed = tmp_path / "companies.json"
    seed.write_text(json.dumps([_row("C1"), {"name": "missing id"}]), encoding="utf-8")

    companies = _load_companies_from_file(seed)

    assert [company.id for company in companies] == ["C1"]
    assert isinstance(companies[0], Company)


def test_load_companies_from_missing_file_is_empty(tmp_path: Path):
    assert _load_companies_from_file(tmp_path / "absent.json") == tuple()


def test_load_companies_rejects_non_list(tmp_path: Path):
    seed = tmp_path / "companies.json"
    seed.write_text(json.dumps({"id": "C1"}), encoding="utf-8")

    with pytest.raises(ValueError):
        _load_companies_from_file(seed)


def test_repository_prefers_supabase_when_configured(monkeypatch: pytest.MonkeyPatch):
    client = FakeSupabase([_row("C1")])
    monkeypatch.setattr(companies_repository, "get_supabase_client", lambda: client)

    repository = companies_repository.get_company_repository()

    assert isinstance(repository, SupabaseCompanyRepository)
    assert repository.client is client


def test_repository_falls_back_to_seed_file(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(companies_repository, "get_supabase_client", lambda: None)
    monkeypatch.setattr(companies_repository, "_file_repository", None)
    monkeypatch.setattr(
        companies_repository,
        "_load_companies_from_file",
        lambda source=None: (company_from_row(_row("SEED")),),
    )

    repository = companies_repository.get_company_repository()

    assert isinstance(repository, InMemoryCompanyRepository)
    assert repository.get("SEED") is not None
    assert companies_repository.get_company_repository() is repository
