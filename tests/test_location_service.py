from dataclasses import replace

from bouncehouse.data.companies_repository import InMemoryCompanyRepository
from bouncehouse.models.domain import Address, Company, Coordinates, CoordinateUpdateStatus
from bouncehouse.services.location import GeocodingConfig, LocationService
from bouncehouse.services.location.geocoding import GeocodingProvider

LA = Coordinates(latitude=34.0522, longitude=-118.2437)


class StubGeocoder(GeocodingProvider):
    name = "stub"

    def __init__(self, result: Coordinates | None = None, error: Exception | None = None):
        super().__init__()
        self.result = result
        self.error = error
        self.queries: list[str] = []

    def geocode(self, query):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.result


class BrokenRepository(InMemoryCompanyRepository):
    def save_coordinates(self, company_id, coordinates):
        raise RuntimeError("database unavailable")


def _company(cid: str, coordinates: Coordinates | None = None, active: bool = True) -> Company:
    return Company(
        id=cid,
        name=f"Company {cid}",
        subdomain=cid.lower(),
        is_active=active,
        address=Address(
            street="200 N Spring St",
            city="Los Angeles",
            state="CA",
            zip_code="90012",
            coordinates=coordinates,
        ),
    )


def _service(geocoder, repository=None, sleeps=None, **config) -> LocationService:
    return LocationService(
        GeocodingConfig(**config),
        repository,
        providers=[geocoder],
        sleep=(sleeps.append if sleeps is not None else lambda seconds: None),
    )


def test_update_skips_company_with_coordinates():
    geocoder = StubGeocoder(result=LA)
    company = _company("C1", coordinates=Coordinates(latitude=1.0, longitude=2.0))

    result = _service(geocoder).update_company_coordinates(company)

    assert result.status is CoordinateUpdateStatus.SKIPPED_PRESENT
    assert result.coordinates == Coordinates(latitude=1.0, longitude=2.0)
    assert geocoder.queries == []


def test_update_geocodes_and_persists_missing_coordinates():
    geocoder = StubGeocoder(result=LA)
    company = _company("C1")
    repository = InMemoryCompanyRepository([company])

    result = _service(geocoder, repository).update_company_coordinates(company)

    assert result.succeeded
    assert result.coordinates == LA
    assert geocoder.queries == ["200 N Spring St, Los Angeles, CA, 90012"]
    assert repository.get("C1").coordinates == LA
    assert company.coordinates is None


def test_update_is_idempotent_once_coordinates_are_stored():
    geocoder = StubGeocoder(result=LA)
    repository = InMemoryCompanyRepository([_company("C1")])
    service = _service(geocoder, repository)

    service.update_company_coordinates(repository.get("C1"))
    second = service.update_company_coordinates(repository.get("C1"))

    assert second.status is CoordinateUpdateStatus.SKIPPED_PRESENT
    assert len(geocoder.queries) == 1


def test_update_reports_not_found_without_persisting():
    repository = InMemoryCompanyRepository([_company("C1")])

    result = _service(StubGeocoder(result=None), repository).update_company_coordinates(repository.get("C1"))

    assert result.status is CoordinateUpdateStatus.NOT_FOUND
    assert result.reason
    assert repository.get("C1").coordinates is None


def test_update_treats_geocoder_exception_as_no_match():
    repository = InMemoryCompanyRepository([_company("C1")])
    geocoder = StubGeocoder(error=RuntimeError("provider exploded"))

    result = _service(geocoder, repository).update_company_coordinates(repository.get("C1"))

    assert result.status is CoordinateUpdateStatus.NOT_FOUND


def test_update_reports_persistence_failure_without_raising():
    repository = BrokenRepository([_company("C1")])

    result = _service(StubGeocoder(result=LA), repository).update_company_coordinates(repository.get("C1"))

    assert result.status is CoordinateUpdateStatus.FAILED
    assert result.reason == "database unavailable"


def test_update_without_repository_fails_without_geocoding():
    geocoder = StubGeocoder(result=LA)
    company = _company("C1")

    result = _service(geocoder).update_company_coordinates(company)

    assert result.status is CoordinateUpdateStatus.FAILED
    assert result.reason == "No company repository configured"
    assert not result.succeeded
    assert geocoder.queries == []


def test_batch_update_runs_sequentially_with_delay():
    companies = [_company("C1"), _company("C2", coordinates=LA), _company("C3")]
    repository = InMemoryCompanyRepository(companies)
    geocoder = StubGeocoder(result=LA)
    sleeps: list[float] = []

    results = _service(geocoder, repository, sleeps=sleeps).batch_update_company_coordinates(
        companies, delay_seconds=0.5
    )

    assert [result.company_id for result in results] == ["C1", "C2", "C3"]
    assert [result.status for result in results] == [
        CoordinateUpdateStatus.UPDATED,
        CoordinateUpdateStatus.SKIPPED_PRESENT,
        CoordinateUpdateStatus.UPDATED,
    ]
    assert sleeps == [0.5, 0.5, 0.5]
    assert len(geocoder.queries) == 2


def test_batch_update_uses_configured_delay():
    sleeps: list[float] = []
    service = _service(StubGeocoder(result=LA), InMemoryCompanyRepository(), sleeps=sleeps, batch_delay_seconds=1.0)

    service.batch_update_company_coordinates([_company("C1"), _company("C2")])

    assert sleeps == [1.0, 1.0]


def test_batch_update_with_zero_delay_never_sleeps():
    sleeps: list[float] = []
    service = _service(StubGeocoder(result=LA), InMemoryCompanyRepository(), sleeps=sleeps)

    results = service.batch_update_company_coordinates([_company("C1"), _company("C2")], delay_seconds=0)

    assert len(results) == 2
    assert sleeps == []


def test_batch_update_continues_after_failures():
    repository = BrokenRepository([_company("C1"), _company("C2")])
    service = _service(StubGeocoder(result=LA), repository)

    results = service.batch_update_company_coordinates(repository.list_active(), delay_seconds=0)

    assert [result.status for result in results] == [CoordinateUpdateStatus.FAILED] * 2


def test_find_delivery_options_uses_active_companies_only():
    nearby = _company("NEAR", coordinates=Coordinates(latitude=34.06, longitude=-118.25))
    inactive = replace(_company("OFF", coordinates=LA), is_active=False)
    repository = InMemoryCompanyRepository([nearby, inactive])

    options = _service(StubGeocoder(), repository).find_delivery_options(LA)

    assert [option.company.id for option in options] == ["NEAR"]
    assert options[0].distance < 1
