"""Company (tenant) records: Supabase first, falling back to a JSON seed file."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Optional, Protocol

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import DEFAULT_DELIVERY_FEE, Address, Company, Coordinates

logger = logging.getLogger(__name__)

COMPANIES_TABLE = "companies"


class CompanyRepository(Protocol):
    def find_active_by_domain(self, domain: str) -> Optional[Company]: ...

    def find_active_by_subdomain(self, subdomain: str) -> Optional[Company]: ...

    def list_active(self) -> list[Company]: ...

    def get(self, company_id: str) -> Optional[Company]: ...

    def save_coordinates(self, company_id: str, coordinates: Coordinates) -> None: ...


def _optional_float(value: Any) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return float(value)


_TRUE_STRINGS = {"true", "t", "yes", "y", "1"}
_FALSE_STRINGS = {"false", "f", "no", "n", "0"}


def _parse_active(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"Invalid is_active value: {value!r}")
    return bool(value)


def _host_label(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip().lower()
    return text or None


def company_from_row(row: dict[str, Any]) -> Company:
    """Build a Company from a flat `companies` row (or seed-file entry)."""

    latitude = _optional_float(row.get("latitude"))
    longitude = _optional_float(row.get("longitude"))
    coordinates = None
    if latitude is not None and longitude is not None:
        coordinates = Coordinates(latitude=latitude, longitude=longitude)

    delivery_fee = _optional_float(row.get("delivery_fee"))
    return Company(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        subdomain=_host_label(row["subdomain"]) or "",
        domain=_host_label(row.get("domain")),
        is_active=_parse_active(row.get("is_active")),
        address=Address(
            street=row.get("street") or "",
            city=row.get("city") or "",
            state=row.get("state") or "",
            zip_code=str(row.get("zip_code") or ""),
            coordinates=coordinates,
        ),
        delivery_radius=_optional_float(row.get("delivery_radius")),
        delivery_fee=DEFAULT_DELIVERY_FEE if delivery_fee is None else delivery_fee,
        email=row.get("email"),
        phone=row.get("phone"),
        branding=dict(row.get("branding") or {}),
    )


class SupabaseCompanyRepository:
    """Reads and enriches the `companies` table. Query errors propagate to the caller."""

    def __init__(self, client: Any) -> None:
        self.client = client

    def _first(self, column: str, value: Any) -> Optional[Company]:
        # Stored host labels may carry mixed case; match them case-insensitively.
        response = (
            self.client.table(COMPANIES_TABLE)
            .select("*")
            .ilike(column, value)
            .eq("is_active", True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return company_from_row(response.data[0])

    def find_active_by_domain(self, domain: str) -> Optional[Company]:
        return self._first("domain", domain)

    def find_active_by_subdomain(self, subdomain: str) -> Optional[Company]:
        return self._first("subdomain", subdomain)

    def list_active(self) -> list[Company]:
        response = self.client.table(COMPANIES_TABLE).select("*").eq("is_active", True).execute()
        companies: list[Company] = []
        for row in response.data or []:
            try:
                companies.append(company_from_row(row))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping invalid company row {row.get('id')}: {e!r}")
        return companies

    def get(self, company_id: str) -> Optional[Company]:
        response = self.client.table(COMPANIES_TABLE).select("*").eq("id", company_id).limit(1).execute()
        if not response.data:
            return None
        return company_from_row(response.data[0])

    def save_coordinates(self, company_id: str, coordinates: Coordinates) -> None:
        self.client.table(COMPANIES_TABLE).update(
            {"latitude": coordinates.latitude, "longitude": coordinates.longitude}
        ).eq("id", company_id).execute()


class InMemoryCompanyRepository:
    """Dictionary-backed repository used for local development and tests."""

    def __init__(self, companies: Iterable[Company] = ()) -> None:
        self._companies: dict[str, Company] = {company.id: company for company in companies}

    def find_active_by_domain(self, domain: str) -> Optional[Company]:
        return next(
            (c for c in self._companies.values() if c.is_active and c.domain and c.domain.lower() == domain.lower()),
            None,
        )

    def find_active_by_subdomain(self, subdomain: str) -> Optional[Company]:
        return next(
            (c for c in self._companies.values() if c.is_active and c.subdomain.lower() == subdomain.lower()),
            None,
        )

    def list_active(self) -> list[Company]:
        return [c for c in self._companies.values() if c.is_active]

    def get(self, company_id: str) -> Optional[Company]:
        return self._companies.get(company_id)

    def save_coordinates(self, company_id: str, coordinates: Coordinates) -> None:
        company = self._companies.get(company_id)
        if company is None:
            raise KeyError(f"Unknown company '{company_id}'")
        self._companies[company_id] = replace(company, address=replace(company.address, coordinates=coordinates))


def _load_companies_from_file(source: Path | None = None) -> tuple[Company, ...]:
    path = source or settings.companies_file
    if not path.exists():
        logger.info(f"Company seed file not found: {path}")
        return tuple()

    with path.open("r", encoding="utf-8") as handle:
        rows = json.load(handle)
    if not isinstance(rows, list):
        raise ValueError(f"Company seed file '{path}' must contain a JSON array.")

    companies: list[Company] = []
    for row in rows:
        try:
            companies.append(company_from_row(row))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Skipping invalid company entry in {path}: {e!r}")
    return tuple(companies)


_file_repository: InMemoryCompanyRepository | None = None


def get_company_repository() -> CompanyRepository:
    """Supabase when configured, otherwise an in-memory store seeded from the JSON file."""

    global _file_repository
    client = get_supabase_client()
    if client is not None:
        return SupabaseCompanyRepository(client)
    if _file_repository is None:
        _file_repository = InMemoryCompanyRepository(_load_companies_from_file())
    return _file_repository
