"""Map an inbound Host header to the company (tenant) that owns it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from ...data.companies_repository import CompanyRepository
from ...exceptions import (
    CompanyContextRequiredError,
    HostHeaderRequiredError,
    TenantLookupError,
    TenantNotFoundError,
)
from ...models.domain import Company

logger = logging.getLogger(__name__)

DEFAULT_RESERVED_SUBDOMAINS = ("www", "api")


class HostKind(str, Enum):
    CUSTOM_DOMAIN = "custom_domain"
    SUBDOMAIN = "subdomain"
    NO_TENANT = "no_tenant"


@dataclass(frozen=True, slots=True)
class HostMatch:
    kind: HostKind
    host: str
    subdomain: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TenantResolution:
    match: HostMatch
    company: Optional[Company] = None


def normalize_host(host: str) -> str:
    """Lower-case, drop any port and trailing dot."""

    value = host.strip().lower()
    if value.startswith("["):
        # IPv6 literal, e.g. [::1]:8000
        value = value.split("]", 1)[0] + "]"
    elif value.count(":") == 1:
        value = value.split(":", 1)[0]
    return value.rstrip(".")


def classify_host(
    host: str,
    platform_domain: str,
    reserved_subdomains: Sequence[str] = DEFAULT_RESERVED_SUBDOMAINS,
) -> HostMatch:
    """Decide how a host is resolved, without touching the company store."""

    normalized = normalize_host(host)
    if not normalized:
        raise HostHeaderRequiredError()

    if "localhost" in normalized:
        return HostMatch(kind=HostKind.NO_TENANT, host=normalized)

    on_platform = normalized == platform_domain or normalized.endswith(f".{platform_domain}")
    if not on_platform:
        return HostMatch(kind=HostKind.CUSTOM_DOMAIN, host=normalized)

    if normalized == platform_domain:
        return HostMatch(kind=HostKind.NO_TENANT, host=normalized)

    subdomain = normalized.split(".", 1)[0]
    if subdomain in reserved_subdomains:
        return HostMatch(kind=HostKind.NO_TENANT, host=normalized, subdomain=subdomain)
    return HostMatch(kind=HostKind.SUBDOMAIN, host=normalized, subdomain=subdomain)


def resolve_tenant(
    host: Optional[str],
    repository: CompanyRepository,
    *,
    platform_domain: str,
    reserved_subdomains: Sequence[str] = DEFAULT_RESERVED_SUBDOMAINS,
) -> TenantResolution:
    """Resolve the active company for a host.

    Returns a resolution without a company for hosts that carry no tenant
    context (localhost, the bare platform domain, reserved subdomains).

    Raises:
        HostHeaderRequiredError: host is missing or blank.
        TenantNotFoundError: a custom domain or subdomain lookup found no active company.
        TenantLookupError: the company store failed.
    """

    if not host or not host.strip():
        raise HostHeaderRequiredError()

    match = classify_host(host, platform_domain, reserved_subdomains)
    if match.kind is HostKind.NO_TENANT:
        return TenantResolution(match=match)

    try:
        if match.kind is HostKind.CUSTOM_DOMAIN:
            company = repository.find_active_by_domain(match.host)
        else:
            company = repository.find_active_by_subdomain(match.subdomain)
    except Exception as e:
        logger.exception(f"Tenant lookup failed for host '{match.host}'")
        raise TenantLookupError() from e

    if company is None or not company.is_active:
        raise TenantNotFoundError(host=match.host)

    logger.debug(f"Resolved host '{match.host}' to company {company.id}")
    return TenantResolution(match=match, company=company)


def require_company(company: Optional[Company]) -> Company:
    """Guard for handlers that cannot run without a resolved company."""

    if company is None:
        raise CompanyContextRequiredError()
    return company
