"""Host-based tenant resolution."""

from .resolver import (
    HostKind,
    HostMatch,
    TenantResolution,
    classify_host,
    normalize_host,
    require_company,
    resolve_tenant,
)

__all__ = [
    "HostKind",
    "HostMatch",
    "TenantResolution",
    "classify_host",
    "normalize_host",
    "require_company",
    "resolve_tenant",
]
