"""Utilities to serialize company records and location results into API payloads."""

from __future__ import annotations

from ...models.domain import (
    Address,
    Company,
    Coordinates,
    CoordinateUpdateResult,
    DeliveryOption,
)


def coordinates_to_dict(coordinates: Coordinates | None) -> dict | None:
    if coordinates is None:
        return None
    return {"latitude": coordinates.latitude, "longitude": coordinates.longitude}


def address_to_dict(address: Address) -> dict:
    return {
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "zipCode": address.zip_code,
        "coordinates": coordinates_to_dict(address.coordinates),
    }


def company_to_public_dict(company: Company) -> dict:
    return {
        "id": company.id,
        "name": company.name,
        "subdomain": company.subdomain,
        "address": address_to_dict(company.address),
        "deliveryRadius": company.effective_delivery_radius,
        "deliveryFee": company.delivery_fee,
    }


def delivery_option_to_dict(option: DeliveryOption) -> dict:
    company = option.company
    return {
        "id": company.id,
        "name": company.name,
        "address": address_to_dict(company.address),
        "deliveryRadius": company.effective_delivery_radius,
        "deliveryFee": company.delivery_fee,
        "distance": option.distance,
    }


def company_branding_to_dict(company: Company) -> dict:
    return {
        "name": company.name,
        "branding": dict(company.branding),
        "contact": {
            "email": company.email,
            "phone": company.phone,
            "address": address_to_dict(company.address),
        },
        "deliveryRadius": company.effective_delivery_radius,
        "deliveryFee": company.delivery_fee,
    }


def coordinate_update_to_dict(result: CoordinateUpdateResult) -> dict:
    return {
        "companyId": result.company_id,
        "status": result.status.value,
        "coordinates": coordinates_to_dict(result.coordinates),
        "reason": result.reason,
    }
