"""Distance ranking of companies against a customer location."""

from __future__ import annotations

from typing import Iterable

from ...models.domain import Company, Coordinates, DeliveryOption, DistanceResult
from ..geospatial import calculate_distance, round_distance


def has_coordinates(company: Company) -> bool:
    return company.coordinates is not None


def calculate_distances_to_companies(
    customer: Coordinates, companies: Iterable[Company]
) -> list[DistanceResult]:
    """Distance to every company with known coordinates, nearest first.

    Companies without coordinates are left out. Ties keep their input order.
    """

    results: list[DistanceResult] = []
    for company in companies:
        if not has_coordinates(company):
            continue
        raw_distance = calculate_distance(
            customer.latitude,
            customer.longitude,
            company.coordinates.latitude,
            company.coordinates.longitude,
        )
        results.append(
            DistanceResult(
                company=company,
                distance=round_distance(raw_distance),
                within_delivery_radius=raw_distance <= company.effective_delivery_radius,
            )
        )
    # list.sort is stable
    results.sort(key=lambda result: result.distance)
    return results


def filter_companies_by_delivery_radius(
    customer: Coordinates, companies: Iterable[Company]
) -> list[DeliveryOption]:
    """Companies that deliver to the customer, nearest first."""

    return [
        DeliveryOption(company=result.company, distance=result.distance)
        for result in calculate_distances_to_companies(customer, companies)
        if result.within_delivery_radius
    ]


def get_companies_within_radius(
    center: Coordinates, radius_miles: float, companies: Iterable[Company]
) -> list[DeliveryOption]:
    """Companies within a caller-chosen radius, ignoring their own delivery radius."""

    return [
        DeliveryOption(company=result.company, distance=result.distance)
        for result in calculate_distances_to_companies(center, companies)
        if result.distance <= radius_miles
    ]
