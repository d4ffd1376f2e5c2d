# src/ec2offering/api/routes/offerings.py
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from ec2offering.api.dependencies import get_offering_aggregator
from ec2offering.core.config import Settings, get_settings
from ec2offering.domain.models import OfferingsResponse
from ec2offering.domain.ports import InvalidArgumentError
from ec2offering.services.offering_aggregator import OfferingAggregator

router = APIRouter(tags=["Offerings"])

AggregatorDep = Annotated[OfferingAggregator, Depends(get_offering_aggregator)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


async def _get_offerings(
    aggregator: OfferingAggregator,
    availability_zone: str,
    product_description: str,
    offering_type: str | None = None,
    instance_type: str | None = None,
) -> OfferingsResponse:
    try:
        return await aggregator.get_offerings(
            availability_zone, product_description, offering_type, instance_type
        )
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get(
    "/{availability_zone}/{product_description}/{offering_type}/{instance_type}",
    response_model=OfferingsResponse,
)
async def get_offerings_by_instance_type(
    aggregator: AggregatorDep,
    availability_zone: str,
    product_description: str,
    offering_type: str,
    instance_type: str,
) -> OfferingsResponse:
    """
    Angebote für einen oder mehrere Instanztypen.
    ``instance_type`` darf kommagetrennt sein, z.B. ``t1.micro,m1.small``.
    """
    return await _get_offerings(
        aggregator, availability_zone, product_description, offering_type, instance_type
    )


@router.get(
    "/{availability_zone}/{product_description}/{offering_type}",
    response_model=OfferingsResponse,
)
async def get_offerings_by_offering_type(
    aggregator: AggregatorDep,
    availability_zone: str,
    product_description: str,
    offering_type: str,
) -> OfferingsResponse:
    return await _get_offerings(aggregator, availability_zone, product_description, offering_type)


@router.get(
    "/{availability_zone}/{product_description}",
    response_model=OfferingsResponse,
)
async def get_offerings_by_product_description(
    aggregator: AggregatorDep,
    availability_zone: str,
    product_description: str,
) -> OfferingsResponse:
    return await _get_offerings(aggregator, availability_zone, product_description)


@router.get(
    "/{availability_zone}",
    response_model=OfferingsResponse,
)
async def get_offerings_by_availability_zone(
    aggregator: AggregatorDep,
    settings: SettingsDep,
    availability_zone: str,
) -> OfferingsResponse:
    return await _get_offerings(
        aggregator, availability_zone, settings.default_product_description
    )


@router.get("/", response_model=OfferingsResponse)
async def get_default_offerings(
    aggregator: AggregatorDep,
    settings: SettingsDep,
) -> OfferingsResponse:
    return await _get_offerings(
        aggregator, settings.default_availability_zone, settings.default_product_description
    )
