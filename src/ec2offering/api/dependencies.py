# src/ec2offering/api/dependencies.py
from functools import lru_cache
from typing import Any

import boto3
import httpx
from fastapi import Depends

from ec2offering.adapters.ec2_reserved import Ec2ReservedOfferingsAdapter
from ec2offering.adapters.ondemand_document import OnDemandDocumentAdapter
from ec2offering.core.config import Settings, get_settings
from ec2offering.domain.ports import OnDemandOfferingsPort, ReservedOfferingsPort
from ec2offering.services.offering_aggregator import OfferingAggregator
from ec2offering.services.offering_cache import OfferingCache


# Shared HTTP Client (Connection Pooling)
@lru_cache
def get_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": "EC2OfferingAPI/1.0"},
        follow_redirects=True,
    )


# Shared EC2 Client (boto3 Clients sind thread-safe)
_ec2_client: Any | None = None


def get_ec2_client(settings: Settings = Depends(get_settings)) -> Any:
    global _ec2_client
    if _ec2_client is None:
        _ec2_client = boto3.client(
            "ec2",
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )
    return _ec2_client


def get_ondemand_source(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> OnDemandOfferingsPort:
    return OnDemandDocumentAdapter(
        http_client=client,
        url=settings.ondemand_url,
        timeout=settings.ondemand_timeout_seconds,
    )


def get_reserved_source(
    ec2_client: Any = Depends(get_ec2_client),
) -> ReservedOfferingsPort:
    return Ec2ReservedOfferingsAdapter(ec2_client=ec2_client)


# Singleton Offering Cache (ein Cache für alle Requests)
_offering_cache: OfferingCache | None = None


def get_offering_cache(
    settings: Settings = Depends(get_settings),
) -> OfferingCache:
    global _offering_cache
    if _offering_cache is None:
        _offering_cache = OfferingCache(ttl_seconds=settings.cache_ttl_seconds)
    return _offering_cache


def get_offering_aggregator(
    ondemand: OnDemandOfferingsPort = Depends(get_ondemand_source),
    reserved: ReservedOfferingsPort = Depends(get_reserved_source),
    cache: OfferingCache = Depends(get_offering_cache),
) -> OfferingAggregator:
    return OfferingAggregator(ondemand_source=ondemand, reserved_source=reserved, cache=cache)
