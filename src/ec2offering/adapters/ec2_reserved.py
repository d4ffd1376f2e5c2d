# src/ec2offering/adapters/ec2_reserved.py
from __future__ import annotations

import asyncio
import logging
import time
from decimal import Decimal
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, Field, ValidationError

from ec2offering.core.metrics import UPSTREAM_API_COUNT, UPSTREAM_API_DURATION
from ec2offering.domain.models import FilterQuery, Offering
from ec2offering.domain.ports import (
    ReservedOfferingsPage,
    ReservedOfferingsPort,
    UpstreamFetchError,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Interne Rohdaten-Schemas (DescribeReservedInstancesOfferings Response)
# ---------------------------------------------------------------------------


class _RecurringCharge(BaseModel):
    amount: float | None = Field(default=None, alias="Amount")
    frequency: str | None = Field(default=None, alias="Frequency")


class _ReservedInstancesOffering(BaseModel):
    availability_zone: str | None = Field(default=None, alias="AvailabilityZone")
    offering_type: str | None = Field(default=None, alias="OfferingType")
    instance_type: str | None = Field(default=None, alias="InstanceType")
    product_description: str | None = Field(default=None, alias="ProductDescription")
    currency_code: str | None = Field(default=None, alias="CurrencyCode")
    duration: int | None = Field(default=None, alias="Duration")
    fixed_price: float | None = Field(default=None, alias="FixedPrice")
    usage_price: float | None = Field(default=None, alias="UsagePrice")
    recurring_charges: list[_RecurringCharge] = Field(
        default_factory=list, alias="RecurringCharges"
    )


class _DescribeResponse(BaseModel):
    offerings: list[_ReservedInstancesOffering] = Field(
        default_factory=list, alias="ReservedInstancesOfferings"
    )
    next_token: str | None = Field(default=None, alias="NextToken")


def _to_decimal(value: float | None) -> Decimal | None:
    # über str(), damit 0.014 nicht zu 0.01399999... wird
    return Decimal(str(value)) if value is not None else None


# ---------------------------------------------------------------------------
# Adapter-Implementierung
# ---------------------------------------------------------------------------


class Ec2ReservedOfferingsAdapter(ReservedOfferingsPort):
    """
    Adapter für EC2 ``DescribeReservedInstancesOfferings``.
    Marketplace-Angebote und Dedicated Tenancy sind ausgeschlossen.
    """

    def __init__(self, ec2_client: Any) -> None:
        # boto3 EC2 Client blockiert, daher läuft jeder Aufruf in einem Worker-Thread
        self._client = ec2_client

    async def fetch_page(
        self, query: FilterQuery, next_token: str | None = None
    ) -> ReservedOfferingsPage:
        params = self._build_params(query, next_token)
        start = time.perf_counter()
        try:
            response = await asyncio.to_thread(
                self._client.describe_reserved_instances_offerings, **params
            )
            raw = _DescribeResponse.model_validate(response)
        except (ClientError, BotoCoreError) as e:
            UPSTREAM_API_COUNT.labels(source=self.source_name, status="error").inc()
            raise UpstreamFetchError(self.source_name, str(e)) from e
        except ValidationError as e:
            UPSTREAM_API_COUNT.labels(source=self.source_name, status="error").inc()
            raise UpstreamFetchError(self.source_name, f"Unexpected response: {e}") from e
        finally:
            UPSTREAM_API_DURATION.labels(source=self.source_name).observe(
                time.perf_counter() - start
            )

        UPSTREAM_API_COUNT.labels(source=self.source_name, status="success").inc()
        logger.debug(
            "Reserved offerings page: %d offerings, next_token=%s",
            len(raw.offerings),
            raw.next_token,
        )
        return ReservedOfferingsPage(
            offerings=[self._normalize(o) for o in raw.offerings],
            next_token=raw.next_token or None,
        )

    @staticmethod
    def _build_params(query: FilterQuery, next_token: str | None) -> dict[str, Any]:
        params: dict[str, Any] = {"IncludeMarketplace": False, "InstanceTenancy": "default"}
        if query.availability_zone is not None:
            params["AvailabilityZone"] = query.availability_zone
        if query.product_description is not None:
            params["ProductDescription"] = query.product_description
        if query.offering_type is not None:
            params["OfferingType"] = query.offering_type
        if query.instance_type is not None:
            params["InstanceType"] = query.instance_type
        if next_token is not None:
            params["NextToken"] = next_token
        return params

    @staticmethod
    def _normalize(raw: _ReservedInstancesOffering) -> Offering:
        # Stündlicher Preis: erste Recurring Charge, sonst UsagePrice (z.B. c1.medium)
        if raw.recurring_charges:
            hourly = raw.recurring_charges[0].amount
        else:
            hourly = raw.usage_price

        return Offering(
            availability_zone=raw.availability_zone,
            offering_type=raw.offering_type,
            instance_type=raw.instance_type,
            product_description=raw.product_description,
            currency_code=raw.currency_code,
            duration=raw.duration,
            fixed_price=_to_decimal(raw.fixed_price),
            hourly_price=_to_decimal(hourly),
        )
