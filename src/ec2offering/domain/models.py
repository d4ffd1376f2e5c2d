# src/ec2offering/domain/models.py
from __future__ import annotations

import json
from decimal import Decimal
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_serializer
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------

# Trennt mehrere Werte im instanceType Pfadsegment
INSTANCE_TYPE_SEPARATOR = ","

# Preise bleiben intern Decimal, im JSON werden sie zu Zahlen
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ProductDescription(StrEnum):
    LINUX_UNIX = "Linux/UNIX"
    LINUX_UNIX_AMAZON_VPC = "Linux/UNIX (Amazon VPC)"
    WINDOWS = "Windows"
    WINDOWS_AMAZON_VPC = "Windows (Amazon VPC)"


class OfferingType(StrEnum):
    HEAVY_UTILIZATION = "Heavy Utilization"
    MEDIUM_UTILIZATION = "Medium Utilization"
    LIGHT_UTILIZATION = "Light Utilization"
    NO_UPFRONT = "No Upfront"
    PARTIAL_UPFRONT = "Partial Upfront"
    ALL_UPFRONT = "All Upfront"


# ---------------------------------------------------------------------------
# Aggregate: Offering
# Ein einzelnes, normalisiertes Preisangebot (On-Demand oder Reserved).
# ---------------------------------------------------------------------------


class Offering(BaseModel):
    """
    Normalisiertes EC2 Preisangebot.
    Alle Attribute sind optional, serialisiert werden nur vorhandene.
    """

    availability_zone: str | None = Field(default=None, description="e.g. us-east-1a")
    offering_type: str | None = Field(default=None, description="e.g. Heavy Utilization")
    instance_type: str | None = Field(default=None, description="e.g. m1.small")
    product_description: str | None = Field(
        default=None, description="e.g. Linux/UNIX (Amazon VPC)"
    )
    currency_code: str | None = Field(default=None, description="e.g. USD")
    duration: int | None = Field(default=None, ge=0, description="Term length in seconds")
    fixed_price: Price | None = Field(default=None, description="Upfront cost")
    hourly_price: Price | None = Field(default=None, description="Recurring or usage rate")

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        """Schlanke JSON-Form: camelCase Keys, fehlende Attribute werden weggelassen."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Filter Query
# ---------------------------------------------------------------------------


class FilterQuery(BaseModel):
    """
    Normalisierte Request-Filter. ``None`` heißt "kein Filter" für diese Komponente.
    ``instance_type`` kann mehrere kommagetrennte Werte enthalten.
    """

    availability_zone: str | None = None
    product_description: str | None = None
    offering_type: str | None = None
    instance_type: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def instance_types(self) -> list[str]:
        if self.instance_type is None:
            return []
        return self.instance_type.split(INSTANCE_TYPE_SEPARATOR)

    def split_by_instance_type(self) -> list[FilterQuery]:
        """Eine Abfrage pro Instanztyp-Token, in Eingabereihenfolge."""
        if self.instance_type is None:
            return [self]
        return [self.model_copy(update={"instance_type": t}) for t in self.instance_types]

    @property
    def cache_key(self) -> str:
        # Jede Komponente JSON-quoted, damit das Tupel eindeutig bleibt
        return " ".join(
            json.dumps(component)
            for component in (
                self.availability_zone,
                self.product_description,
                self.offering_type,
                self.instance_type,
            )
        )

    def matches(self, offering: Offering) -> bool:
        """Clientseitiger Filter für Quellen ohne serverseitige Filterung."""
        return (
            (self.availability_zone is None or self.availability_zone == offering.availability_zone)
            and (
                self.product_description is None
                or self.product_description == offering.product_description
            )
            and (self.instance_type is None or self.instance_type == offering.instance_type)
        )


# ---------------------------------------------------------------------------
# API Response Schemas
# ---------------------------------------------------------------------------


class OfferingsResponse(BaseModel):
    ec2offerings: list[Offering] = Field(default_factory=list)

    # JSON-Antworten laufen über Offering.to_json, damit fehlende Attribute wegfallen
    @field_serializer("ec2offerings", when_used="json")
    def _serialize_offerings(self, offerings: list[Offering]) -> list[dict[str, Any]]:
        return [o.to_json() for o in offerings]
