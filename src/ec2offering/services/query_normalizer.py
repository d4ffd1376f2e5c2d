# src/ec2offering/services/query_normalizer.py
"""
Übersetzt URI-taugliche Filter-Tokens in die kanonischen Werte der EC2 API.

Die kanonischen Werte enthalten Leerzeichen, Schrägstriche und Klammern
("Linux/UNIX (Amazon VPC)"), deshalb stehen in Request-Pfaden kurze Präfixe
wie ``linux``, ``linuxvpc`` oder ``heavy`` dafür.
"""
from __future__ import annotations

import botocore.session

from ec2offering.domain.models import (
    INSTANCE_TYPE_SEPARATOR,
    FilterQuery,
    OfferingType,
    ProductDescription,
)
from ec2offering.domain.ports import InvalidArgumentError

LINUX_PREFIX = "linux"
WINDOWS_PREFIX = "windows"
AMAZON_VPC_SUFFIX = "vpc"

_OFFERING_TYPE_PREFIXES = {
    "heavy": OfferingType.HEAVY_UTILIZATION,
    "medium": OfferingType.MEDIUM_UTILIZATION,
    "light": OfferingType.LIGHT_UTILIZATION,
}

# Pfad-Endungen ("t1.micro.") und abschließende Trenner fallen weg
_TRAILING_CHARS = INSTANCE_TYPE_SEPARATOR + "."


def _ec2_enum(shape_name: str) -> frozenset[str]:
    """Liest eine Enumeration aus dem EC2 Service-Modell, das botocore mitliefert."""
    service_model = botocore.session.get_session().get_service_model("ec2")
    return frozenset(service_model.shape_for(shape_name).enum)


# Dieselben Wertelisten, gegen die auch die EC2 API validiert
KNOWN_INSTANCE_TYPES = _ec2_enum("InstanceType")
_PRODUCT_DESCRIPTIONS = _ec2_enum("RIProductDescription")
_OFFERING_TYPES = _ec2_enum("OfferingTypeValues")


def normalize_product_description(value: str | None) -> str | None:
    """z.B. "linux" -> "Linux/UNIX", "windowsvpc" -> "Windows (Amazon VPC)"."""
    if value is None:
        return None
    if value in _PRODUCT_DESCRIPTIONS:
        return value

    lowered = value.lower()
    vpc = lowered.endswith(AMAZON_VPC_SUFFIX)
    if lowered.startswith(LINUX_PREFIX):
        return (
            ProductDescription.LINUX_UNIX_AMAZON_VPC if vpc else ProductDescription.LINUX_UNIX
        ).value
    if lowered.startswith(WINDOWS_PREFIX):
        return (ProductDescription.WINDOWS_AMAZON_VPC if vpc else ProductDescription.WINDOWS).value
    raise InvalidArgumentError("productDescription", value)


def normalize_offering_type(value: str | None) -> str | None:
    """z.B. "heavy" -> "Heavy Utilization"."""
    if value is None:
        return None
    if value in _OFFERING_TYPES:
        return value

    lowered = value.lower()
    for prefix, offering_type in _OFFERING_TYPE_PREFIXES.items():
        if lowered.startswith(prefix):
            return offering_type.value
    raise InvalidArgumentError("offeringType", value)


def _validate_instance_type(value: str) -> str:
    candidate = value.strip().lower()
    if candidate not in KNOWN_INSTANCE_TYPES:
        raise InvalidArgumentError("instanceType", value)
    return candidate


def normalize_instance_type(value: str | None) -> str | None:
    if value is None:
        return None
    return _validate_instance_type(value)


def normalize_instance_types(value: str | None) -> str | None:
    """
    Validiert einen einzelnen oder kommagetrennten Instanztyp.
    Gibt die validierten Tokens in Eingabereihenfolge verbunden zurück, oder ``None``,
    wenn nach dem Trimmen nichts übrig bleibt.
    """
    if value is None:
        return None
    tokens = [t for t in value.rstrip(_TRAILING_CHARS).split(INSTANCE_TYPE_SEPARATOR) if t.strip()]
    if not tokens:
        return None
    return INSTANCE_TYPE_SEPARATOR.join(_validate_instance_type(t) for t in tokens)


def normalize_query(
    availability_zone: str | None,
    product_description: str | None,
    offering_type: str | None,
    instance_type: str | None,
) -> FilterQuery:
    """Die Availability Zone ist bereits ein gültiger Filterwert und bleibt unverändert."""
    return FilterQuery(
        availability_zone=availability_zone,
        product_description=normalize_product_description(product_description),
        offering_type=normalize_offering_type(offering_type),
        instance_type=normalize_instance_types(instance_type),
    )


def build_cache_key(
    availability_zone: str | None,
    product_description: str | None,
    offering_type: str | None,
    instance_type: str | None,
) -> str:
    return normalize_query(
        availability_zone, product_description, offering_type, instance_type
    ).cache_key
