from decimal import Decimal

from ec2offering.domain.models import FilterQuery, Offering, OfferingsResponse


def test_offering_serializes_only_present_fields() -> None:
    offering = Offering(instance_type="t1.micro", hourly_price=Decimal("0.02"))

    assert offering.to_json() == {"instanceType": "t1.micro", "hourlyPrice": 0.02}


def test_offering_full_serialization_uses_camel_case_and_numbers() -> None:
    offering = Offering(
        availability_zone="us-east-1a",
        offering_type="Heavy Utilization",
        instance_type="m1.small",
        product_description="Linux/UNIX (Amazon VPC)",
        currency_code="USD",
        duration=94608000,
        fixed_price=Decimal("169.0"),
        hourly_price=Decimal("0.014"),
    )

    assert offering.to_json() == {
        "availabilityZone": "us-east-1a",
        "offeringType": "Heavy Utilization",
        "instanceType": "m1.small",
        "productDescription": "Linux/UNIX (Amazon VPC)",
        "currencyCode": "USD",
        "duration": 94608000,
        "fixedPrice": 169.0,
        "hourlyPrice": 0.014,
    }


def test_offering_parses_camel_case_document_record() -> None:
    offering = Offering.model_validate(
        {"availabilityZone": "us-east-1a", "instanceType": "t1.micro", "hourlyPrice": 0.02}
    )

    assert offering.availability_zone == "us-east-1a"
    assert float(offering.hourly_price) == 0.02
    assert offering.fixed_price is None


def test_response_envelope_field_name() -> None:
    response = OfferingsResponse(ec2offerings=[Offering(instance_type="t1.micro")])
    data = response.model_dump(mode="json", by_alias=True, exclude_none=True)
    assert data == {"ec2offerings": [{"instanceType": "t1.micro"}]}


def test_response_envelope_serializes_offerings_sparsely_by_default() -> None:
    offering = Offering(instance_type="t1.micro", hourly_price=Decimal("0.02"))
    response = OfferingsResponse(ec2offerings=[offering])

    assert response.model_dump(mode="json") == {"ec2offerings": [offering.to_json()]}
    assert response.model_dump_json() == (
        '{"ec2offerings":[{"instanceType":"t1.micro","hourlyPrice":0.02}]}'
    )


def test_split_by_instance_type_keeps_token_order() -> None:
    query = FilterQuery(
        availability_zone="us-east-1a",
        product_description="Linux/UNIX",
        instance_type="t1.micro,m1.small",
    )

    parts = query.split_by_instance_type()

    assert [p.instance_type for p in parts] == ["t1.micro", "m1.small"]
    assert all(p.availability_zone == "us-east-1a" for p in parts)
    assert all(p.product_description == "Linux/UNIX" for p in parts)


def test_split_without_instance_type_returns_query_itself() -> None:
    query = FilterQuery(availability_zone="us-east-1a")
    assert query.split_by_instance_type() == [query]


def test_cache_key_distinguishes_absent_components() -> None:
    with_type = FilterQuery(availability_zone="us-east-1a", offering_type="Heavy Utilization")
    with_zone_only = FilterQuery(availability_zone="us-east-1a")

    assert with_type.cache_key != with_zone_only.cache_key
    assert with_zone_only.cache_key == '"us-east-1a" null null null'


def test_matches_treats_none_as_wildcard() -> None:
    offering = Offering(
        availability_zone="us-east-1a", product_description="Linux/UNIX", instance_type="t1.micro"
    )

    assert FilterQuery().matches(offering)
    assert FilterQuery(availability_zone="us-east-1a", instance_type="t1.micro").matches(offering)
    assert not FilterQuery(availability_zone="us-west-2a").matches(offering)
    assert not FilterQuery(product_description="Windows").matches(offering)
    assert not FilterQuery(instance_type="m1.small").matches(offering)
