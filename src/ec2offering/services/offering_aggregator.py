# src/ec2offering/services/offering_aggregator.py
from __future__ import annotations

import logging

from ec2offering.domain.models import FilterQuery, Offering, OfferingsResponse
from ec2offering.domain.ports import (
    OnDemandOfferingsPort,
    ReservedOfferingsPort,
    SourceResult,
)
from ec2offering.services.offering_cache import OfferingCache
from ec2offering.services.query_normalizer import normalize_query

logger = logging.getLogger(__name__)


class OfferingAggregator:
    """
    Read-Through Aggregation von On-Demand und Reserved Angeboten.
    Fällt eine Quelle aus, trägt sie keine Angebote bei.
    """

    def __init__(
        self,
        ondemand_source: OnDemandOfferingsPort,
        reserved_source: ReservedOfferingsPort,
        cache: OfferingCache,
    ) -> None:
        self._ondemand = ondemand_source
        self._reserved = reserved_source
        self._cache = cache

    async def get_offerings(
        self,
        availability_zone: str | None,
        product_description: str | None,
        offering_type: str | None = None,
        instance_type: str | None = None,
    ) -> OfferingsResponse:
        """
        Raises:
            InvalidArgumentError: Wenn ein Filter-Token unbekannt ist.
        """
        # 1. Normalisieren (schlägt fehl, bevor der Cache angefasst wird)
        query = normalize_query(
            availability_zone, product_description, offering_type, instance_type
        )
        key = query.cache_key

        # 2. Cache prüfen
        offerings = self._cache.get(key)
        if offerings is not None:
            logger.info("cached: %s", key)
            return OfferingsResponse(ec2offerings=list(offerings))

        # 3. Miss: pro Instanztyp abfragen und zusammenführen
        merged: list[Offering] = []
        for single in query.split_by_instance_type():
            merged.extend(await self._fetch(single))

        logger.info("live: %s (%d offerings)", key, len(merged))
        self._cache.put(key, merged)
        return OfferingsResponse(ec2offerings=merged)

    async def _fetch(self, query: FilterQuery) -> list[Offering]:
        offerings: list[Offering] = []

        ondemand = await self._ondemand.fetch()
        offerings.extend(o for o in self._unwrap(ondemand, query) if query.matches(o))

        reserved = await self._reserved.query(query)
        offerings.extend(self._unwrap(reserved, query))
        return offerings

    @staticmethod
    def _unwrap(result: SourceResult, query: FilterQuery) -> list[Offering]:
        if not result.ok:
            logger.warning(
                "Ignoring %s offerings for %s: %s",
                result.source,
                query.cache_key,
                result.error,
                exc_info=result.error,
            )
            return []
        return result.offerings
