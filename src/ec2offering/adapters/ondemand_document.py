# src/ec2offering/adapters/ondemand_document.py
from __future__ import annotations

import logging
import time

import httpx
from pydantic import BaseModel, Field, ValidationError

from ec2offering.core.metrics import UPSTREAM_API_COUNT, UPSTREAM_API_DURATION
from ec2offering.domain.models import Offering
from ec2offering.domain.ports import OnDemandOfferingsPort, UpstreamFetchError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Rohdaten-Schema des statischen Preisdokuments
# ---------------------------------------------------------------------------


class _OnDemandDocument(BaseModel):
    ec2offerings: list[Offering] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Adapter-Implementierung
# ---------------------------------------------------------------------------


class OnDemandDocumentAdapter(OnDemandOfferingsPort):
    """
    Adapter für das statische On-Demand Preisdokument.
    Das Dokument hat bereits das Angebots-JSON-Format: ``{"ec2offerings": [...]}``.
    """

    def __init__(self, http_client: httpx.AsyncClient, url: str, timeout: float = 15.0) -> None:
        self._client = http_client
        self._url = url
        self._timeout = timeout

    async def fetch_all(self) -> list[Offering]:
        start = time.perf_counter()
        try:
            response = await self._client.get(self._url, timeout=self._timeout)
            response.raise_for_status()
            document = _OnDemandDocument.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            UPSTREAM_API_COUNT.labels(source=self.source_name, status="error").inc()
            raise UpstreamFetchError(self.source_name, str(e)) from e
        except httpx.RequestError as e:
            UPSTREAM_API_COUNT.labels(source=self.source_name, status="error").inc()
            raise UpstreamFetchError(self.source_name, f"Connection error: {e}") from e
        except (ValueError, ValidationError) as e:
            # response.json() wirft ValueError (JSONDecodeError) bei kaputtem Dokument
            UPSTREAM_API_COUNT.labels(source=self.source_name, status="error").inc()
            raise UpstreamFetchError(self.source_name, f"Malformed document: {e}") from e
        finally:
            UPSTREAM_API_DURATION.labels(source=self.source_name).observe(
                time.perf_counter() - start
            )

        UPSTREAM_API_COUNT.labels(source=self.source_name, status="success").inc()
        logger.debug("Loaded %d on-demand offerings from %s", len(document.ec2offerings), self._url)
        return document.ec2offerings
