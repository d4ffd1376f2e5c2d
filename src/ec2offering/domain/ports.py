# src/ec2offering/domain/ports.py
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from pydantic import BaseModel, ConfigDict, Field

from ec2offering.domain.models import FilterQuery, Offering

# ---------------------------------------------------------------------------
# Custom Domain Exceptions
# ---------------------------------------------------------------------------


class InvalidArgumentError(ValueError):
    def __init__(self, field: str, value: str):
        super().__init__(f"Invalid {field} '{value}'")
        self.field = field
        self.value = value


class UpstreamFetchError(Exception):
    def __init__(self, source: str, detail: str):
        super().__init__(f"Upstream fetch error from '{source}': {detail}")
        self.source = source
        self.detail = detail


# ---------------------------------------------------------------------------
# Result Types
# ---------------------------------------------------------------------------


class SourceResult(BaseModel):
    """Ergebnis eines Upstream-Aufrufs: Angebote bei Erfolg, sonst der Fehler."""

    source: str
    offerings: list[Offering] = Field(default_factory=list)
    error: UpstreamFetchError | None = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def ok(self) -> bool:
        return self.error is None


class ReservedOfferingsPage(BaseModel):
    offerings: list[Offering] = Field(default_factory=list)
    next_token: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def has_next(self) -> bool:
        return self.next_token is not None


# ---------------------------------------------------------------------------
# Ports
# ---------------------------------------------------------------------------


class OnDemandOfferingsPort(ABC):
    """
    Quelle für den statischen On-Demand Katalog.
    Liefert den kompletten Katalog in einem Aufruf, gefiltert wird beim Aufrufer.
    """

    source_name = "ondemand"

    @abstractmethod
    async def fetch_all(self) -> list[Offering]:
        """
        Raises:
            UpstreamFetchError: Bei Netzwerkfehlern oder kaputtem Dokument.
        """
        ...

    async def fetch(self) -> SourceResult:
        try:
            offerings = await self.fetch_all()
        except UpstreamFetchError as e:
            return SourceResult(source=self.source_name, error=e)
        return SourceResult(source=self.source_name, offerings=offerings)


class ReservedOfferingsPort(ABC):
    """
    Paginierte, serverseitig gefilterte Abfrage der Reserved Offerings.
    Adapter implementieren nur ``fetch_page``, das Abarbeiten aller Seiten passiert hier.
    """

    source_name = "reserved"

    @abstractmethod
    async def fetch_page(
        self, query: FilterQuery, next_token: str | None = None
    ) -> ReservedOfferingsPage:
        """
        Holt die Seite nach ``next_token`` (erste Seite bei ``None``).

        Raises:
            UpstreamFetchError: Bei Service- oder Transportfehlern.
        """
        ...

    async def pages(self, query: FilterQuery) -> AsyncIterator[ReservedOfferingsPage]:
        """Iteriert lazy über alle Seiten, endet sobald kein Folge-Token mehr kommt."""
        page = await self.fetch_page(query)
        yield page
        while page.has_next:
            page = await self.fetch_page(query, page.next_token)
            yield page

    async def query(self, query: FilterQuery) -> SourceResult:
        offerings: list[Offering] = []
        try:
            async for page in self.pages(query):
                offerings.extend(page.offerings)
        except UpstreamFetchError as e:
            return SourceResult(source=self.source_name, error=e)
        return SourceResult(source=self.source_name, offerings=offerings)
