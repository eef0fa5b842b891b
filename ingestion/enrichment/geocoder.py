"""
Reverse geocoding of coordinate pairs to postal codes.

The resolver is an abstract seam so the pipeline can run against a stub in
tests; GoogleGeocoder is the production implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional
import httpx
from core.config import settings
from core.exceptions import EnrichmentError
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddressCandidate:
    postal_code: str
    formatted_address: str = ""


class PostalCodeResolver(ABC):
    """Resolve a coordinate pair to a postal code"""

    @abstractmethod
    async def resolve(self, latitude: float, longitude: float) -> str:
        """
        Returns:
            Non-empty postal code of the best candidate

        Raises:
            EnrichmentError: Provider failure or no usable candidate
        """
        pass


class GoogleGeocoder(PostalCodeResolver):
    """
    Reverse geocoder backed by the Google Geocoding REST API.

    Attributes:
        api_key: Provider API key (default: settings.GEOCODER_API_KEY)
        url: Geocoding endpoint
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.api_key = api_key if api_key is not None else settings.GEOCODER_API_KEY
        self.url = url if url is not None else settings.GEOCODER_URL
        self.timeout = timeout if timeout is not None else settings.GEOCODER_TIMEOUT

    async def reverse(self, latitude: float, longitude: float) -> List[AddressCandidate]:
        """Ranked address candidates for a coordinate pair, best first"""
        context = {"latitude": latitude, "longitude": longitude}
        params = {"latlng": f"{latitude},{longitude}", "key": self.api_key or ""}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url, params=params)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            raise EnrichmentError(
                "Geocoding request failed",
                context=context,
                original_exception=e
            )
        except ValueError as e:
            raise EnrichmentError(
                "Geocoding response is not valid JSON",
                context=context,
                original_exception=e
            )

        if not isinstance(body, dict):
            raise EnrichmentError(
                "Geocoding response is not an object",
                context={**context, "response_type": type(body).__name__}
            )

        status = body.get("status", "")
        if status == "ZERO_RESULTS":
            return []
        if status != "OK":
            raise EnrichmentError(
                f"Geocoding provider returned status {status}",
                context={**context, "provider_status": status}
            )

        results = body.get("results")
        if not isinstance(results, list):
            results = []
        return [self._to_candidate(result) for result in results]

    @staticmethod
    def _to_candidate(result) -> AddressCandidate:
        # A malformed entry keeps its rank but carries no postal code
        if not isinstance(result, dict):
            return AddressCandidate(postal_code="")
        postal_code = ""
        for component in result.get("address_components") or []:
            if not isinstance(component, dict):
                continue
            types = component.get("types")
            if isinstance(types, list) and "postal_code" in types:
                long_name = component.get("long_name")
                postal_code = long_name if isinstance(long_name, str) else ""
                break
        return AddressCandidate(
            postal_code=postal_code,
            formatted_address=str(result.get("formatted_address") or "")
        )

    async def resolve(self, latitude: float, longitude: float) -> str:
        candidates = await self.reverse(latitude, longitude)

        if not candidates:
            raise EnrichmentError(
                "No address candidates for coordinates",
                context={"latitude": latitude, "longitude": longitude}
            )

        postal_code = candidates[0].postal_code
        if not postal_code:
            raise EnrichmentError(
                "Best address candidate has no postal code",
                context={
                    "latitude": latitude,
                    "longitude": longitude,
                    "formatted_address": candidates[0].formatted_address
                }
            )

        return postal_code
