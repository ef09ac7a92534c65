from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from ..metrics import WEATHER_FALLBACKS
from ..schemas.weather import ProviderWeather, WeatherSnapshot
from ..utils.timeouts import retry_async

logger = logging.getLogger(__name__)

FALLBACK_TEMP = 22
FALLBACK_DESCRIPTION = "partly cloudy"
FALLBACK_ICON = "02d"


def fallback_snapshot(city: str) -> WeatherSnapshot:
    return WeatherSnapshot(
        temp=FALLBACK_TEMP,
        description=FALLBACK_DESCRIPTION,
        city=city,
        icon=FALLBACK_ICON,
    )


class WeatherGateway:
    """Current-weather lookup that answers with a fixed snapshot when the provider fails."""

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str,
        timeout: float,
        retries: int = 1,
        retry_delay: float = 0.25,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._retries = max(1, retries)
        self._retry_delay = retry_delay
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def fetch_by_city(self, city: str) -> WeatherSnapshot:
        if not self._api_key:
            return self._fallback(city, reason="no_api_key")

        try:
            return await retry_async(
                lambda: self._request(city),
                attempts=self._retries,
                delay=self._retry_delay,
                retry_on=(httpx.TransportError,),
            )
        except httpx.TimeoutException as exc:
            return self._fallback(city, reason="timeout", exc=exc)
        except httpx.HTTPStatusError as exc:
            return self._fallback(city, reason=f"http_{exc.response.status_code}", exc=exc)
        except httpx.HTTPError as exc:
            return self._fallback(city, reason="network", exc=exc)
        except (ValidationError, ValueError) as exc:
            return self._fallback(city, reason="malformed", exc=exc)
        except Exception as exc:
            logger.exception("Unexpected weather provider failure for %s", city)
            return self._fallback(city, reason="unexpected", exc=exc)

    async def _request(self, city: str) -> WeatherSnapshot:
        response = await self._client.get(
            self._base_url,
            params={"q": city, "appid": self._api_key, "units": "metric"},
        )
        response.raise_for_status()
        return ProviderWeather.model_validate(response.json()).to_snapshot()

    def _fallback(
        self,
        city: str,
        *,
        reason: str,
        exc: BaseException | None = None,
    ) -> WeatherSnapshot:
        WEATHER_FALLBACKS.labels(reason=reason).inc()
        logger.warning(
            "Weather provider unavailable, serving fallback: %s",
            exc if exc is not None else reason,
            extra={"city": city, "reason": reason},
        )
        return fallback_snapshot(city)

    async def close(self) -> None:
        await self._client.aclose()


__all__ = ["WeatherGateway", "fallback_snapshot"]
