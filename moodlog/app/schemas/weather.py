from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WeatherSnapshot(BaseModel):
    """Current conditions embedded verbatim into a mood entry."""

    model_config = ConfigDict(extra="allow")

    temp: int
    description: str
    city: str
    icon: str | None = None


class ProviderMain(BaseModel):
    temp: float


class ProviderCondition(BaseModel):
    description: str
    icon: str


class ProviderWeather(BaseModel):
    """Subset of the OpenWeatherMap current-weather payload we rely on."""

    name: str
    main: ProviderMain
    weather: list[ProviderCondition] = Field(..., min_length=1)

    def to_snapshot(self) -> WeatherSnapshot:
        condition = self.weather[0]
        return WeatherSnapshot(
            temp=round(self.main.temp),
            description=condition.description,
            city=self.name,
            icon=condition.icon,
        )
