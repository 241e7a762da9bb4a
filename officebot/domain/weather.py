"""Daily weather forecast for the office location.

Forecasts come from the Open-Meteo daily API and are reduced to the short
context line shown under each day in the home tab.
"""

from __future__ import annotations

import datetime
import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from officebot.core.http_client import get_shared_client

logger = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_FORECAST_URL = "https://www.metoffice.gov.uk/weather/forecast/gcpvj0v07"

_DAILY_FIELDS = (
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "apparent_temperature_max",
    "uv_index_max",
    "relative_humidity_2m_mean",
)

# WMO weather interpretation codes -> (emoji, description)
WEATHER_CODES: dict[int, tuple[str, str]] = {
    0: ("☀️", "Clear sky"),
    1: ("🌤️", "Mainly clear"),
    2: ("⛅", "Partly cloudy"),
    3: ("☁️", "Overcast"),
    45: ("🌫️", "Fog"),
    48: ("🌫️", "Depositing rime fog"),
    51: ("🌦️", "Light drizzle"),
    53: ("🌦️", "Drizzle"),
    55: ("🌦️", "Dense drizzle"),
    56: ("🌧️", "Freezing drizzle"),
    57: ("🌧️", "Dense freezing drizzle"),
    61: ("🌧️", "Light rain"),
    63: ("🌧️", "Rain"),
    65: ("🌧️", "Heavy rain"),
    66: ("🌧️", "Freezing rain"),
    67: ("🌧️", "Heavy freezing rain"),
    71: ("🌨️", "Light snow"),
    73: ("🌨️", "Snow"),
    75: ("❄️", "Heavy snow"),
    77: ("🌨️", "Snow grains"),
    80: ("🌦️", "Light showers"),
    81: ("🌧️", "Showers"),
    82: ("⛈️", "Violent showers"),
    85: ("🌨️", "Snow showers"),
    86: ("❄️", "Heavy snow showers"),
    95: ("⛈️", "Thunderstorm"),
    96: ("⛈️", "Thunderstorm with hail"),
    99: ("⛈️", "Thunderstorm with heavy hail"),
}
UNKNOWN_WEATHER = ("🌡️", "Unknown conditions")


class DailyForecast(BaseModel):
    """Forecast for one calendar day."""

    date: datetime.date
    weather_code: int
    temp_max: float
    temp_min: float
    feels_like_max: Optional[float] = None
    uv_index_max: Optional[float] = None
    humidity_mean: Optional[float] = None


class WeatherData(BaseModel):
    """Multi-day forecast for the office location."""

    days: list[DailyForecast] = Field(default_factory=list)
    forecast_url: str = DEFAULT_FORECAST_URL

    def for_date(self, day: datetime.date) -> Optional[DailyForecast]:
        for forecast in self.days:
            if forecast.date == day:
                return forecast
        return None


@dataclass
class DayWeather:
    """Formatted weather values for a day's context line."""

    emoji: str
    temp: str
    description: str
    feels_like: Optional[int]
    humidity: Optional[int]
    uv_index: Optional[int]
    forecast_url: str


def format_day_weather(
    weather: Optional[WeatherData], day: datetime.date, is_today: bool
) -> Optional[DayWeather]:
    """Reduce the forecast for ``day`` to display values.

    Returns None when there is no forecast or it does not cover ``day``.
    Humidity and UV are only included for today.
    """
    if weather is None:
        return None

    forecast = weather.for_date(day)
    if forecast is None:
        return None

    emoji, description = WEATHER_CODES.get(forecast.weather_code, UNKNOWN_WEATHER)
    low, high = round(forecast.temp_min), round(forecast.temp_max)
    temp = f"{high}°C" if low == high else f"{low}–{high}°C"

    feels_like = None
    if forecast.feels_like_max is not None and round(forecast.feels_like_max) != high:
        feels_like = round(forecast.feels_like_max)

    humidity = uv_index = None
    if is_today:
        if forecast.humidity_mean is not None:
            humidity = round(forecast.humidity_mean)
        if forecast.uv_index_max is not None:
            uv_index = round(forecast.uv_index_max)

    return DayWeather(
        emoji=emoji,
        temp=temp,
        description=description,
        feels_like=feels_like,
        humidity=humidity,
        uv_index=uv_index,
        forecast_url=weather.forecast_url,
    )


def format_weather_line(day_weather: DayWeather, is_today: bool) -> str:
    """Context line text: "☀️ 9–14°C • Clear sky • _Feels like 12°C_ ..."."""
    text = f"{day_weather.emoji} {day_weather.temp} • {day_weather.description}"
    if day_weather.feels_like is not None:
        text += f" • _Feels like {day_weather.feels_like}°C_"
    if is_today:
        if day_weather.humidity is not None:
            text += f" • {day_weather.humidity}% humidity"
        if day_weather.uv_index is not None:
            text += f" • UV {day_weather.uv_index}"
        text += f" • <{day_weather.forecast_url}|Forecast>"
    return text


def parse_open_meteo(payload: dict, forecast_url: str = DEFAULT_FORECAST_URL) -> WeatherData:
    """Convert an Open-Meteo ``daily`` payload into ``WeatherData``.

    Raises:
        ValueError: If the payload lacks the daily arrays
    """
    daily = payload.get("daily")
    if not isinstance(daily, dict) or "time" not in daily:
        raise ValueError("Open-Meteo response has no daily forecast")

    def _column(name: str) -> list:
        values = daily.get(name) or []
        return list(values) + [None] * (len(daily["time"]) - len(values))

    rows = zip(
        daily["time"],
        _column("weather_code"),
        _column("temperature_2m_max"),
        _column("temperature_2m_min"),
        _column("apparent_temperature_max"),
        _column("uv_index_max"),
        _column("relative_humidity_2m_mean"),
    )

    days = []
    for day, code, t_max, t_min, feels, uv, humidity in rows:
        if code is None or t_max is None or t_min is None:
            continue
        days.append(
            DailyForecast(
                date=day,
                weather_code=code,
                temp_max=t_max,
                temp_min=t_min,
                feels_like_max=feels,
                uv_index_max=uv,
                humidity_mean=humidity,
            )
        )

    return WeatherData(days=days, forecast_url=forecast_url)


async def fetch_weather(
    latitude: float,
    longitude: float,
    forecast_url: str = DEFAULT_FORECAST_URL,
    forecast_days: int = 14,
) -> Optional[WeatherData]:
    """Fetch the daily forecast; returns None on any fetch or parse failure."""
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "daily": ",".join(_DAILY_FIELDS),
        "timezone": "auto",
        "forecast_days": forecast_days,
    }

    try:
        client = await get_shared_client("weather")
        response = await client.get(OPEN_METEO_URL, params=params)
        response.raise_for_status()
        return parse_open_meteo(response.json(), forecast_url)
    except (httpx.HTTPError, ValueError, ValidationError) as e:
        logger.warning("Weather fetch failed for %s,%s: %s", latitude, longitude, e)
        return None


class WeatherProvider:
    """Caches the office forecast for ``ttl_seconds`` between home tab renders."""

    def __init__(
        self,
        location: Optional[tuple[float, float]],
        forecast_url: str = DEFAULT_FORECAST_URL,
        ttl_seconds: float = 1800.0,
    ) -> None:
        self.location = location
        self.forecast_url = forecast_url
        self.ttl_seconds = ttl_seconds
        self._cached: Optional[WeatherData] = None
        self._fetched_at = 0.0

    async def get_weather(self) -> Optional[WeatherData]:
        """Return the cached forecast, refreshing it once stale.

        Returns None when no location is configured. A failed refresh keeps
        serving the previous forecast.
        """
        if self.location is None:
            return None

        if self._cached is not None and time.monotonic() - self._fetched_at < self.ttl_seconds:
            return self._cached

        latitude, longitude = self.location
        weather = await fetch_weather(latitude, longitude, self.forecast_url)
        if weather is not None:
            self._cached = weather
            self._fetched_at = time.monotonic()
        return self._cached
