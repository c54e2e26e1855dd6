from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TripRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, frozen=True)

    country: str = Field(..., min_length=1, description="Canonical country name")
    number_of_days: int = Field(..., alias="numberOfDays", ge=1, le=10, description="Number of days")
    travel_style: str = Field(..., alias="travelStyle", min_length=1)
    interests: str = Field(..., min_length=1)
    budget: str = Field(..., min_length=1)
    group_type: str = Field(..., alias="groupType", min_length=1)
    user_id: str = Field(..., alias="userId", min_length=1)


class Country(BaseModel):
    display_name: str = Field(..., description="Label including the flag glyph")
    coordinates: tuple[float, float] = (0.0, 0.0)
    canonical_name: str
    map_link: str = ""


class Activity(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    time_of_day: str = Field(..., alias="time")
    description: str


class ItineraryDay(BaseModel):
    day: int = Field(..., ge=1)
    location: str
    activities: list[Activity] = []


class TripLocation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    city: str | None = None
    coordinates: list[float] = []
    map_link: str | None = Field(None, alias="openStreetMap")


class TripPlan(BaseModel):
    """Itinerary as returned by the model.

    Only ``name`` and ``itinerary`` are enforced; every other field is accepted
    as-is and checked where it is read.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str
    description: Any = None
    estimated_price: Any = Field(None, alias="estimatedPrice")
    duration: Any = None
    budget: Any = None
    travel_style: Any = Field(None, alias="travelStyle")
    interests: Any = None
    group_type: Any = Field(None, alias="groupType")
    best_time_to_visit: Any = Field(None, alias="bestTimeToVisit")
    weather_info: Any = Field(None, alias="weatherInfo")
    location: Any = None
    itinerary: list[Any]

    def itinerary_days(self) -> list[ItineraryDay]:
        return [ItineraryDay.model_validate(day) for day in self.itinerary]

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_unset=True)


class TripDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="$id")
    serialized_plan: str = Field(..., alias="tripDetails")
    created_at: str = Field(..., alias="createdAt")
    image_urls: list[str] = Field(default_factory=list, alias="imageUrls", max_length=3)
    user_id: str = Field(..., alias="userId")


class TripSummary(BaseModel):
    id: str
    name: str
    image_url: str | None = None
    location: str = ""
    tags: list[str] = []
    price: str | None = None


class AccountProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    account_id: str = Field(..., alias="accountId", min_length=1)
    email: str
    name: str
    image_url: str | None = Field(None, alias="imageUrl")
