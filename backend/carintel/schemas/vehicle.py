"""
Pydantic schemas for scraped marketplace listings.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from carintel.utils.vin import is_valid_vin


class ScrapedVehicle(BaseModel):
    """Normalized vehicle record produced by a listing scraper."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    price: int | None = Field(default=None, ge=0)
    mileage: int | None = Field(default=None, ge=0)
    vin: str | None = None
    year: int | None = None
    make: str | None = None
    model: str | None = None
    description: str = ""
    images: list[str] = Field(default_factory=list)
    source_url: str
    location: str | None = None
    condition_exterior: str | None = None
    condition_interior: str | None = None
    condition_mechanical: str | None = None
    transmission: str | None = None
    fuel_type: str | None = None
    title_status: str | None = None
    exterior_color: str | None = None

    @field_validator("vin", mode="before")
    @classmethod
    def _normalize_vin(cls, value):
        # A malformed VIN is a missing field, not a failed record
        if not value:
            return None
        value = str(value).strip().upper()
        return value if is_valid_vin(value) else None


class BatchImportError(BaseModel):
    """A URL from a batch import that could not be scraped."""

    url: str
    error: str


class BatchImportResult(BaseModel):
    """Outcome of a sequential multi-URL import."""

    vehicles: list[ScrapedVehicle] = Field(default_factory=list)
    errors: list[BatchImportError] = Field(default_factory=list)
