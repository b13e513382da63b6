"""
Pydantic schemas for VIN verification results.

A VinAnalysis is what gets cached per VIN and returned by /vin/analyze.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SectionStatus = Literal["ok", "degraded"]
Recommendation = Literal["GREAT", "FAIR", "CAUTION", "UNKNOWN"]

HISTORY_UNAVAILABLE = "History unavailable - Timeout or Blocked"
BROWSER_LAUNCH_FAILED = "Browser failed to launch"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class VinSpecs(_Frozen):
    """Decoded vPIC fields. Empty strings mean NHTSA had no value."""

    vin: str
    year: str = ""
    make: str = ""
    model: str = ""
    trim: str = ""
    engine: str = ""
    displacement: str = ""
    cylinders: str = ""
    fuel_type: str = ""
    transmission: str = ""
    drive_type: str = ""
    seats: str = ""
    body_class: str = ""


class AnalysisMeta(_Frozen):
    vin: str
    timestamp: int  # epoch milliseconds


class VehicleSpecs(_Frozen):
    year: str = "Unknown"
    make: str = "Unknown"
    model: str = "Unknown"
    trim: str = ""


class Recall(_Frozen):
    """An open NHTSA recall campaign."""

    recall_id: str | None = None
    affected_component: str | None = None
    description: str = ""
    remedy_action: str | None = None
    is_critical: bool = False


class MaintenanceEvent(_Frozen):
    """A service-history timeline entry, or a sentinel carrying only `error`."""

    date: str | None = None
    mileage: int | None = None
    description: str | None = None
    error: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


class SafetySection(_Frozen):
    status: SectionStatus = "ok"
    reason: str | None = None
    recalls: list[Recall] = Field(default_factory=list)


class HistorySection(_Frozen):
    status: SectionStatus = "ok"
    reason: str | None = None
    maintenance: list[MaintenanceEvent] = Field(default_factory=list)


class Verdict(_Frozen):
    score: int = 100
    alerts: list[str] = Field(default_factory=list)
    recommendation: Recommendation = "UNKNOWN"

    @field_validator("score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        return max(0, min(100, int(value)))


class VinAnalysis(_Frozen):
    meta: AnalysisMeta
    specs: VehicleSpecs = Field(default_factory=VehicleSpecs)
    safety: SafetySection = Field(default_factory=SafetySection)
    history: HistorySection = Field(default_factory=HistorySection)
    verdict: Verdict = Field(default_factory=Verdict)
