"""
Health Data Models - Structures for health samples, query results and chat messages.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Union
from pydantic import AwareDatetime, BaseModel, Field, model_validator


class MetricType(str, Enum):
    """Health metrics the stores can be asked for."""
    STEPS = "steps"
    HEART_RATE = "heart_rate"
    SLEEP = "sleep"
    ACTIVE_ENERGY = "active_energy"


class DateRange(BaseModel):
    """Half-open time interval [start, end) used to scope a data query."""
    start: datetime
    end: datetime

    def contains(self, timestamp: datetime) -> bool:
        return self.start <= timestamp < self.end


# Raw samples as recorded by a device

class QuantitySample(BaseModel):
    """A numeric sample covering [start, end), e.g. a step count or kcal burned."""
    value: float = Field(ge=0)
    start: AwareDatetime
    end: AwareDatetime


class HeartRateSample(BaseModel):
    """A single heart rate reading."""
    value: float = Field(gt=0)  # bpm
    timestamp: AwareDatetime


class SleepStageKind(str, Enum):
    """Sleep analysis categories reported by the platform."""
    ASLEEP = "asleep"
    IN_BED = "inBed"
    AWAKE = "awake"
    ASLEEP_CORE = "asleepCore"
    ASLEEP_DEEP = "asleepDeep"
    ASLEEP_REM = "asleepREM"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


class SleepStage(BaseModel):
    """A typed sleep interval."""
    kind: SleepStageKind = SleepStageKind.UNKNOWN
    start: AwareDatetime
    end: AwareDatetime


# Query results

class HeartRateData(BaseModel):
    """Heart rate over a range. ``average`` is None iff there are no samples."""
    average: Optional[float] = None  # bpm
    samples: List[HeartRateSample] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_average(self) -> "HeartRateData":
        if (self.average is None) != (not self.samples):
            raise ValueError("average must be set exactly when samples are present")
        return self

    @classmethod
    def from_samples(cls, samples: List[HeartRateSample]) -> "HeartRateData":
        if not samples:
            return cls()
        average = sum(s.value for s in samples) / len(samples)
        return cls(average=average, samples=samples)


class SleepSession(BaseModel):
    """A contiguous run of sleep stages with no gap longer than one hour."""
    duration: float  # seconds
    start: datetime
    end: datetime
    stages: List[SleepStage] = Field(default_factory=list)


# steps -> int, heart rate -> HeartRateData, sleep -> list of sessions, active energy -> kcal
RawMetricResult = Union[int, HeartRateData, List[SleepSession], float]


# API payloads

class HealthSampleBatch(BaseModel):
    """Samples pushed by the mobile client."""
    steps: List[QuantitySample] = Field(default_factory=list)
    heart_rate: List[HeartRateSample] = Field(default_factory=list)
    sleep: List[SleepStage] = Field(default_factory=list)
    active_energy: List[QuantitySample] = Field(default_factory=list)


class AuthorizationRequest(BaseModel):
    """Metrics the user grants read access to."""
    metrics: List[MetricType]


class HealthSummary(BaseModel):
    """Dashboard view of a single day; a metric is None when it could not be read."""
    date_range: DateRange
    steps: Optional[int] = None
    heart_rate_avg: Optional[float] = None
    sleep_minutes: Optional[int] = None
    active_energy: Optional[float] = None  # kcal


class ChatMessage(BaseModel):
    """Chat message model."""
    role: str  # user, assistant
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
