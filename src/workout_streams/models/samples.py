"""Sample data models returned by the activity store."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


def parse_timestamp(value) -> datetime:
    """Parse an ISO-8601 timestamp (accepts a trailing 'Z')."""
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(frozen=True)
class DistanceSample:
    """
    Distance accrued during one measurement interval.

    Samples for one workout are ordered by start. Adjacent samples are
    usually contiguous; a gap between ``end`` and the next ``start`` means
    the measurement was lost or paused.
    """
    start: datetime
    end: datetime
    distance_m: float

    @property
    def duration_s(self) -> float:
        """Length of the sample interval in seconds."""
        return (self.end - self.start).total_seconds()

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "distance_m": self.distance_m,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DistanceSample":
        return cls(
            start=parse_timestamp(data["start"]),
            end=parse_timestamp(data["end"]),
            distance_m=float(data["distance_m"]),
        )


@dataclass(frozen=True)
class HeartRateSample:
    """A heart-rate reading over a short interval."""
    start: datetime
    end: datetime
    value: float
    unit: str = "count/min"

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "value": self.value,
            "unit": self.unit,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HeartRateSample":
        start = parse_timestamp(data["start"])
        return cls(
            start=start,
            end=parse_timestamp(data["end"]) if data.get("end") else start,
            value=float(data["value"]),
            unit=data.get("unit", "count/min"),
        )


@dataclass(frozen=True)
class LocationPoint:
    """
    A timestamped coordinate from a workout route.

    Accuracy, altitude, speed and course are passed through as delivered.
    """
    timestamp: datetime
    latitude: float
    longitude: float
    altitude_m: Optional[float] = None
    horizontal_accuracy_m: Optional[float] = None
    vertical_accuracy_m: Optional[float] = None
    speed_mps: Optional[float] = None
    course_deg: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "latitude": self.latitude,
            "longitude": self.longitude,
            "altitude_m": self.altitude_m,
            "horizontal_accuracy_m": self.horizontal_accuracy_m,
            "vertical_accuracy_m": self.vertical_accuracy_m,
            "speed_mps": self.speed_mps,
            "course_deg": self.course_deg,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LocationPoint":
        return cls(
            timestamp=parse_timestamp(data["timestamp"]),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            altitude_m=data.get("altitude_m"),
            horizontal_accuracy_m=data.get("horizontal_accuracy_m"),
            vertical_accuracy_m=data.get("vertical_accuracy_m"),
            speed_mps=data.get("speed_mps"),
            course_deg=data.get("course_deg"),
        )


@dataclass(frozen=True)
class WorkoutRoute:
    """A route object attached to a workout; its points are queried separately."""
    id: str
    workout_id: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "workout_id": self.workout_id,
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
        }
