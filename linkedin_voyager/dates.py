"""
Partial-precision dates and time periods.

Voyager dates come as ``{"year": 2015, "month": 3}`` objects where any
trailing component may be missing: a job that started "in 2015", a
degree finished "June 2019".  PartialDate keeps the precision it was given;
TimePeriod pairs a start with an optional end, a missing end meaning the
period is ongoing.

Ordering is year, then month, then day, and an unspecified component sorts
before any specified one (``2020 < 2020-01 < 2020-01-01``).  Equality is
structural.  ``matches`` is the wildcard comparison: ``2020`` matches
``2020-05``.  A pair can therefore both match and be ordered, so this is a
partial order over the values a date may denote, not a total one.
"""

import calendar
import datetime
from typing import Any, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, model_validator

from .exceptions import MissingFieldError, TemporalRangeError


def _check_range(year: Any, month: Any, day: Any) -> None:
    for name, value in (("year", year), ("month", month), ("day", day)):
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise TemporalRangeError(f"{name} must be an integer, got {value!r}", raw=value)
    if year is None:
        raise TemporalRangeError("year is required", raw={"month": month, "day": day})
    if not datetime.MINYEAR <= year <= datetime.MAXYEAR:
        raise TemporalRangeError(f"year {year} out of range", raw=year)
    if month is not None and not 1 <= month <= 12:
        raise TemporalRangeError(f"month {month} out of range", raw=month)
    if day is not None:
        if month is None:
            raise TemporalRangeError("day given without a month", raw=day)
        last = calendar.monthrange(year, month)[1]
        if not 1 <= day <= last:
            raise TemporalRangeError(f"day {day} out of range for {year}-{month:02d}", raw=day)


class PartialDate(BaseModel):
    """A date known to year, year+month, or full-day precision."""

    model_config = ConfigDict(frozen=True, strict=True)

    year: int
    month: Optional[int] = None
    day: Optional[int] = None

    @model_validator(mode="after")
    def _validate_components(self):
        _check_range(self.year, self.month, self.day)
        return self

    @classmethod
    def parse(cls, year: Any, month: Any = None, day: Any = None) -> "PartialDate":
        _check_range(year, month, day)
        return cls(year=year, month=month, day=day)

    @classmethod
    def from_fragment(cls, raw: Any) -> "PartialDate":
        if not isinstance(raw, Mapping):
            raise TemporalRangeError(f"expected a date object, got {raw!r}", raw=raw)
        return cls.parse(raw.get("year"), raw.get("month"), raw.get("day"))

    @classmethod
    def from_date(cls, value: datetime.date) -> "PartialDate":
        return cls(year=value.year, month=value.month, day=value.day)

    def to_fragment(self) -> dict:
        out = {"year": self.year}
        if self.month is not None:
            out["month"] = self.month
        if self.day is not None:
            out["day"] = self.day
        return out

    @property
    def precision(self) -> str:
        if self.day is not None:
            return "day"
        if self.month is not None:
            return "month"
        return "year"

    def as_date(self) -> Optional[datetime.date]:
        """Full date, only when every component is known."""
        if self.month is None or self.day is None:
            return None
        return datetime.date(self.year, self.month, self.day)

    def matches(self, other: "PartialDate") -> bool:
        """Equal on every component both sides specify."""
        if self.year != other.year:
            return False
        if self.month is None or other.month is None:
            return True
        if self.month != other.month:
            return False
        return self.day is None or other.day is None or self.day == other.day

    def _key(self) -> Tuple[int, ...]:
        return (
            self.year,
            self.month is not None, self.month or 0,
            self.day is not None, self.day or 0,
        )

    def __lt__(self, other: "PartialDate") -> bool:
        if not isinstance(other, PartialDate):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: "PartialDate") -> bool:
        if not isinstance(other, PartialDate):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: "PartialDate") -> bool:
        if not isinstance(other, PartialDate):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: "PartialDate") -> bool:
        if not isinstance(other, PartialDate):
            return NotImplemented
        return self._key() >= other._key()

    def __str__(self) -> str:
        if self.month is None:
            return f"{self.year:04d}"
        if self.day is None:
            return f"{self.year:04d}-{self.month:02d}"
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


def _first_present(raw: Mapping, *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


class TimePeriod(BaseModel):
    """Start date plus an optional end; ``end is None`` means ongoing."""

    model_config = ConfigDict(frozen=True)

    start: PartialDate
    end: Optional[PartialDate] = None

    @classmethod
    def from_fragments(cls, start: Any, end: Any = None) -> "TimePeriod":
        if start is None:
            raise MissingFieldError("TimePeriod", "start", ("startDate", "start"))
        start_date = PartialDate.from_fragment(start)
        end_date = PartialDate.from_fragment(end) if end is not None else None
        return cls(start=start_date, end=end_date)

    @classmethod
    def from_raw(cls, raw: Any) -> "TimePeriod":
        """Read ``{"startDate", "endDate"}`` or the dash ``{"start", "end"}`` shape."""
        if not isinstance(raw, Mapping):
            raise TemporalRangeError(f"expected a time period object, got {raw!r}", raw=raw)
        start = _first_present(raw, "startDate", "start")
        end = _first_present(raw, "endDate", "end")
        return cls.from_fragments(start, end)

    def to_fragment(self) -> dict:
        out = {"startDate": self.start.to_fragment()}
        if self.end is not None:
            out["endDate"] = self.end.to_fragment()
        return out

    @property
    def is_ongoing(self) -> bool:
        return self.end is None

    @property
    def is_inverted(self) -> bool:
        """End strictly before start on the components both specify."""
        return (
            self.end is not None
            and self.end < self.start
            and not self.end.matches(self.start)
        )

    def duration_months(self, as_of: Optional[datetime.date] = None) -> Optional[int]:
        """Approximate length in whole months, at least 1.

        Ongoing periods are measured up to ``as_of``; without it their
        duration is unknown.  Missing months count as January.
        """
        if self.end is not None:
            end_year, end_month = self.end.year, self.end.month or 1
        elif as_of is not None:
            end_year, end_month = as_of.year, as_of.month
        else:
            return None
        months = (end_year - self.start.year) * 12 + end_month - (self.start.month or 1)
        return max(months, 1)

    def duration_string(self, as_of: Optional[datetime.date] = None) -> str:
        months = self.duration_months(as_of)
        if months is None:
            return "Unknown duration"
        if months < 12:
            return "1 month" if months == 1 else f"{months} months"
        years, rest = divmod(months, 12)
        year_part = "1 year" if years == 1 else f"{years} years"
        if rest == 0:
            return year_part
        return f"{year_part} {rest} months" if rest > 1 else f"{year_part} 1 month"
