from __future__ import annotations

from pydantic import BaseModel, validator

from aero_rewards.errors import InvalidPeriodError
from aero_rewards.models.types import non_negative


class DistributionPeriod(BaseModel):
    """
    Half open interval [startTimestamp, endTimestamp) in unix seconds.
    A period with equal bounds is valid but no trove can have weight in it.
    """

    startTimestamp: int
    endTimestamp: int

    @validator("startTimestamp")
    @classmethod
    def start_after_origin(cls, start: int):
        return non_negative(start)

    @validator("endTimestamp")
    @classmethod
    def end_after_start(cls, end: int, values):
        non_negative(end)
        start = values.get("startTimestamp")
        if start is not None and end < start:
            raise InvalidPeriodError(f"Period ends ({end}) before it starts ({start})")
        return end

    @property
    def duration(self) -> int:
        return self.endTimestamp - self.startTimestamp

    @staticmethod
    def rolling(end: int, seconds: int) -> DistributionPeriod:
        """The `seconds` long period ending at `end`, never starting before the origin"""
        return DistributionPeriod(startTimestamp=max(end - seconds, 0), endTimestamp=end)
