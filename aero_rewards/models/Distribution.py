from __future__ import annotations
from enum import Enum
from typing import Optional

from pydantic import BaseModel, validator

from aero_rewards.models.Events import AeroGauge
from aero_rewards.models.Period import DistributionPeriod
from aero_rewards.models.types import CollateralId, EthereumAddress, TroveId, non_negative


class TroveCollateralTWA(BaseModel):
    """
    Time weighted average collateral of a trove over the part of the period it was active
    :param `timeWeightedAverage`: integral of the deposit over the active window, divided by `activeTime` (floored)
    :param `activeTime`: seconds the trove existed inside the period
    """

    troveId: TroveId
    borrower: EthereumAddress
    collateralId: CollateralId
    timeWeightedAverage: int
    activeTime: int

    @validator("timeWeightedAverage", "activeTime")
    @classmethod
    def unsigned_twa(cls, value: int):
        return non_negative(value)


class TroveDistribution(TroveCollateralTWA):
    """
    :param `weight`: `timeWeightedAverage * activeTime`
    :param `rewardAmount`: pro-rata share of the gauge rewards, in reward token base units
    """

    weight: int
    rewardAmount: int

    @validator("weight", "rewardAmount")
    @classmethod
    def unsigned_share(cls, value: int):
        return non_negative(value)


class BorrowerDistribution(BaseModel):
    """All troves of a single borrower within a gauge, with summed rewards"""

    borrower: EthereumAddress
    troves: list[TroveDistribution]
    totalTimeWeightedCollateral: int
    rewardAmount: int


class GaugeDistributionInfo(AeroGauge):
    """
    What is owed by a gauge for its next undistributed epoch
    :param `latestDistributedEpoch`: highest epoch already paid out, 0 if none
    :param `claimEpoch`: the epoch whose claims are being allocated
    :param `totalRewards`: sum of claims (net of fees) at `claimEpoch`
    """

    period: DistributionPeriod
    latestDistributedEpoch: int
    claimEpoch: int
    totalRewards: int

    @validator("latestDistributedEpoch", "claimEpoch", "totalRewards")
    @classmethod
    def unsigned_epoch_totals(cls, value: int):
        return non_negative(value)


class GaugeStatus(str, Enum):
    """
    :state DISTRIBUTED: rewards were allocated to troves
    :state SKIPPED: nothing to distribute, see `reason`
    :state FAILED: the pipeline raised, see `reason`
    """

    DISTRIBUTED = "distributed"
    SKIPPED = "skipped"
    FAILED = "failed"


class GaugeDistributionResult(GaugeDistributionInfo):
    """
    Outcome of the pipeline for one gauge.
    `undistributed` is the rounding remainder left after flooring each trove's share.
    """

    collateralId: Optional[CollateralId] = None
    status: GaugeStatus
    reason: Optional[str] = None
    distributions: list[TroveDistribution] = []
    totalAllocated: int = 0
    undistributed: int = 0

    @staticmethod
    def from_info(
        info: GaugeDistributionInfo, status: GaugeStatus, **kwargs
    ) -> GaugeDistributionResult:
        return GaugeDistributionResult(**info.dict(), status=status, **kwargs)


class DistributionReport(BaseModel):
    """Aggregate of every gauge processed in a run"""

    generatedAt: int
    results: list[GaugeDistributionResult]

    def _with_status(self, status: GaugeStatus) -> list[GaugeDistributionResult]:
        return [r for r in self.results if r.status == status]

    @property
    def distributed(self) -> list[GaugeDistributionResult]:
        return self._with_status(GaugeStatus.DISTRIBUTED)

    @property
    def skipped(self) -> list[GaugeDistributionResult]:
        return self._with_status(GaugeStatus.SKIPPED)

    @property
    def failed(self) -> list[GaugeDistributionResult]:
        return self._with_status(GaugeStatus.FAILED)

    @property
    def total_troves(self) -> int:
        return sum(len(r.distributions) for r in self.results)

    @property
    def total_rewards(self) -> int:
        return sum(r.totalRewards for r in self.distributed)

    @property
    def total_allocated(self) -> int:
        return sum(r.totalAllocated for r in self.results)

    def summary(self) -> dict:
        return {
            "generatedAt": self.generatedAt,
            "gauges": len(self.results),
            "distributed": len(self.distributed),
            "skipped": [r.gauge for r in self.skipped],
            "failed": [r.gauge for r in self.failed],
            "totalTroves": self.total_troves,
            "totalRewards": self.total_rewards,
            "totalAllocated": self.total_allocated,
        }
