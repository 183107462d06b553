from typing import Optional

import requests
from pydantic import ValidationError

from aero_rewards import utils
from aero_rewards.epochs import get_current_timestamp, get_gauge_distribution_info
from aero_rewards.errors import (
    EmptyQueryError,
    GaugeDistributionError,
    InvalidPeriodError,
    TooManyLoopsError,
)
from aero_rewards.models import (
    CollateralId,
    Config,
    DistributionPeriod,
    DistributionReport,
    EthereumAddress,
    GaugeDistributionInfo,
    GaugeDistributionResult,
    GaugeStatus,
)
from aero_rewards.queries import get_collateral_ids_for_tokens, get_troves_active_in_period
from aero_rewards.rewards import allocate_rewards, total_allocated, undistributed
from aero_rewards.twa import calculate_twa_for_troves

# failures that abandon a single gauge rather than the whole run
GAUGE_ERRORS = (
    requests.RequestException,
    EmptyQueryError,
    TooManyLoopsError,
    ValidationError,
    InvalidPeriodError,
)


def with_period(
    info: GaugeDistributionInfo, period: Optional[DistributionPeriod]
) -> GaugeDistributionInfo:
    if period is None:
        return info
    return GaugeDistributionInfo(**{**info.dict(), "period": period.dict()})


def distribute_gauge(
    conf: Config,
    info: GaugeDistributionInfo,
    collateral_ids: dict[EthereumAddress, CollateralId],
) -> GaugeDistributionResult:
    """
    Allocate the claim epoch rewards of a single gauge to the troves of its collateral.
    Returns a SKIPPED result when there is nothing to allocate or nobody to allocate to.
    """
    if info.totalRewards == 0:
        return GaugeDistributionResult.from_info(
            info,
            GaugeStatus.SKIPPED,
            reason=f"No rewards claimed for epoch {info.claimEpoch}",
        )

    collateral_id = collateral_ids.get(info.token)
    if collateral_id is None:
        return GaugeDistributionResult.from_info(
            info,
            GaugeStatus.SKIPPED,
            reason=f"No collateral branch found for token {info.token}",
        )

    troves = get_troves_active_in_period(conf, [collateral_id], info.period)
    utils.log(conf, f"🔍 {len(troves)} trove(s) active in branch {collateral_id}")

    if len(troves) == 0:
        return GaugeDistributionResult.from_info(
            info,
            GaugeStatus.SKIPPED,
            collateralId=collateral_id,
            reason="No troves active during the period",
        )

    twa_results = calculate_twa_for_troves(conf, troves, info.period)
    distributions = allocate_rewards(twa_results, info.totalRewards)
    allocated = total_allocated(distributions)

    return GaugeDistributionResult.from_info(
        info,
        GaugeStatus.DISTRIBUTED,
        collateralId=collateral_id,
        distributions=distributions,
        totalAllocated=allocated,
        undistributed=undistributed(distributions, info.totalRewards),
    )


def run_distribution(
    conf: Config,
    period_override: Optional[DistributionPeriod] = None,
    current_timestamp: Optional[int] = None,
) -> DistributionReport:
    """
    Entry point of the distribution calculation:
    1. resolve the claim epoch, period and claimed rewards of every gauge
    2. map gauge LP tokens to collateral branches
    3. for each gauge, query troves active in the period, compute their TWA and allocate

    Gauges are independent. A gauge whose pipeline fails is reported as FAILED and the
    run carries on, unless `conf.fail_fast` is set. Failures while discovering gauges are
    not tied to a gauge and always propagate.

    :param `period_override`: use this period for every gauge instead of the epoch derived one
    :param `current_timestamp`: end of the epoch derived periods, defaults to the latest known block time
    """
    utils.log(conf, "⚗ Starting AERO rewards distribution calculation...")

    now = current_timestamp if current_timestamp is not None else get_current_timestamp(conf)
    infos = [with_period(i, period_override) for i in get_gauge_distribution_info(conf, now)]
    utils.log(conf, f"Found {len(infos)} Aero LP gauge(s)")

    if len(infos) == 0:
        return DistributionReport(generatedAt=now, results=[])

    collateral_ids = get_collateral_ids_for_tokens(
        conf, utils.unique([i.token for i in infos])
    )

    results: list[GaugeDistributionResult] = []
    for info in infos:
        utils.log(
            conf,
            f"📆 Gauge {info.gauge}: epoch {info.claimEpoch}, "
            f"{info.period.startTimestamp} - {info.period.endTimestamp}, "
            f"{info.totalRewards} to distribute",
        )
        try:
            result = distribute_gauge(conf, info, collateral_ids)
        except GAUGE_ERRORS as e:
            if conf.fail_fast:
                raise GaugeDistributionError(f"Gauge {info.gauge} failed: {e}") from e
            result = GaugeDistributionResult.from_info(
                info,
                GaugeStatus.FAILED,
                collateralId=collateral_ids.get(info.token),
                reason=f"{type(e).__name__}: {e}",
            )

        if result.status == GaugeStatus.DISTRIBUTED:
            utils.log(
                conf,
                f"✅ Allocated {result.totalAllocated} to {len(result.distributions)} trove(s)",
            )
        else:
            utils.log(conf, f"⏭  Gauge {info.gauge} {result.status.value}: {result.reason}")
        results.append(result)

    report = DistributionReport(generatedAt=now, results=results)
    utils.log(
        conf,
        f"🚀 Distribution calculation complete, {report.total_troves} trove(s), "
        f"{report.total_allocated} allocated",
    )
    return report
