from aero_rewards import utils
from aero_rewards.models import (
    AeroClaim,
    AeroDistribution,
    AeroGauge,
    Config,
    DistributionPeriod,
    EthereumAddress,
    EventSource,
    GaugeDistributionInfo,
)
from aero_rewards.queries import (
    gauges_from_stakes,
    get_aero_gauges,
    get_claimed_events,
    get_claimed_events_onchain,
    get_distributed_events,
    get_distributed_events_onchain,
    get_latest_block_timestamp,
    get_latest_indexed_timestamp,
    get_staked_events_onchain,
)

"""
Each gauge is distributed one epoch at a time. The AeroManager emits `AeroDistributed` with the
epoch it paid out, and every `Claimed` event is tagged with the epoch it belongs to, so:

- the epoch to allocate is one past the highest distributed epoch
- its accounting period runs from that last distribution to now
- only claims tagged with exactly that epoch are allocated, anything else waits for (or missed) its own epoch
"""

# a gauge that was never distributed accrues from the beginning of time
ORIGIN_TIMESTAMP = 0


def latest_distribution_per_gauge(
    distributions: list[AeroDistribution],
) -> dict[EthereumAddress, AeroDistribution]:
    """
    Highest epoch distribution event per gauge.
    Epochs should be unique per gauge. If they are not, the first event seen (lowest cursor) wins, see `duplicate_latest_epochs`.
    """
    latest: dict[EthereumAddress, AeroDistribution] = {}
    for event in distributions:
        current = latest.get(event.gauge)
        if current is None or event.epoch > current.epoch:
            latest[event.gauge] = event
    return latest


def duplicate_latest_epochs(
    distributions: list[AeroDistribution],
) -> dict[EthereumAddress, int]:
    """Gauges whose highest epoch was distributed more than once, with that epoch"""
    latest = latest_distribution_per_gauge(distributions)
    duplicates: dict[EthereumAddress, int] = {}
    for event in distributions:
        kept = latest[event.gauge]
        if event is not kept and event.epoch == kept.epoch:
            duplicates[event.gauge] = kept.epoch
    return duplicates


def total_rewards_for_epoch(
    claims: list[AeroClaim], gauge: EthereumAddress, epoch: int
) -> int:
    """Sum of claims for `gauge` at `epoch`, the fee is excluded"""
    return sum(c.net for c in claims if c.gauge == gauge and c.epoch == epoch)


def build_gauge_info(
    gauges: list[AeroGauge],
    distributions: list[AeroDistribution],
    claims: list[AeroClaim],
    current_timestamp: int,
) -> list[GaugeDistributionInfo]:
    """
    Build per-gauge distribution info based on epoch data.
    For each gauge:
    - start timestamp = timestamp of the latest distribution event for that gauge, or the origin
    - end timestamp = `current_timestamp`
    - total rewards = sum of claims where gauge matches AND epoch = latest distributed epoch + 1
    """
    latest = latest_distribution_per_gauge(distributions)

    infos = []
    for g in gauges:
        distributed = latest.get(g.gauge)
        latest_epoch = distributed.epoch if distributed else 0
        claim_epoch = latest_epoch + 1
        start = distributed.timestamp if distributed else ORIGIN_TIMESTAMP

        infos.append(
            GaugeDistributionInfo(
                gauge=g.gauge,
                token=g.token,
                period=DistributionPeriod(
                    startTimestamp=start,
                    # a distribution indexed after `current_timestamp` leaves an empty period
                    endTimestamp=max(current_timestamp, start),
                ),
                latestDistributedEpoch=latest_epoch,
                claimEpoch=claim_epoch,
                totalRewards=total_rewards_for_epoch(claims, g.gauge, claim_epoch),
            )
        )
    return infos


def get_aero_events(
    conf: Config,
) -> tuple[list[AeroGauge], list[AeroDistribution], list[AeroClaim]]:
    """Gauges, distributions and claims from whichever source the config points at"""
    if conf.event_source == EventSource.RPC:
        return (
            gauges_from_stakes(get_staked_events_onchain(conf)),
            get_distributed_events_onchain(conf),
            get_claimed_events_onchain(conf),
        )
    return (
        get_aero_gauges(conf),
        get_distributed_events(conf),
        get_claimed_events(conf),
    )


def get_current_timestamp(conf: Config) -> int:
    """
    Latest block time known to the event source. For the subgraph that's the last indexed
    AeroManager entity, falling back to the chain head if nothing is indexed yet.
    """
    if conf.event_source == EventSource.SUBGRAPH:
        indexed = get_latest_indexed_timestamp(conf)
        if indexed > 0:
            return indexed
    return get_latest_block_timestamp(conf)


def get_gauge_distribution_info(
    conf: Config, current_timestamp: int
) -> list[GaugeDistributionInfo]:
    gauges, distributions, claims = get_aero_events(conf)
    if len(gauges) == 0:
        return []
    for gauge, epoch in duplicate_latest_epochs(distributions).items():
        utils.log(
            conf,
            f"⚠️  Gauge {gauge} has more than one distribution for epoch {epoch}, keeping the first",
        )
    return build_gauge_info(gauges, distributions, claims, current_timestamp)
