from typing import Any, Optional

from pydantic import parse_obj_as

from aero_rewards.models import (
    AeroClaim,
    AeroDistribution,
    AeroGauge,
    AeroStake,
    Config,
    DistributionPeriod,
)
from aero_rewards.queries.common import graphql_query, iterate_subgraph, period_variables

"""
Entities indexed from the AeroManager contract. Every event is keyed by "txHash:logIndex",
which is what we paginate on.
"""


def get_staked_events(
    conf: Config, period: Optional[DistributionPeriod] = None
) -> list[AeroStake]:
    query = """
    query AeroStakes($cursor: ID!, $limit: Int!, $start: BigInt, $end: BigInt) {
      aeroStakes(
        where: { id_gt: $cursor, timestamp_gte: $start, timestamp_lt: $end }
        orderBy: id
        orderDirection: asc
        first: $limit
      ) {
        id
        gauge
        token
        amount
        blockNumber
        timestamp
        transactionHash
      }
    }
    """
    rows = iterate_subgraph(conf, ["aeroStakes"], query, period_variables(period))
    return parse_obj_as(list[AeroStake], rows)


def get_claimed_events(
    conf: Config, period: Optional[DistributionPeriod] = None
) -> list[AeroClaim]:
    query = """
    query AeroClaims($cursor: ID!, $limit: Int!, $start: BigInt, $end: BigInt) {
      aeroClaims(
        where: { id_gt: $cursor, timestamp_gte: $start, timestamp_lt: $end }
        orderBy: id
        orderDirection: asc
        first: $limit
      ) {
        id
        gauge
        total
        claimFee
        epoch
        blockNumber
        timestamp
        transactionHash
      }
    }
    """
    rows = iterate_subgraph(conf, ["aeroClaims"], query, period_variables(period))
    return parse_obj_as(list[AeroClaim], rows)


def get_distributed_events(
    conf: Config, period: Optional[DistributionPeriod] = None
) -> list[AeroDistribution]:
    query = """
    query AeroDistributions($cursor: ID!, $limit: Int!, $start: BigInt, $end: BigInt) {
      aeroDistributions(
        where: { id_gt: $cursor, timestamp_gte: $start, timestamp_lt: $end }
        orderBy: id
        orderDirection: asc
        first: $limit
      ) {
        id
        gauge
        recipients
        totalRewardAmount
        epoch
        blockNumber
        timestamp
        transactionHash
      }
    }
    """
    rows = iterate_subgraph(
        conf, ["aeroDistributions"], query, period_variables(period)
    )
    return parse_obj_as(list[AeroDistribution], rows)


def get_aero_gauges(conf: Config) -> list[AeroGauge]:
    """
    Gauges registered with the AeroManager along with the LP token they stake.
    These tokens are the collaterals that qualify for AERO rewards.
    """
    query = """
    query AeroGauges($cursor: ID!, $limit: Int!) {
      aeroGauges(
        where: { id_gt: $cursor }
        orderBy: id
        orderDirection: asc
        first: $limit
      ) {
        id
        gauge
        token
      }
    }
    """
    rows = iterate_subgraph(conf, ["aeroGauges"], query, {})
    return parse_obj_as(list[AeroGauge], rows)


def gauges_from_stakes(stakes: list[AeroStake]) -> list[AeroGauge]:
    """
    Unique gauge -> token pairs from Staked events, in order of first stake.
    Used where the gauge registry isn't indexed, eg: when reading logs over RPC.
    """
    gauges: dict[str, AeroGauge] = {}
    for stake in stakes:
        if stake.gauge not in gauges:
            gauges[stake.gauge] = AeroGauge(gauge=stake.gauge, token=stake.token)
    return list(gauges.values())


def _first_timestamp(rows: list[Any]) -> int:
    return int(rows[0]["timestamp"]) if len(rows) > 0 else 0


def get_latest_indexed_timestamp(conf: Config) -> int:
    """
    The most recent block time seen by the subgraph across all AeroManager entities.
    This is the last indexed block, not necessarily the chain head. Returns 0 if nothing is indexed.
    """
    query = """
    query LatestAeroTimestamps {
      aeroClaims(first: 1, orderBy: timestamp, orderDirection: desc) { timestamp }
      aeroStakes(first: 1, orderBy: timestamp, orderDirection: desc) { timestamp }
      aeroDistributions(first: 1, orderBy: timestamp, orderDirection: desc) { timestamp }
    }
    """
    response = graphql_query(
        conf.subgraph_url, dict(query=query, variables={}), conf.request_timeout
    )
    data = response["data"]
    return max(
        _first_timestamp(data["aeroClaims"]),
        _first_timestamp(data["aeroStakes"]),
        _first_timestamp(data["aeroDistributions"]),
    )
