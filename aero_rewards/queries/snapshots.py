from aero_rewards.models import CollateralSnapshot, Config, DistributionPeriod, TroveId
from aero_rewards.queries.common import iterate_subgraph


def chunk(ls: list, size: int) -> list[list]:
    return [ls[i : i + size] for i in range(0, len(ls), size)]


def to_snapshot(row: dict) -> CollateralSnapshot:
    return CollateralSnapshot(
        troveId=row["trove"]["id"],
        deposit=row["deposit"],
        timestamp=row["timestamp"],
    )


def get_snapshot_rows(
    conf: Config, trove_ids: list[TroveId], period: DistributionPeriod
) -> list[dict]:
    """
    Raw TroveSnapshot rows for a batch of troves, both period bounds inclusive
    so a change landing exactly on the period end is still seen.
    """
    query = """
    query TroveSnapshots($troveIds: [String!]!, $start: BigInt!, $end: BigInt!, $cursor: ID!, $limit: Int!) {
      troveSnapshots(
        where: { trove_in: $troveIds, timestamp_gte: $start, timestamp_lte: $end, id_gt: $cursor }
        orderBy: id
        orderDirection: asc
        first: $limit
      ) {
        id
        trove { id }
        deposit
        timestamp
      }
    }
    """
    variables = {
        "troveIds": trove_ids,
        "start": str(period.startTimestamp),
        "end": str(period.endTimestamp),
    }
    return iterate_subgraph(conf, ["troveSnapshots"], query, variables)


def get_snapshots_for_troves(
    conf: Config, trove_ids: list[TroveId], period: DistributionPeriod
) -> dict[TroveId, list[CollateralSnapshot]]:
    """
    Fetch every collateral snapshot inside the period for the given troves.
    The `trove_in` filter is split into batches to keep requests small.
    Every requested trove has an entry, snapshots are sorted by timestamp ascending
    and ties keep cursor (id) order.
    """
    by_trove: dict[TroveId, list[CollateralSnapshot]] = {id: [] for id in trove_ids}

    for batch in chunk(trove_ids, conf.snapshot_batch_size):
        for row in get_snapshot_rows(conf, batch, period):
            snapshot = to_snapshot(row)
            if snapshot.troveId in by_trove:
                by_trove[snapshot.troveId].append(snapshot)

    for snapshots in by_trove.values():
        # list.sort is stable
        snapshots.sort(key=lambda s: s.timestamp)

    return by_trove
