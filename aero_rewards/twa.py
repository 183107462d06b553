from aero_rewards.models import (
    CollateralSnapshot,
    Config,
    DistributionPeriod,
    Trove,
    TroveCollateralTWA,
)
from aero_rewards.queries import get_snapshots_for_troves


def active_window(trove: Trove, period: DistributionPeriod) -> tuple[int, int]:
    """The part of the period the trove existed in, may be empty (start >= end)"""
    start = max(trove.createdAt, period.startTimestamp)
    closed = trove.closedAt if trove.closedAt is not None else period.endTimestamp
    end = min(closed, period.endTimestamp)
    return start, end


def _twa(trove: Trove, average: int, active_time: int) -> TroveCollateralTWA:
    return TroveCollateralTWA(
        troveId=trove.id,
        borrower=trove.borrower,
        collateralId=trove.collateral_id,
        timeWeightedAverage=average,
        activeTime=active_time,
    )


def calculate_twa(
    trove: Trove, snapshots: list[CollateralSnapshot], period: DistributionPeriod
) -> TroveCollateralTWA:
    """
    Time-weighted average *deposit size* for a single trove over the period.

    TWA(deposit) = sum(deposit * time_held) // active_time_in_period

    The deposit at the start of the window is taken to be the first snapshot's deposit.
    With no snapshot inside the window the current deposit is assumed to have been held throughout.

    :param `trove`: the trove to calculate TWA for
    :param `snapshots`: collateral snapshots of this trove, sorted by timestamp ascending
    :param `period`: the distribution period
    """
    start, end = active_window(trove, period)

    # trove wasn't active during the period
    if start >= end:
        return _twa(trove, 0, 0)

    active_time = end - start
    relevant = [s for s in snapshots if start <= s.timestamp <= end]

    if len(relevant) == 0:
        return _twa(trove, trove.deposit, active_time)

    weighted_sum = 0
    last_timestamp = start
    last_deposit = relevant[0].deposit

    for snapshot in relevant:
        # same second as the previous change: last one wins
        if snapshot.timestamp <= last_timestamp:
            last_deposit = snapshot.deposit
            continue
        weighted_sum += last_deposit * (snapshot.timestamp - last_timestamp)
        last_timestamp = snapshot.timestamp
        last_deposit = snapshot.deposit

    # tail segment until the end of the window
    if last_timestamp < end:
        weighted_sum += last_deposit * (end - last_timestamp)

    return _twa(trove, weighted_sum // active_time, active_time)


def calculate_twa_for_troves(
    conf: Config, troves: list[Trove], period: DistributionPeriod
) -> list[TroveCollateralTWA]:
    """Fetch the snapshot history of every trove then compute each TWA, in input order"""
    snapshots = get_snapshots_for_troves(conf, [t.id for t in troves], period)
    return [calculate_twa(t, snapshots.get(t.id, []), period) for t in troves]
