from aero_rewards.models import (
    BorrowerDistribution,
    EthereumAddress,
    TroveCollateralTWA,
    TroveDistribution,
)


def trove_weight(twa: TroveCollateralTWA) -> int:
    """Collateral-seconds: average collateral held multiplied by the time it was held"""
    return twa.timeWeightedAverage * twa.activeTime


def allocate_rewards(
    twa_results: list[TroveCollateralTWA], total_reward: int
) -> list[TroveDistribution]:
    """
    Split `total_reward` pro-rata to each trove's weight.

    Each share is floored on its own, so up to `len(twa_results) - 1` base units are left over.
    The remainder is not swept anywhere, see `undistributed`.
    If no trove has any weight nobody gets anything.

    :param `twa_results`: time weighted averages, output keeps this order
    :param `total_reward`: reward token base units to split
    """
    weights = [trove_weight(twa) for twa in twa_results]
    total_weight = sum(weights)

    return [
        TroveDistribution(
            **twa.dict(),
            weight=weight,
            rewardAmount=0 if total_weight == 0 else total_reward * weight // total_weight,
        )
        for twa, weight in zip(twa_results, weights)
    ]


def total_allocated(distributions: list[TroveDistribution]) -> int:
    return sum(d.rewardAmount for d in distributions)


def undistributed(distributions: list[TroveDistribution], total_reward: int) -> int:
    """Rounding remainder left over after allocation"""
    return total_reward - total_allocated(distributions)


def group_by_borrower(
    distributions: list[TroveDistribution],
) -> list[BorrowerDistribution]:
    """One entry per borrower across all their troves, ordered by first appearance"""
    by_borrower: dict[EthereumAddress, list[TroveDistribution]] = {}
    for d in distributions:
        by_borrower.setdefault(d.borrower, []).append(d)

    return [
        BorrowerDistribution(
            borrower=borrower,
            troves=troves,
            totalTimeWeightedCollateral=sum(t.timeWeightedAverage for t in troves),
            rewardAmount=total_allocated(troves),
        )
        for borrower, troves in by_borrower.items()
    ]
