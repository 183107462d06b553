import pytest
from pydantic import ValidationError

from aero_rewards.models import (
    AeroClaim,
    AeroDistribution,
    CollateralSnapshot,
    DistributionPeriod,
    Trove,
    TroveCollateralTWA,
)

GAUGE = "0x1111111111111111111111111111111111111111"
BORROWER = "0x9bc33f6155efacc290c3c50e9b5b24b668562732"


def claim_row(**overrides) -> dict:
    return {
        "id": "0x02:0",
        "gauge": GAUGE,
        "total": "500",
        "claimFee": "50",
        "epoch": "3",
        "blockNumber": "150",
        "timestamp": "1500",
        "transactionHash": "0x02",
        **overrides,
    }


def trove_row(**overrides) -> dict:
    return {
        "id": "0:1",
        "borrower": BORROWER,
        "collateral": {"id": "0"},
        "deposit": "100",
        "createdAt": "500",
        "closedAt": None,
        "status": "active",
        **overrides,
    }


def test_claim_net_excludes_fee():
    assert AeroClaim.parse_obj(claim_row()).net == 450


@pytest.mark.parametrize(
    "field", ["total", "claimFee", "epoch", "blockNumber", "timestamp"]
)
def test_claim_rejects_negative_values(field):
    with pytest.raises(ValidationError):
        AeroClaim.parse_obj(claim_row(**{field: "-1"}))


def test_claim_fee_cannot_exceed_total():
    with pytest.raises(ValidationError):
        AeroClaim.parse_obj(claim_row(total="10", claimFee="50"))


def test_distribution_rejects_negative_epoch():
    with pytest.raises(ValidationError):
        AeroDistribution(
            id="0x01:0",
            gauge=GAUGE,
            recipients=3,
            totalRewardAmount=100,
            epoch=-1,
            blockNumber=1,
            timestamp=1,
            transactionHash="0x01",
        )


@pytest.mark.parametrize(
    "overrides",
    [{"deposit": "-5"}, {"createdAt": "-1"}, {"closedAt": "-1", "status": "closed"}],
)
def test_trove_rejects_negative_values(overrides):
    with pytest.raises(ValidationError):
        Trove.parse_obj(trove_row(**overrides))


def test_open_trove_has_no_close_time():
    trove = Trove.parse_obj(trove_row())

    assert trove.closedAt is None
    assert trove.is_open


@pytest.mark.parametrize("deposit, timestamp", [("-5", "1000"), ("5", "-1")])
def test_snapshot_rejects_negative_values(deposit, timestamp):
    with pytest.raises(ValidationError):
        CollateralSnapshot(troveId="0:1", deposit=deposit, timestamp=timestamp)


@pytest.mark.parametrize("average, active_time", [(-1, 1000), (100, -1)])
def test_twa_rejects_negative_values(average, active_time):
    with pytest.raises(ValidationError):
        TroveCollateralTWA(
            troveId="0:1",
            borrower=BORROWER,
            collateralId="0",
            timeWeightedAverage=average,
            activeTime=active_time,
        )


def test_period_rejects_negative_start():
    with pytest.raises(ValidationError):
        DistributionPeriod(startTimestamp=-10, endTimestamp=100)
