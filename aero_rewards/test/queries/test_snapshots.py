from aero_rewards.models import CollateralSnapshot, DistributionPeriod
from aero_rewards.queries import chunk, get_snapshots_for_troves

PERIOD = DistributionPeriod(startTimestamp=1000, endTimestamp=2000)


def test_chunk():
    assert chunk([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
    assert chunk([], 2) == []


def test_snapshots_grouped_by_trove(config, subgraph):
    snapshots = get_snapshots_for_troves(config, ["0:1", "0:2", "0:3"], PERIOD)

    assert snapshots["0:1"] == [
        CollateralSnapshot(troveId="0:1", deposit=100, timestamp=1000),
        CollateralSnapshot(troveId="0:1", deposit=300, timestamp=1500),
    ]
    # requested but never changed
    assert snapshots["0:2"] == []
    assert [s.deposit for s in snapshots["0:3"]] == [400, 0]


def test_snapshots_outside_period_are_not_fetched(config, subgraph):
    snapshots = get_snapshots_for_troves(config, ["0:4"], PERIOD)

    assert snapshots == {"0:4": []}


def test_snapshots_are_batched_by_trove(config, subgraph):
    config.snapshot_batch_size = 2

    get_snapshots_for_troves(config, ["0:1", "0:2", "0:3"], PERIOD)

    batches = [v["troveIds"] for op, v in subgraph.calls if op == "TroveSnapshots"]
    assert batches == [["0:1", "0:2"], ["0:3"]]


def test_snapshots_sorted_by_timestamp(config, subgraph):
    # ids don't follow time order
    subgraph.entities["troveSnapshots"] = [
        {"id": "a", "trove": {"id": "0:1"}, "deposit": "3", "timestamp": "1300"},
        {"id": "b", "trove": {"id": "0:1"}, "deposit": "1", "timestamp": "1100"},
        {"id": "c", "trove": {"id": "0:1"}, "deposit": "2", "timestamp": "1100"},
    ]

    snapshots = get_snapshots_for_troves(config, ["0:1"], PERIOD)

    # ties keep cursor order
    assert [s.deposit for s in snapshots["0:1"]] == [1, 2, 3]
