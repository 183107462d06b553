import json
import os
import re
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import pytest

from aero_rewards.models import Config

STUBS = os.path.join(os.path.dirname(__file__), "stubs")

AERO_MANAGER = "0x7Ac54A0406FA2B465E0D57C66597BE83A4b149fC"


@pytest.fixture
def config() -> Config:
    return Config(
        rpc_url="http://localhost:8545",
        subgraph_url="https://subgraph.example.com",
        aero_manager_address=AERO_MANAGER,
        verbose=False,
    )


@pytest.fixture()
def ADDRESSES():
    return [
        "0x9bc33f6155eFAcc290c3C50E9B5b24b668562732",
        "0xfDe38ad4bBbeC867e6cb4Bb31FbFB2074c959A83",
        "0x8BB4C0b502f869af3B25166930507a6E8c3038D4",
        "0x7Ac54A0406FA2B465E0D57C66597BE83A4b149fC",
        "0xdeA708968f8dd520f5e2F0aB6785F28c98521ca8",
    ]


@dataclass
class MockResponse:
    res: Any

    def json(self):
        return self.res

    def raise_for_status(self):
        pass


def load_stub(name: str) -> dict[str, Any]:
    with open(os.path.join(STUBS, name)) as j:
        return json.load(j)


def _in_window(row, start: Optional[str], end: Optional[str], end_inclusive=False) -> bool:
    ts = int(row["timestamp"])
    if start is not None and ts < int(start):
        return False
    if end is not None:
        return ts <= int(end) if end_inclusive else ts < int(end)
    return True


@dataclass
class FakeSubgraph:
    """
    Serves the stub entities the way a subgraph would: applies the `where` filters
    each query uses, orders by id and pages on `$cursor` / `$limit`.
    """

    entities: dict[str, list[dict[str, Any]]]
    calls: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    def filters(self) -> dict[str, tuple[str, Callable[[dict, dict], bool]]]:
        return {
            "AeroGauges": ("aeroGauges", lambda r, v: True),
            "AeroStakes": ("aeroStakes", lambda r, v: _in_window(r, v["start"], v["end"])),
            "AeroClaims": ("aeroClaims", lambda r, v: _in_window(r, v["start"], v["end"])),
            "AeroDistributions": (
                "aeroDistributions",
                lambda r, v: _in_window(r, v["start"], v["end"]),
            ),
            "CollateralsByToken": (
                "collateralAddresses",
                lambda r, v: r["token"] in v["tokens"],
            ),
            "ActiveTroves": (
                "troves",
                lambda r, v: r["status"] == "active"
                and r["collateral"]["id"] in v["collateralIds"]
                and int(r["createdAt"]) < int(v["periodEnd"]),
            ),
            "ClosedTroves": (
                "troves",
                lambda r, v: r["status"] != "active"
                and r["collateral"]["id"] in v["collateralIds"]
                and int(r["createdAt"]) < int(v["periodEnd"])
                and int(r["closedAt"]) > int(v["periodStart"]),
            ),
            "TroveSnapshots": (
                "troveSnapshots",
                lambda r, v: r["trove"]["id"] in v["troveIds"]
                and _in_window(r, v["start"], v["end"], end_inclusive=True),
            ),
        }

    def latest_timestamps(self) -> dict[str, Any]:
        def newest(key):
            rows = sorted(self.entities.get(key, []), key=lambda r: -int(r["timestamp"]))
            return [{"timestamp": r["timestamp"]} for r in rows[:1]]

        return {k: newest(k) for k in ["aeroClaims", "aeroStakes", "aeroDistributions"]}

    def __call__(self, url, json=None, timeout=None) -> MockResponse:
        query, variables = json["query"], deepcopy(json.get("variables", {}))
        operation = re.search(r"query\s+(\w+)", query).group(1)
        self.calls.append((operation, variables))

        if operation == "LatestAeroTimestamps":
            return MockResponse({"data": self.latest_timestamps()})

        key, keep = self.filters()[operation]
        rows = sorted(
            (r for r in self.entities.get(key, []) if keep(r, variables)),
            key=lambda r: r["id"],
        )
        page = [r for r in rows if r["id"] > variables["cursor"]][: variables["limit"]]
        return MockResponse({"data": {key: deepcopy(page)}})

    def operations(self) -> list[str]:
        return [op for op, _ in self.calls]


@pytest.fixture
def subgraph(monkeypatch) -> FakeSubgraph:
    fake = FakeSubgraph(load_stub("subgraph.json"))
    monkeypatch.setattr("aero_rewards.queries.common.requests.post", fake)
    return fake

