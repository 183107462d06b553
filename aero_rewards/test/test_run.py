import json
import os

import pytest

from aero_rewards import run
from aero_rewards.errors import BadConfigException
from aero_rewards.models import DistributionPeriod
from aero_rewards.run import resolve_period


def test_explicit_period(config):
    assert resolve_period(config, 10, 20, rolling=False) == DistributionPeriod(
        startTimestamp=10, endTimestamp=20
    )


def test_half_a_period_is_rejected(config):
    with pytest.raises(BadConfigException):
        resolve_period(config, 10, None, rolling=False)


def test_rolling_period(config):
    config.distribution_period_seconds = 100

    assert resolve_period(config, None, None, rolling=True, now=1000) == DistributionPeriod(
        startTimestamp=900, endTimestamp=1000
    )


def test_epoch_periods_by_default(config):
    assert resolve_period(config, None, None, rolling=False) is None


def test_main_writes_report(config, subgraph, monkeypatch, tmp_path):
    monkeypatch.setattr(run, "load_conf", lambda **overrides: config)

    path = run.main(out=str(tmp_path), quiet=True)

    assert path == f"{tmp_path}/2000"
    with open(f"{path}/json/summary.json") as f:
        summary = json.load(f)
    assert summary["totalAllocated"] == "1439"
    assert summary["distributed"] == "2"

    gauge = "0x1111111111111111111111111111111111111111"
    assert os.path.exists(f"{path}/csv/{gauge}-troves.csv")
    with open(f"{path}/json/{gauge}-borrowers.json") as f:
        borrowers = json.load(f)
    # 0:1 and 0:3 belong to the same borrower
    assert [b["rewardAmount"] for b in borrowers] == ["495", "44"]
    assert [b["troves"] for b in borrowers] == ["2", "1"]
    assert os.path.exists(f"{path}/reporter-db.json")
