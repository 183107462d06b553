from unittest.mock import Mock

from eth_utils import to_checksum_address
from web3 import Web3

from aero_rewards.models import AeroClaim, AeroStake
from aero_rewards.queries import (
    block_ranges,
    get_claimed_events_onchain,
    get_latest_block_timestamp,
    get_staked_events_onchain,
)

GAUGE = "0x1111111111111111111111111111111111111111"
TOKEN = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
TX_HASH = bytes.fromhex("ab" * 32)


def decoded_log(args: dict, block: int, log_index: int) -> dict:
    return {
        "args": args,
        "blockNumber": block,
        "logIndex": log_index,
        "transactionHash": TX_HASH,
    }


def mock_w3(monkeypatch, event_name: str, logs: list[dict], head: int = 15000) -> Mock:
    w3 = Mock()
    w3.eth.block_number = head
    w3.eth.get_block = Mock(return_value={"timestamp": 1234})
    # every log is "found" in the first range only
    w3.eth.get_logs = Mock(
        side_effect=lambda f: list(logs) if f["fromBlock"] == 0 else []
    )
    event = getattr(w3.eth.contract.return_value.events, event_name).return_value
    event.process_log = Mock(side_effect=lambda log: log)

    monkeypatch.setattr("aero_rewards.queries.chain.w3_from_conf", lambda conf: w3)
    return w3


def test_block_ranges():
    assert block_ranges(0, 25, size=10) == [(0, 9), (10, 19), (20, 25)]
    assert block_ranges(5, 5, size=10) == [(5, 5)]
    assert block_ranges(10, 5) == []


def test_claimed_events_onchain(config, monkeypatch):
    logs = [
        decoded_log({"gauge": GAUGE, "total": 500, "claimFee": 50, "epoch": 3}, 12, 0),
        decoded_log({"gauge": GAUGE, "total": 100, "claimFee": 10, "epoch": 3}, 12, 1),
    ]
    w3 = mock_w3(monkeypatch, "Claimed", logs)

    claims = get_claimed_events_onchain(config)

    assert all(isinstance(c, AeroClaim) for c in claims)
    assert [c.net for c in claims] == [450, 90]
    assert claims[0].gauge == to_checksum_address(GAUGE)
    assert claims[0].id == f"{Web3.to_hex(TX_HASH)}:0"
    assert claims[0].timestamp == 1234
    # two block ranges up to the head, one timestamp lookup for the shared block
    assert w3.eth.get_logs.call_count == 2
    assert w3.eth.get_block.call_count == 1


def test_logs_scanned_from_start_block(config, monkeypatch):
    config.start_block = 10
    w3 = mock_w3(monkeypatch, "Staked", [], head=20)

    get_staked_events_onchain(config)

    (filter_params,), _ = w3.eth.get_logs.call_args
    assert filter_params["fromBlock"] == 10
    assert filter_params["toBlock"] == 20
    assert filter_params["address"] == config.aero_manager_address
    assert filter_params["topics"] == [
        Web3.keccak(text="Staked(address,address,uint256)")
    ]


def test_staked_events_onchain(config, monkeypatch):
    logs = [decoded_log({"gauge": GAUGE, "token": TOKEN, "amount": 10**24}, 3, 7)]
    mock_w3(monkeypatch, "Staked", logs)

    stakes = get_staked_events_onchain(config, to_block=100)

    assert stakes == [
        AeroStake(
            id=f"{Web3.to_hex(TX_HASH)}:7",
            gauge=GAUGE,
            token=TOKEN,
            amount=10**24,
            blockNumber=3,
            timestamp=1234,
            transactionHash=Web3.to_hex(TX_HASH),
        )
    ]


def test_latest_block_timestamp(config, monkeypatch):
    w3 = mock_w3(monkeypatch, "Claimed", [])

    assert get_latest_block_timestamp(config) == 1234
    w3.eth.get_block.assert_called_once_with("latest")
