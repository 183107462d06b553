import functools
from typing import Any, Callable, Optional, TypeVar

from web3 import Web3

from aero_rewards.models import AeroClaim, AeroDistribution, AeroStake, Config

"""
Alternate retrieval path reading AeroManager events straight from the node.
Slower than the subgraph but only depends on the RPC endpoint, so it's useful to
cross check what the indexer reports. Events are decoded into the same models,
with the indexer's "txHash:logIndex" id so both paths sort the same way.
"""

# many providers cap eth_getLogs ranges
LOG_BLOCK_RANGE = 10_000

AERO_MANAGER_ABI = [
    {
        "type": "event",
        "name": "Staked",
        "anonymous": False,
        "inputs": [
            {"name": "gauge", "type": "address", "indexed": True},
            {"name": "token", "type": "address", "indexed": False},
            {"name": "amount", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "event",
        "name": "Claimed",
        "anonymous": False,
        "inputs": [
            {"name": "gauge", "type": "address", "indexed": True},
            {"name": "total", "type": "uint256", "indexed": False},
            {"name": "claimFee", "type": "uint256", "indexed": False},
            {"name": "epoch", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "event",
        "name": "AeroDistributed",
        "anonymous": False,
        "inputs": [
            {"name": "gauge", "type": "address", "indexed": True},
            {"name": "recipients", "type": "uint256", "indexed": False},
            {"name": "totalRewardAmount", "type": "uint256", "indexed": False},
            {"name": "epoch", "type": "uint256", "indexed": False},
        ],
    },
]

EVENT_SIGNATURES = {
    "Staked": "Staked(address,address,uint256)",
    "Claimed": "Claimed(address,uint256,uint256,uint256)",
    "AeroDistributed": "AeroDistributed(address,uint256,uint256,uint256)",
}

T = TypeVar("T")


@functools.lru_cache(maxsize=None)
def get_w3(rpc_url: str, timeout: int = 30) -> Web3:
    return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))


def w3_from_conf(conf: Config) -> Web3:
    return get_w3(conf.rpc_url, conf.request_timeout)


def get_latest_block_timestamp(conf: Config) -> int:
    return int(w3_from_conf(conf).eth.get_block("latest")["timestamp"])


def block_ranges(start: int, end: int, size: int = LOG_BLOCK_RANGE) -> list[tuple[int, int]]:
    """Inclusive [from, to] ranges covering start..end"""
    return [(lo, min(lo + size - 1, end)) for lo in range(start, end + 1, size)]


def get_event_logs(
    conf: Config, event_name: str, to_block: Optional[int] = None
) -> list[Any]:
    """
    Fetch and decode every `event_name` log emitted by the AeroManager
    from `conf.start_block` up to `to_block` (defaults to the chain head)
    """
    w3 = w3_from_conf(conf)
    contract = w3.eth.contract(address=conf.aero_manager_address, abi=AERO_MANAGER_ABI)
    topic = Web3.keccak(text=EVENT_SIGNATURES[event_name])
    end = to_block if to_block is not None else w3.eth.block_number
    event = getattr(contract.events, event_name)()

    decoded = []
    for lo, hi in block_ranges(conf.start_block, end):
        logs = w3.eth.get_logs(
            {
                "address": conf.aero_manager_address,
                "topics": [topic],
                "fromBlock": lo,
                "toBlock": hi,
            }
        )
        decoded += [event.process_log(log) for log in logs]
    return decoded


def _to_model(
    conf: Config,
    logs: list[Any],
    build: Callable[..., T],
) -> list[T]:
    w3 = w3_from_conf(conf)

    # several events usually share a block
    @functools.lru_cache(maxsize=None)
    def block_timestamp(block_number: int) -> int:
        return int(w3.eth.get_block(block_number)["timestamp"])

    models = []
    for log in logs:
        tx_hash = Web3.to_hex(log["transactionHash"])
        models.append(
            build(
                id=f"{tx_hash}:{log['logIndex']}",
                blockNumber=log["blockNumber"],
                timestamp=block_timestamp(log["blockNumber"]),
                transactionHash=tx_hash,
                **dict(log["args"]),
            )
        )
    return models


def get_staked_events_onchain(conf: Config, to_block: Optional[int] = None) -> list[AeroStake]:
    return _to_model(conf, get_event_logs(conf, "Staked", to_block), AeroStake)


def get_claimed_events_onchain(conf: Config, to_block: Optional[int] = None) -> list[AeroClaim]:
    return _to_model(conf, get_event_logs(conf, "Claimed", to_block), AeroClaim)


def get_distributed_events_onchain(
    conf: Config, to_block: Optional[int] = None
) -> list[AeroDistribution]:
    return _to_model(
        conf, get_event_logs(conf, "AeroDistributed", to_block), AeroDistribution
    )
