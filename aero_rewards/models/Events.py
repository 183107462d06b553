from __future__ import annotations

from pydantic import BaseModel, validator
import eth_utils as eth

from aero_rewards.models.types import EthereumAddress, non_negative


class GaugeEntity(BaseModel):
    """Base class for anything emitted by the AeroManager for a particular gauge"""

    gauge: EthereumAddress

    @validator("gauge")
    @classmethod
    def checksum_gauge(cls, addr: EthereumAddress):
        return eth.to_checksum_address(addr)


class AeroGauge(GaugeEntity):
    """
    A gauge and the LP token staked into it. The token is also the collateral token
    of exactly one branch of the protocol.
    """

    token: EthereumAddress

    @validator("token")
    @classmethod
    def checksum_token(cls, addr: EthereumAddress):
        return eth.to_checksum_address(addr)


class AeroEvent(GaugeEntity):
    """
    Fields shared by indexed AeroManager events.
    :param `id`: opaque cursor assigned by the indexer, "txHash:logIndex"
    """

    id: str
    blockNumber: int
    timestamp: int
    transactionHash: str

    @validator("blockNumber", "timestamp")
    @classmethod
    def unsigned_block_and_time(cls, value: int):
        return non_negative(value)


class AeroStake(AeroEvent):
    token: EthereumAddress
    amount: int

    @validator("token")
    @classmethod
    def checksum_token(cls, addr: EthereumAddress):
        return eth.to_checksum_address(addr)

    @validator("amount")
    @classmethod
    def unsigned_amount(cls, value: int):
        return non_negative(value)


class AeroClaim(AeroEvent):
    """
    Rewards claimed from a gauge. `total` includes the protocol fee.
    """

    total: int
    claimFee: int
    epoch: int

    @validator("total", "epoch")
    @classmethod
    def unsigned_amounts(cls, value: int):
        return non_negative(value)

    @validator("claimFee")
    @classmethod
    def fee_within_total(cls, fee: int, values):
        non_negative(fee)
        total = values.get("total")
        if total is not None and fee > total:
            raise ValueError(f"Claim fee {fee} exceeds claimed total {total}")
        return fee

    @property
    def net(self) -> int:
        """Amount available for distribution, excluding the claim fee"""
        return self.total - self.claimFee


class AeroDistribution(AeroEvent):
    """Rewards for a gauge & epoch were already paid out to `recipients` troves"""

    recipients: int
    totalRewardAmount: int
    epoch: int

    @validator("recipients", "totalRewardAmount", "epoch")
    @classmethod
    def unsigned_amounts(cls, value: int):
        return non_negative(value)
