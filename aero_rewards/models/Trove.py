from __future__ import annotations
from enum import Enum
from typing import Optional

from pydantic import BaseModel, validator
import eth_utils as eth

from aero_rewards.models.types import CollateralId, EthereumAddress, TroveId, non_negative


class TroveStatus(str, Enum):
    """
    :state ACTIVE: the trove is open, `closedAt` is not set
    :state CLOSED: closed by the borrower
    :state LIQUIDATED: closed by a liquidation
    :state REDEEMED: fully redeemed against
    """

    ACTIVE = "active"
    CLOSED = "closed"
    LIQUIDATED = "liquidated"
    REDEEMED = "redeemed"


class CollateralRef(BaseModel):
    """The collateral branch index, as nested by the subgraph: `collateral { id }`"""

    id: CollateralId


class Trove(BaseModel):
    """
    A borrower's collateralized debt position, as last indexed.
    :param `id`: composite "collIndex:troveId"
    :param `deposit`: current collateral size
    :param `closedAt`: set once when the trove leaves the active status, None while open
    """

    id: TroveId
    borrower: EthereumAddress
    collateral: CollateralRef
    deposit: int
    createdAt: int
    closedAt: Optional[int] = None
    updatedAt: Optional[int] = None
    status: TroveStatus

    @validator("borrower")
    @classmethod
    def checksum_borrower(cls, addr: EthereumAddress):
        return eth.to_checksum_address(addr)

    @validator("deposit", "createdAt", "closedAt", "updatedAt")
    @classmethod
    def unsigned_fields(cls, value: Optional[int]):
        return non_negative(value)

    @property
    def collateral_id(self) -> CollateralId:
        return self.collateral.id

    @property
    def is_open(self) -> bool:
        return self.closedAt is None


class CollateralSnapshot(BaseModel):
    """Collateral size of a trove right after an event that changed it"""

    troveId: TroveId
    deposit: int
    timestamp: int

    @validator("deposit", "timestamp")
    @classmethod
    def unsigned_fields(cls, value: int):
        return non_negative(value)
