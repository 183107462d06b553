from enum import Enum

from pydantic import BaseModel, validator
import eth_utils as eth

from aero_rewards.errors import BadConfigException
from aero_rewards.models.types import EthereumAddress

# 7 days
DEFAULT_DISTRIBUTION_PERIOD_SECONDS = 604800
SUBGRAPH_QUERY_LIMIT = 1000
TROVE_SNAPSHOT_BATCH_SIZE = 100


class EventSource(str, Enum):
    """
    :source SUBGRAPH: AeroManager events are read from the indexer
    :source RPC: AeroManager events are read from node logs, troves still come from the indexer
    """

    SUBGRAPH = "subgraph"
    RPC = "rpc"


class Config(BaseModel):
    """
    Parameters for a distribution run. These are opaque to the core and are
    usually built from environment variables by `aero_rewards.config.load_conf`

    :param `rpc_url`: JSON-RPC endpoint used for chain reads
    :param `subgraph_url`: GraphQL endpoint of the indexer
    :param `aero_manager_address`: the AeroManager contract emitting stake/claim/distribute events
    :param `distribution_period_seconds`: length of a rolling accounting period
    :param `start_block`: first block scanned when reading events over RPC
    :param `page_size`: rows per subgraph page, also the "no more pages" sentinel
    :param `snapshot_batch_size`: number of trove ids per snapshot query
    :param `request_timeout`: seconds before a single network call is abandoned
    :param `event_source`: where AeroManager events are read from
    :param `fail_fast`: abort the run on the first gauge failure instead of recording it
    :param `verbose`: print progress messages
    """

    rpc_url: str
    subgraph_url: str
    aero_manager_address: EthereumAddress
    distribution_period_seconds: int = DEFAULT_DISTRIBUTION_PERIOD_SECONDS
    start_block: int = 0
    page_size: int = SUBGRAPH_QUERY_LIMIT
    snapshot_batch_size: int = TROVE_SNAPSHOT_BATCH_SIZE
    request_timeout: int = 30
    event_source: EventSource = EventSource.SUBGRAPH
    fail_fast: bool = False
    verbose: bool = True

    @validator("aero_manager_address")
    @classmethod
    def checksum_manager(cls, addr: EthereumAddress):
        if not eth.is_address(addr):
            raise BadConfigException(f"Invalid AeroManager address {addr}")
        return eth.to_checksum_address(addr)

    @validator("distribution_period_seconds")
    @classmethod
    def validate_period_length(cls, seconds: int):
        if seconds <= 0:
            raise BadConfigException("Distribution period must be positive")
        return seconds

    @validator("start_block")
    @classmethod
    def validate_start_block(cls, block: int):
        if block < 0:
            raise BadConfigException("Start block cannot be negative")
        return block

    @validator("page_size", "snapshot_batch_size")
    @classmethod
    def validate_batch(cls, size: int):
        if size < 1 or size > SUBGRAPH_QUERY_LIMIT:
            raise BadConfigException(
                f"Batch size out of range, must be between 1 and {SUBGRAPH_QUERY_LIMIT}"
            )
        return size
