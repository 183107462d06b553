import os
from typing import Optional

from dotenv import load_dotenv
from aero_rewards.errors import MissingEnvironmentVariableException

load_dotenv()


def env_var(accessor: str) -> str:
    """
    Attempt to fetch an environment variable and throw
    an error if not found
    """
    var = os.environ.get(accessor)
    if not var:
        raise MissingEnvironmentVariableException(accessor)
    return var


def env_var_or_default(accessor: str, default: Optional[str]) -> Optional[str]:
    return os.environ.get(accessor) or default


class ENV_KEYS:
    RPC_URL = "RPC_URL"
    SUBGRAPH_URL = "SUBGRAPH_URL"
    AERO_MANAGER_ADDRESS = "AERO_MANAGER_ADDRESS"
    DISTRIBUTION_PERIOD_SECONDS = "DISTRIBUTION_PERIOD_SECONDS"
    START_BLOCK = "START_BLOCK"
    PAGE_SIZE = "SUBGRAPH_PAGE_SIZE"
    REQUEST_TIMEOUT = "REQUEST_TIMEOUT"
    EVENT_SOURCE = "EVENT_SOURCE"
