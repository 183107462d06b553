from typing import Optional

from aero_rewards.env import ENV_KEYS, env_var, env_var_or_default
from aero_rewards.models import (
    Config,
    DEFAULT_DISTRIBUTION_PERIOD_SECONDS,
    EventSource,
    SUBGRAPH_QUERY_LIMIT,
)


def load_conf(**overrides) -> Config:
    """
    Build the run config from the environment (and `.env`).
    Missing required variables raise `MissingEnvironmentVariableException`
    before anything touches the network.

    :param `overrides`: any `Config` field, takes precedence over the environment
    """
    period: Optional[str] = env_var_or_default(
        ENV_KEYS.DISTRIBUTION_PERIOD_SECONDS, str(DEFAULT_DISTRIBUTION_PERIOD_SECONDS)
    )
    values = {
        "rpc_url": env_var(ENV_KEYS.RPC_URL),
        "subgraph_url": env_var(ENV_KEYS.SUBGRAPH_URL),
        "aero_manager_address": env_var(ENV_KEYS.AERO_MANAGER_ADDRESS),
        "distribution_period_seconds": period,
        "start_block": env_var_or_default(ENV_KEYS.START_BLOCK, "0"),
        "page_size": env_var_or_default(ENV_KEYS.PAGE_SIZE, str(SUBGRAPH_QUERY_LIMIT)),
        "request_timeout": env_var_or_default(ENV_KEYS.REQUEST_TIMEOUT, "30"),
        "event_source": env_var_or_default(
            ENV_KEYS.EVENT_SOURCE, EventSource.SUBGRAPH.value
        ),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Config(**values)
