from typing import Literal, Any, Optional

# type aliases for clarity
EthereumAddress = str
CollateralId = str
TroveId = str
GraphQL_Response = dict[Literal["data", "errors"], Any]


def non_negative(value: Optional[int]) -> Optional[int]:
    """Amounts, epochs and timestamps are unsigned on chain"""
    if value is not None and value < 0:
        raise ValueError(f"Expected a non-negative integer, got {value}")
    return value
