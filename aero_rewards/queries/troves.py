from pydantic import parse_obj_as

from aero_rewards.models import (
    CollateralId,
    Config,
    DistributionPeriod,
    EthereumAddress,
    Trove,
)
from aero_rewards.queries.common import iterate_subgraph

"""
A trove counts towards a period if it existed at any point inside it.
The subgraph can't express "created before the end AND (open OR closed after the start)"
in a single `where`, so we ask for open and closed troves separately and concatenate.
A trove has exactly one status so the two sets never overlap.
"""

TROVE_FIELDS = """
    id
    borrower
    collateral { id }
    deposit
    createdAt
    closedAt
    updatedAt
    status
"""


def get_open_troves(
    conf: Config, collateral_ids: list[CollateralId], period: DistributionPeriod
) -> list[Trove]:
    """Troves still open that were created before the period ended"""
    query = f"""
    query ActiveTroves($collateralIds: [String!]!, $periodEnd: BigInt!, $cursor: ID!, $limit: Int!) {{
      troves(
        where: {{
          status: active
          collateral_in: $collateralIds
          createdAt_lt: $periodEnd
          id_gt: $cursor
        }}
        orderBy: id
        orderDirection: asc
        first: $limit
      ) {{{TROVE_FIELDS}}}
    }}
    """
    variables = {
        "collateralIds": collateral_ids,
        "periodEnd": str(period.endTimestamp),
    }
    rows = iterate_subgraph(conf, ["troves"], query, variables)
    return parse_obj_as(list[Trove], rows)


def get_troves_closed_in_period(
    conf: Config, collateral_ids: list[CollateralId], period: DistributionPeriod
) -> list[Trove]:
    """Closed, liquidated or redeemed troves that lived through part of the period"""
    query = f"""
    query ClosedTroves($collateralIds: [String!]!, $periodStart: BigInt!, $periodEnd: BigInt!, $cursor: ID!, $limit: Int!) {{
      troves(
        where: {{
          status_not: active
          collateral_in: $collateralIds
          createdAt_lt: $periodEnd
          closedAt_gt: $periodStart
          id_gt: $cursor
        }}
        orderBy: id
        orderDirection: asc
        first: $limit
      ) {{{TROVE_FIELDS}}}
    }}
    """
    variables = {
        "collateralIds": collateral_ids,
        "periodStart": str(period.startTimestamp),
        "periodEnd": str(period.endTimestamp),
    }
    rows = iterate_subgraph(conf, ["troves"], query, variables)
    return parse_obj_as(list[Trove], rows)


def get_troves_active_in_period(
    conf: Config, collateral_ids: list[CollateralId], period: DistributionPeriod
) -> list[Trove]:
    """
    Query troves that were active at any point during the distribution period:
    - currently open troves created before the period end
    - troves closed after the period start
    """
    return get_open_troves(conf, collateral_ids, period) + get_troves_closed_in_period(
        conf, collateral_ids, period
    )


def get_collateral_ids_for_tokens(
    conf: Config, tokens: list[EthereumAddress]
) -> dict[EthereumAddress, CollateralId]:
    """
    Map collateral token addresses to their branch index (collIndex).
    The subgraph stores bytes as lowercase hex, the returned keys are the addresses as passed in.
    """
    by_lower = {t.lower(): t for t in tokens}
    query = """
    query CollateralsByToken($tokens: [Bytes!]!, $cursor: ID!, $limit: Int!) {
      collateralAddresses(
        where: { token_in: $tokens, id_gt: $cursor }
        orderBy: id
        orderDirection: asc
        first: $limit
      ) {
        id
        collateral { id }
        token
      }
    }
    """
    rows = iterate_subgraph(
        conf, ["collateralAddresses"], query, {"tokens": list(by_lower.keys())}
    )
    return {
        by_lower[row["token"].lower()]: row["collateral"]["id"]
        for row in rows
        if row["token"].lower() in by_lower
    }
