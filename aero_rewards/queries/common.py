from copy import deepcopy
from typing import Any, Optional, TypedDict, TypeVar, cast

import requests

from aero_rewards.errors import EmptyQueryError, TooManyLoopsError
from aero_rewards.models import Config, DistributionPeriod, GraphQL_Response


class GraphQLConfig(TypedDict):
    """
    Typechecker for JSON/Dict data to be passed to the graph
    :param `query`: the query to send to the subgraph
    :param `variables`: injected query params in dictionary format
    """

    query: str
    variables: dict[str, Any]


# python insantiates generics separate to function definition
T = TypeVar("T")

# cursor sentinel, every id compares greater than the empty string
CURSOR_START = ""


def extract_nested_graphql(res: GraphQL_Response, access_path: list[str]):
    """
    This function walks through a dictionary until it finds the data you want.

    For the graphql queries, this is typically an array of values that is limited in size
    (eg: we can only fetch 1000 troves at a time)

    :param `access_path`: in the format ['first_key', 'nested_key_level0', 'nested_key_level1', ....]
    :param `res`: api response from graphql. First key should be 'data'
    """
    deepcopy_access_path = deepcopy(access_path)
    current = res["data"]
    while len(deepcopy_access_path) > 0:
        current = current[deepcopy_access_path.pop(0)]
    return current


def graphql_query(url: str, params: GraphQLConfig, timeout: int = 30) -> GraphQL_Response:
    """
    Send a single query and fail on anything that is not a clean `data` payload.
    Transport errors and non 2xx statuses are raised by requests.
    """
    res = requests.post(url, json=params, timeout=timeout)
    res.raise_for_status()
    response: GraphQL_Response = res.json()

    if not response:
        raise EmptyQueryError(f"No results for graph query to {url}")
    if "errors" in response:
        raise EmptyQueryError(
            f"Error in graph query to {url}: {cast(dict, response)['errors']}"
        )
    if response.get("data") is None:
        raise EmptyQueryError(f"No data returned for graph query to {url}")
    return response


def graphql_iterate_query(
    url: str,
    access_path: list[str],
    params: GraphQLConfig,
    page_size: int = 1000,
    max_loops: int = 1000,
    timeout: int = 30,
) -> list[T]:
    """
    Subgraphs return at most 1000 rows per query.
    This function walks the result set in pages ordered by `id`, passing the last id seen as `$cursor`
    and the page size as `$limit`. It stops at the first page shorter than `page_size`,
    so a result set that is an exact multiple of the page size costs one extra, empty, request.

    Ordering by id rather than by skip/offset means rows indexed while we are paginating
    can't shift the window and cause skips or duplicates.

    :param `url`: the subgraph endpoint
    :param `access_path`: eg ['troves'] - set of keys to fetch data
    :param `params`: GraphQL config such as the actual query and variables
    """
    variables = {**params.get("variables", {}), "limit": page_size}
    cursor = CURSOR_START

    all_results: list[T] = []
    loops = 0
    while True:
        if loops > max_loops:
            raise TooManyLoopsError("graphql_iterate_query")

        page_params: GraphQLConfig = dict(
            query=params["query"], variables={**variables, "cursor": cursor}
        )
        response = graphql_query(url, page_params, timeout)
        current_batch: list[Any] = extract_nested_graphql(response, access_path)
        all_results += current_batch

        if len(current_batch) < page_size:
            break
        cursor = current_batch[-1]["id"]
        loops += 1

    return all_results


def iterate_subgraph(
    conf: Config, access_path: list[str], query: str, variables: dict[str, Any]
) -> list[Any]:
    """`graphql_iterate_query` against the configured subgraph"""
    return graphql_iterate_query(
        conf.subgraph_url,
        access_path,
        dict(query=query, variables=variables),
        page_size=conf.page_size,
        timeout=conf.request_timeout,
    )


def period_variables(period: Optional[DistributionPeriod]) -> dict[str, Optional[str]]:
    """
    Optional timestamp window, [start, end). BigInt variables are passed as strings,
    a null variable removes the filter on the subgraph side.
    """
    return {
        "start": str(period.startTimestamp) if period else None,
        "end": str(period.endTimestamp) if period else None,
    }
