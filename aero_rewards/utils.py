from typing import Any, TypeVar

from aero_rewards.models import Config

# python insantiates generics separate to function definition
T = TypeVar("T")


def log(conf: Config, message: Any) -> None:
    """Progress output, silenced with `verbose=False`"""
    if conf.verbose:
        print(message)


def unique(ls: list[T]) -> list[T]:
    """Remove duplicates from a list, keeping the first occurrence"""
    return list(dict.fromkeys(ls))
