"""
Types here are instantiated as subclasses of pydantic's `BaseModel`.
This means we get runtime deserialization and validation for free just by using type declarations
and a couple of pydantic helpers.

Raw subgraph rows carry numbers as strings, parsing them through these models
converts every amount and timestamp to a python int.
"""

from aero_rewards.models.types import *
from aero_rewards.models.Config import *
from aero_rewards.models.Events import *
from aero_rewards.models.Period import *
from aero_rewards.models.Trove import *
from aero_rewards.models.Distribution import *
from aero_rewards.models.Writer import *
from aero_rewards.models.DB import *
