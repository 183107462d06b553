from aero_rewards.queries.common import *
from aero_rewards.queries.aero_events import *
from aero_rewards.queries.troves import *
from aero_rewards.queries.snapshots import *
from aero_rewards.queries.chain import *
