# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from sfusd.conf.settings import DEFAULT_PRECISION
from sfusd.staking.state import GlobalState
from sfusd.types import Timestamp
from sfusd.utils.math import mul_div

PRECISION: int = DEFAULT_PRECISION


def advance(state: GlobalState, now: Timestamp, precision: int = PRECISION) -> GlobalState:
    """Bring the per-share integral up to `now`.

    Every staked share earns one unit of virtual reward per second, so the
    value to distribute over the elapsed time is ``elapsed * total_shares``
    and the per-share integral grows by that value times the precision over
    the outstanding shares. Nothing accrues while no shares are outstanding,
    but the update time still moves.
    """
    if now <= state.updated_at:
        return state
    if state.total_shares == 0:
        return state._replace(updated_at=now)

    value = (now - state.updated_at) * state.total_shares
    return state._replace(
        cumulative_sum=state.cumulative_sum + mul_div(value, precision, state.total_shares),
        accrued_virtual_rewards=state.accrued_virtual_rewards + value,
        updated_at=now,
    )