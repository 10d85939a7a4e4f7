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

from sfusd.staking.state import Checkpoint, GlobalState, UserCheckpointCursor, UserDistribution
from sfusd.utils.api import Response


class StakingData(Response):
    reward_token: bytes
    total_stake: int
    last_update_time: int
    checkpoint_id: int

    @classmethod
    def from_state(cls, state: GlobalState) -> 'StakingData':
        return cls(
            reward_token=state.reward_token,
            total_stake=state.total_shares,
            last_update_time=state.updated_at,
            checkpoint_id=state.current_checkpoint_id,
        )


class CheckpointData(Response):
    checkpoint_id: int
    sealed: bool
    deposit_time: int
    cumulative_sum: int
    total_actual_rewards: int
    total_virtual_rewards: int

    @classmethod
    def from_checkpoint(cls, checkpoint: Checkpoint, sealed: bool) -> 'CheckpointData':
        return cls(sealed=sealed, **checkpoint._asdict())


class UserStakingData(Response):
    staked_amount: int
    pending_rewards: int
    cumulative_sum: int
    owed_value: int
    last_processed_checkpoint: int
    claimed_actual_rewards: int
    claimed_virtual_rewards: int

    @classmethod
    def from_records(cls, user: UserDistribution, cursor: UserCheckpointCursor) -> 'UserStakingData':
        return cls(
            staked_amount=user.shares,
            pending_rewards=cursor.pending_rewards,
            cumulative_sum=user.cumulative_sum,
            owed_value=user.owed_value,
            last_processed_checkpoint=cursor.last_processed_checkpoint,
            claimed_actual_rewards=cursor.claimed_rewards.actual_rewards,
            claimed_virtual_rewards=cursor.claimed_rewards.virtual_rewards,
        )

    @classmethod
    def empty(cls) -> 'UserStakingData':
        return cls(
            staked_amount=0,
            pending_rewards=0,
            cumulative_sum=0,
            owed_value=0,
            last_processed_checkpoint=0,
            claimed_actual_rewards=0,
            claimed_virtual_rewards=0,
        )
