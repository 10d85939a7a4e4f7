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

from typing import NamedTuple

from typing_extensions import Self

from sfusd.types import Address, Amount, CheckpointId, Timestamp, TokenUid


class GlobalState(NamedTuple):
    """Pool wide accrual state."""

    owner: Address
    reward_token: TokenUid
    total_shares: Amount
    # Per-share integral of virtual reward, scaled by the pool precision.
    cumulative_sum: int
    updated_at: Timestamp
    # Id the next deposit will seal.
    current_checkpoint_id: CheckpointId
    # Virtual reward accrued since the last seal.
    accrued_virtual_rewards: int
    # Start reported for the open checkpoint window.
    window_opened_at: Timestamp


class UserDistribution(NamedTuple):
    """Accrual record of a single staker."""

    shares: Amount
    # Watermark: cumulative sum observed at the last reconciliation.
    cumulative_sum: int
    # Virtual reward not yet attributed to a sealed window.
    owed_value: int

    @classmethod
    def empty(cls) -> Self:
        return cls(shares=Amount(0), cumulative_sum=0, owed_value=0)


class Checkpoint(NamedTuple):
    """Sealed reward period. Totals are cumulative over every earlier checkpoint."""

    checkpoint_id: CheckpointId
    deposit_time: Timestamp
    cumulative_sum: int
    total_actual_rewards: int
    total_virtual_rewards: int


class ClaimedRewards(NamedTuple):
    actual_rewards: int
    virtual_rewards: int


class UserCheckpointCursor(NamedTuple):
    """How far a staker has been reconciled against the checkpoint log."""

    last_processed_checkpoint: CheckpointId
    claimed_rewards: ClaimedRewards
    # Real reward computed from processed windows but not paid out yet.
    pending_rewards: int

    @classmethod
    def starting_at(cls, checkpoint: Checkpoint) -> Self:
        """Cursor for a staker that joins after `checkpoint` was sealed."""
        return cls(
            last_processed_checkpoint=checkpoint.checkpoint_id,
            claimed_rewards=ClaimedRewards(
                actual_rewards=checkpoint.total_actual_rewards,
                virtual_rewards=checkpoint.total_virtual_rewards,
            ),
            pending_rewards=0,
        )
