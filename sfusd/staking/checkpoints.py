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

import logging

from sfusd.staking.events import CheckpointCreated
from sfusd.staking.exception import FutureLookup, InvalidCheckpoint, NoRewardsToDistribute
from sfusd.staking.state import Checkpoint, GlobalState
from sfusd.staking.storage import PoolStorage
from sfusd.types import Amount, CheckpointId, Timestamp

logger = logging.getLogger(__name__)


class CheckpointStore:
    """Append-only log of sealed reward periods.

    Checkpoint `n` closes the window that started when checkpoint `n - 1` was
    sealed. Both reward totals are cumulative, so the amounts belonging to a
    single window are the difference between two consecutive checkpoints.
    """

    def __init__(self, storage: PoolStorage) -> None:
        self.storage = storage

    def seal_genesis(self, state: GlobalState, now: Timestamp) -> GlobalState:
        """Seal checkpoint 0 for a freshly initialized pool."""
        assert self.storage.checkpoint_count() == 0
        checkpoint = Checkpoint(
            checkpoint_id=CheckpointId(0),
            deposit_time=now,
            cumulative_sum=state.cumulative_sum,
            total_actual_rewards=0,
            total_virtual_rewards=0,
        )
        self._append(checkpoint, Amount(0))
        return state._replace(
            current_checkpoint_id=CheckpointId(1),
            accrued_virtual_rewards=0,
            window_opened_at=now,
        )

    def seal(self, state: GlobalState, deposit_amount: Amount, now: Timestamp) -> GlobalState:
        """Close the open window with `deposit_amount` of real reward.

        `state` must already be advanced to `now`.
        """
        if deposit_amount > 0 and state.accrued_virtual_rewards == 0:
            raise NoRewardsToDistribute('nothing was staked since the last deposit')

        previous = self.storage.get_checkpoint(state.current_checkpoint_id - 1)
        checkpoint = Checkpoint(
            checkpoint_id=state.current_checkpoint_id,
            deposit_time=now,
            cumulative_sum=state.cumulative_sum,
            total_actual_rewards=previous.total_actual_rewards + deposit_amount,
            total_virtual_rewards=previous.total_virtual_rewards + state.accrued_virtual_rewards,
        )
        self._append(checkpoint, deposit_amount)
        return state._replace(
            current_checkpoint_id=CheckpointId(state.current_checkpoint_id + 1),
            accrued_virtual_rewards=0,
            window_opened_at=now,
        )

    def get(self, checkpoint_id: int) -> Checkpoint:
        """Sealed checkpoint by id, without bounds checks."""
        return self.storage.get_checkpoint(checkpoint_id)

    def at(self, checkpoint_id: int, state: GlobalState) -> Checkpoint:
        """Checkpoint by id; the current id yields the open window as it stands."""
        if checkpoint_id < 0:
            raise InvalidCheckpoint(f'invalid checkpoint id: {checkpoint_id}')
        if checkpoint_id > state.current_checkpoint_id:
            raise FutureLookup(checkpoint_id, state.current_checkpoint_id)
        if checkpoint_id == state.current_checkpoint_id:
            return self.open_window(state)
        return self.storage.get_checkpoint(checkpoint_id)

    def open_window(self, state: GlobalState) -> Checkpoint:
        previous = self.storage.get_checkpoint(state.current_checkpoint_id - 1)
        return Checkpoint(
            checkpoint_id=state.current_checkpoint_id,
            deposit_time=state.window_opened_at,
            cumulative_sum=state.cumulative_sum,
            total_actual_rewards=previous.total_actual_rewards,
            total_virtual_rewards=previous.total_virtual_rewards + state.accrued_virtual_rewards,
        )

    def _append(self, checkpoint: Checkpoint, deposit_amount: Amount) -> None:
        self.storage.append_checkpoint(checkpoint)
        self.storage.emit(CheckpointCreated(
            checkpoint_id=checkpoint.checkpoint_id,
            deposit_amount=deposit_amount,
            deposit_time=checkpoint.deposit_time,
            cumulative_sum=checkpoint.cumulative_sum,
            total_actual_rewards=checkpoint.total_actual_rewards,
            total_virtual_rewards=checkpoint.total_virtual_rewards,
        ))
        logger.info(
            'sealed checkpoint %d: deposit=%d actual=%d virtual=%d',
            checkpoint.checkpoint_id,
            deposit_amount,
            checkpoint.total_actual_rewards,
            checkpoint.total_virtual_rewards,
        )
