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

import unittest

from sfusd.staking.accumulator import advance
from sfusd.staking.checkpoints import CheckpointStore
from sfusd.staking.events import CheckpointCreated
from sfusd.staking.exception import FutureLookup, InvalidCheckpoint, NoRewardsToDistribute
from sfusd.staking.storage import PoolStorage
from sfusd.types import Amount, Timestamp
from tests.staking.test_accumulator import make_state


class CheckpointStoreTest(unittest.TestCase):
    def setUp(self):
        super().setUp()
        self.storage = PoolStorage()
        self.checkpoints = CheckpointStore(self.storage)
        self.state = self.checkpoints.seal_genesis(make_state(updated_at=1000), Timestamp(1000))

    def test_genesis(self):
        self.assertEqual(self.state.current_checkpoint_id, 1)
        genesis = self.checkpoints.get(0)
        self.assertEqual(genesis.checkpoint_id, 0)
        self.assertEqual(genesis.deposit_time, 1000)
        self.assertEqual(genesis.total_actual_rewards, 0)
        self.assertEqual(genesis.total_virtual_rewards, 0)
        self.assertEqual(len(self.storage.events), 1)
        self.assertIsInstance(self.storage.events[0], CheckpointCreated)

    def test_seal_accumulates_totals(self):
        state = advance(self.state._replace(total_shares=Amount(10)), Timestamp(1100))
        state = self.checkpoints.seal(state, Amount(500), Timestamp(1100))
        state = advance(state, Timestamp(1150))
        state = self.checkpoints.seal(state, Amount(300), Timestamp(1150))

        self.assertEqual(state.current_checkpoint_id, 3)
        self.assertEqual(state.accrued_virtual_rewards, 0)
        self.assertEqual(state.window_opened_at, 1150)

        first = self.checkpoints.get(1)
        second = self.checkpoints.get(2)
        self.assertEqual(first.total_actual_rewards, 500)
        self.assertEqual(first.total_virtual_rewards, 100 * 10)
        self.assertEqual(second.total_actual_rewards, 800)
        self.assertEqual(second.total_virtual_rewards, 150 * 10)
        self.assertGreater(second.cumulative_sum, first.cumulative_sum)

        created = self.storage.events[-1]
        self.assertEqual(created.checkpoint_id, 2)
        self.assertEqual(created.deposit_amount, 300)

    def test_seal_without_accrual(self):
        state = advance(self.state, Timestamp(2000))
        with self.assertRaises(NoRewardsToDistribute):
            self.checkpoints.seal(state, Amount(500), Timestamp(2000))
        self.assertEqual(self.storage.checkpoint_count(), 1)

    def test_at(self):
        state = advance(self.state._replace(total_shares=Amount(10)), Timestamp(1100))
        self.assertEqual(self.checkpoints.at(0, state).checkpoint_id, 0)

        open_window = self.checkpoints.at(1, state)
        self.assertEqual(open_window.checkpoint_id, 1)
        self.assertEqual(open_window.deposit_time, 1000)
        self.assertEqual(open_window.total_virtual_rewards, 100 * 10)
        self.assertEqual(open_window.total_actual_rewards, 0)
        self.assertEqual(open_window.cumulative_sum, state.cumulative_sum)

        with self.assertRaises(FutureLookup) as cm:
            self.checkpoints.at(2, state)
        self.assertEqual(cm.exception.requested, 2)
        self.assertEqual(cm.exception.current, 1)

        with self.assertRaises(InvalidCheckpoint):
            self.checkpoints.at(-1, state)
