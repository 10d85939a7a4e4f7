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

from typing import NamedTuple, Union

from sfusd.types import Address, Amount, CheckpointId, Timestamp


class Staked(NamedTuple):
    address: Address
    amount: Amount
    timestamp: Timestamp


class Unstaked(NamedTuple):
    address: Address
    amount: Amount
    timestamp: Timestamp


class CheckpointCreated(NamedTuple):
    checkpoint_id: CheckpointId
    deposit_amount: Amount
    deposit_time: Timestamp
    cumulative_sum: int
    total_actual_rewards: int
    total_virtual_rewards: int


class RewardsClaimed(NamedTuple):
    address: Address
    amount: Amount
    last_processed_checkpoint: CheckpointId


PoolEvent = Union[Staked, Unstaked, CheckpointCreated, RewardsClaimed]
