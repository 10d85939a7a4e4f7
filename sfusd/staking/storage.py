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

from typing import Optional

from sfusd.staking.events import PoolEvent
from sfusd.staking.state import Checkpoint, GlobalState, UserCheckpointCursor, UserDistribution
from sfusd.types import Address, CheckpointId


class PoolStorage:
    """Committed state of a single pool.

    Checkpoints live in a list indexed by checkpoint id.
    """

    def __init__(self) -> None:
        self._global_state: Optional[GlobalState] = None
        self._checkpoints: list[Checkpoint] = []
        self._users: dict[Address, UserDistribution] = {}
        self._cursors: dict[Address, UserCheckpointCursor] = {}
        self.events: list[PoolEvent] = []

    def get_global_state(self) -> Optional[GlobalState]:
        return self._global_state

    def put_global_state(self, state: GlobalState) -> None:
        self._global_state = state

    def checkpoint_count(self) -> int:
        return len(self._checkpoints)

    def get_checkpoint(self, checkpoint_id: int) -> Checkpoint:
        return self._checkpoints[checkpoint_id]

    def append_checkpoint(self, checkpoint: Checkpoint) -> CheckpointId:
        assert checkpoint.checkpoint_id == self.checkpoint_count(), 'checkpoints must be sealed in order'
        self._checkpoints.append(checkpoint)
        return checkpoint.checkpoint_id

    def get_user(self, address: Address) -> Optional[UserDistribution]:
        return self._users.get(address)

    def put_user(self, address: Address, user: UserDistribution) -> None:
        self._users[address] = user

    def get_cursor(self, address: Address) -> Optional[UserCheckpointCursor]:
        return self._cursors.get(address)

    def put_cursor(self, address: Address, cursor: UserCheckpointCursor) -> None:
        self._cursors[address] = cursor

    def emit(self, event: PoolEvent) -> None:
        self.events.append(event)


class ChangesTracker(PoolStorage):
    """Buffers writes on top of a `PoolStorage` until `commit()` is called.

    Reads fall through to the wrapped storage for anything not written yet.
    Dropping the tracker discards every buffered change.
    """

    def __init__(self, storage: PoolStorage) -> None:
        super().__init__()
        self.storage = storage
        self._global_changed = False
        self._committed = False

    def get_global_state(self) -> Optional[GlobalState]:
        if self._global_changed:
            return self._global_state
        return self.storage.get_global_state()

    def put_global_state(self, state: GlobalState) -> None:
        self._global_state = state
        self._global_changed = True

    def checkpoint_count(self) -> int:
        return self.storage.checkpoint_count() + len(self._checkpoints)

    def get_checkpoint(self, checkpoint_id: int) -> Checkpoint:
        base_count = self.storage.checkpoint_count()
        if checkpoint_id < base_count:
            return self.storage.get_checkpoint(checkpoint_id)
        return self._checkpoints[checkpoint_id - base_count]

    def get_user(self, address: Address) -> Optional[UserDistribution]:
        if address in self._users:
            return self._users[address]
        return self.storage.get_user(address)

    def get_cursor(self, address: Address) -> Optional[UserCheckpointCursor]:
        if address in self._cursors:
            return self._cursors[address]
        return self.storage.get_cursor(address)

    def commit(self) -> None:
        assert not self._committed, 'changes already committed'
        if self._global_changed:
            assert self._global_state is not None
            self.storage.put_global_state(self._global_state)
        for checkpoint in self._checkpoints:
            self.storage.append_checkpoint(checkpoint)
        for address, user in self._users.items():
            self.storage.put_user(address, user)
        for address, cursor in self._cursors.items():
            self.storage.put_cursor(address, cursor)
        for event in self.events:
            self.storage.emit(event)
        self._committed = True
