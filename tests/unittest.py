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

import os
import unittest
from typing import Optional

from twisted.internet.task import Clock

from sfusd.conf import StakingSettings
from sfusd.staking.context import Context
from sfusd.types import Address, Timestamp, TokenUid

# Arbitrary wall-clock start so timestamps look like real ones.
GENESIS_TIMESTAMP = 1_700_000_000


class PoolTestCase(unittest.TestCase):
    """Base test case driving pools with a controllable clock."""

    def setUp(self):
        super().setUp()
        self.clock = Clock()
        self.clock.advance(GENESIS_TIMESTAMP)
        self.settings = StakingSettings(_env_file=None)

    @property
    def now(self) -> Timestamp:
        return Timestamp(int(self.clock.seconds()))

    def advance(self, seconds: int) -> None:
        self.clock.advance(seconds)

    def gen_random_address(self) -> Address:
        return Address(os.urandom(25))

    def gen_random_token_uid(self) -> TokenUid:
        return TokenUid(os.urandom(32))

    def create_context(self, caller_id: Address, timestamp: Optional[int] = None) -> Context:
        if timestamp is None:
            timestamp = self.now
        return Context(address=caller_id, timestamp=Timestamp(timestamp))
