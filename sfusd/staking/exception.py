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

from sfusd.types import Address


class StakingFail(Exception):
    """Raised when a staking call is rejected. No state is changed."""


class Unauthorized(StakingFail):
    """Raised when an address other than the owner calls an owner method."""

    pass


class ZeroAmount(StakingFail):
    """Raised when staking, unstaking or depositing zero."""

    pass


class InvalidAmount(StakingFail):
    """Raised for negative amounts."""

    pass


class ValueTooHigh(StakingFail):
    """Raised when an amount exceeds the configured maximum value."""

    def __init__(self, value: int, max_value: int) -> None:
        super().__init__(f'value {value} exceeds {max_value}')
        self.value = value
        self.max_value = max_value


class InsufficientShares(StakingFail):
    """Raised when unstaking more than the staker holds."""

    def __init__(self, user: Address, balance: int, amount: int) -> None:
        super().__init__(f'{user.hex()} holds {balance} shares, asked for {amount}')
        self.user = user
        self.balance = balance
        self.amount = amount


class NoRewardsToDistribute(StakingFail):
    """Raised when depositing into a window in which nothing was staked."""

    pass


class FutureLookup(StakingFail):
    """Raised when asking for a checkpoint that does not exist yet."""

    def __init__(self, requested: int, current: int) -> None:
        super().__init__(f'checkpoint {requested} is after current checkpoint {current}')
        self.requested = requested
        self.current = current


class InvalidCheckpoint(StakingFail):
    """Raised for negative checkpoint ids."""

    pass


class InvalidRewardToken(StakingFail):
    pass


class AlreadyInitialized(StakingFail):
    pass


class NotInitialized(StakingFail):
    pass


class InvalidTimestamp(StakingFail):
    """Raised when a call is older than the last accumulator update."""

    pass


class TransferFailed(StakingFail):
    """Raised when the stake or reward ledger refuses a movement."""

    pass


class ReentrantCall(StakingFail):
    """Raised when a pool method is called while another call on the same pool is running."""

    pass


class InvariantViolation(StakingFail):
    """Accrual accounting is out of sync with checkpoint accounting.

    This is never a caller error; the operation is aborted.
    """

    pass
