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
from typing import Optional

from sfusd.conf import StakingSettings, get_global_settings
from sfusd.staking.accumulator import advance
from sfusd.staking.blueprint import Blueprint, public, view
from sfusd.staking.checkpoints import CheckpointStore
from sfusd.staking.context import Context
from sfusd.staking.events import RewardsClaimed, Staked, Unstaked
from sfusd.staking.exception import (
    AlreadyInitialized,
    FutureLookup,
    InsufficientShares,
    InvalidAmount,
    InvalidCheckpoint,
    InvalidRewardToken,
    InvalidTimestamp,
    InvariantViolation,
    NotInitialized,
    TransferFailed,
    Unauthorized,
    ValueTooHigh,
    ZeroAmount,
)
from sfusd.staking.state import (
    ClaimedRewards,
    GlobalState,
    UserCheckpointCursor,
    UserDistribution,
)
from sfusd.staking.storage import PoolStorage
from sfusd.staking.user_ledger import accrued_value, consume_owed, reconcile_user
from sfusd.staking.views import CheckpointData, StakingData, UserStakingData
from sfusd.tokens.ledger import Ledger, LedgerError
from sfusd.types import Address, Amount, CheckpointId, Timestamp, TokenUid
from sfusd.utils.math import mul_div

logger = logging.getLogger(__name__)


class StakingModule(Blueprint):
    """Distributes lump-sum reward deposits over stakers by time-weighted stake.

    Between deposits every staked share accrues one unit of *virtual* reward
    per second. Each deposit seals a checkpoint holding the cumulative real
    and virtual totals. A staker's share of a deposit is their virtual reward
    in that window times the window's real/virtual ratio, computed lazily the
    next time the staker interacts.

    The life cycle of a pool is the following:

    1. [Owner] `initialize(...)` seals checkpoint 0.
    2. [User] `stake(...)` / `unstake(...)`.
    3. [Owner] `deposit_rewards(...)` seals a new checkpoint.
    4. [User] `claim_rewards()` or `claim_rewards_until(...)`.
    """

    def __init__(
        self,
        stake_ledger: Ledger,
        reward_ledger: Ledger,
        *,
        settings: Optional[StakingSettings] = None,
        storage: Optional[PoolStorage] = None,
    ) -> None:
        super().__init__(storage)
        self.settings = settings if settings is not None else get_global_settings()
        self.stake_ledger = stake_ledger
        self.reward_ledger = reward_ledger

    @property
    def pool_address(self) -> Address:
        return self.settings.pool_address

    @property
    def precision(self) -> int:
        return self.settings.precision

    def _get_state(self) -> GlobalState:
        state = self.storage.get_global_state()
        if state is None:
            raise NotInitialized('pool is not initialized')
        return state

    def _validate_state(self, state: GlobalState) -> None:
        """Validate pool state invariants"""
        assert state.total_shares >= 0, "Invalid total staked"
        assert state.accrued_virtual_rewards >= 0, "Invalid accrued virtual rewards"
        assert state.current_checkpoint_id == self.storage.checkpoint_count(), "Invalid checkpoint counter"

    def _validate_amount(self, amount: int) -> None:
        if amount == 0:
            raise ZeroAmount('amount must be greater than zero')
        if amount < 0:
            raise InvalidAmount(f'negative amount: {amount}')
        if amount > self.settings.max_value:
            raise ValueTooHigh(amount, self.settings.max_value)

    def _advance(self, ctx: Context) -> GlobalState:
        """Bring the accumulator to the call time and persist it."""
        state = self._get_state()
        if ctx.timestamp < state.updated_at:
            raise InvalidTimestamp(f'timestamp {ctx.timestamp} is before last update {state.updated_at}')
        state = advance(state, ctx.timestamp, self.precision)
        self.storage.put_global_state(state)
        return state

    def _catch_up(self, state: GlobalState, address: Address, upper: int) -> UserDistribution:
        """Reconcile `address` against every checkpoint strictly below `upper`.

        `state` must already be advanced to now. For a full catch-up the
        watermark moves to the current cumulative sum; for a partial one it
        stops at checkpoint `upper - 1`, so it never passes a checkpoint that
        is still unprocessed.
        """
        precision = self.precision
        checkpoints = CheckpointStore(self.storage)
        user = self.storage.get_user(address)
        cursor = self.storage.get_cursor(address)
        assert user is not None and cursor is not None

        watermark = user.cumulative_sum
        owed_at_entry = user.owed_value
        if upper >= state.current_checkpoint_id:
            user = reconcile_user(user, state.cumulative_sum, precision)
        elif upper > 0:
            user = reconcile_user(user, checkpoints.get(upper - 1).cumulative_sum, precision)

        first = cursor.last_processed_checkpoint + 1
        claimed = cursor.claimed_rewards
        pending = cursor.pending_rewards
        previous = checkpoints.get(cursor.last_processed_checkpoint)
        for checkpoint_id in range(first, upper):
            checkpoint = checkpoints.get(checkpoint_id)
            if checkpoint_id == first and checkpoint.cumulative_sum >= watermark:
                # Window straddles the watermark: what was owed before it plus
                # the accrual from the watermark to the seal.
                user_virtual = owed_at_entry + accrued_value(
                    user.shares, watermark, checkpoint.cumulative_sum, precision
                )
            else:
                user_virtual = accrued_value(
                    user.shares, previous.cumulative_sum, checkpoint.cumulative_sum, precision
                )
            user = consume_owed(user, user_virtual)

            if user_virtual > 0:
                window_actual = checkpoint.total_actual_rewards - claimed.actual_rewards
                window_virtual = checkpoint.total_virtual_rewards - claimed.virtual_rewards
                if window_virtual <= 0:
                    logger.error('checkpoint %d has no virtual reward to divide', checkpoint_id)
                    raise InvariantViolation(f'checkpoint {checkpoint_id} has no virtual reward')
                pending += mul_div(user_virtual, window_actual, window_virtual)

            claimed = ClaimedRewards(
                actual_rewards=checkpoint.total_actual_rewards,
                virtual_rewards=checkpoint.total_virtual_rewards,
            )
            previous = checkpoint

        if upper > first:
            cursor = UserCheckpointCursor(
                last_processed_checkpoint=CheckpointId(upper - 1),
                claimed_rewards=claimed,
                pending_rewards=pending,
            )
            logger.debug('caught up %s to checkpoint %d, pending=%d', address.hex(), upper - 1, pending)

        self.storage.put_user(address, user)
        self.storage.put_cursor(address, cursor)
        return user

    def _transfer(self, ledger: Ledger, sender: Address, recipient: Address, amount: int) -> None:
        try:
            ledger.transfer(sender, recipient, amount)
        except LedgerError as e:
            logger.warning('transfer of %d failed: %s', amount, e)
            raise TransferFailed(str(e)) from e

    def _pull(self, ledger: Ledger, owner: Address, amount: int) -> None:
        try:
            ledger.transfer_from(self.pool_address, owner, self.pool_address, amount)
        except LedgerError as e:
            logger.warning('pull of %d failed: %s', amount, e)
            raise TransferFailed(str(e)) from e

    def _claim(self, ctx: Context, checkpoint_id: Optional[int]) -> Amount:
        state = self._get_state()
        if checkpoint_id is None:
            checkpoint_id = state.current_checkpoint_id
        if checkpoint_id < 0:
            raise InvalidCheckpoint(f'invalid checkpoint id: {checkpoint_id}')
        if checkpoint_id > state.current_checkpoint_id:
            raise FutureLookup(checkpoint_id, state.current_checkpoint_id)

        address = ctx.address
        if self.storage.get_user(address) is None:
            return Amount(0)

        state = self._advance(ctx)
        self._catch_up(state, address, checkpoint_id)

        cursor = self.storage.get_cursor(address)
        assert cursor is not None
        amount = Amount(cursor.pending_rewards)
        if amount == 0:
            return amount

        self.storage.put_cursor(address, cursor._replace(pending_rewards=0))
        self.storage.emit(RewardsClaimed(address, amount, cursor.last_processed_checkpoint))
        self._transfer(self.reward_ledger, self.pool_address, address, amount)
        logger.debug('%s claimed %d', address.hex(), amount)
        return amount

    @public
    def initialize(self, ctx: Context, reward_token: TokenUid) -> None:
        if self.storage.get_global_state() is not None:
            raise AlreadyInitialized('pool already initialized')
        if not reward_token:
            raise InvalidRewardToken('reward token must be set')
        if reward_token != self.reward_ledger.token_uid:
            raise InvalidRewardToken('reward token does not match the reward ledger')

        state = GlobalState(
            owner=ctx.address,
            reward_token=reward_token,
            total_shares=Amount(0),
            cumulative_sum=0,
            updated_at=ctx.timestamp,
            current_checkpoint_id=CheckpointId(0),
            accrued_virtual_rewards=0,
            window_opened_at=ctx.timestamp,
        )
        state = CheckpointStore(self.storage).seal_genesis(state, ctx.timestamp)
        self.storage.put_global_state(state)
        self._validate_state(state)
        logger.info('initialized pool for reward token %s', reward_token.hex())

    @public
    def stake(self, ctx: Context, amount: Amount) -> None:
        self._validate_amount(amount)
        state = self._advance(ctx)
        address = ctx.address

        if self.storage.get_user(address) is None:
            # Newcomers start after the last sealed checkpoint so they are not
            # charged for reward history before they existed.
            previous = CheckpointStore(self.storage).get(state.current_checkpoint_id - 1)
            self.storage.put_user(address, UserDistribution.empty())
            self.storage.put_cursor(address, UserCheckpointCursor.starting_at(previous))

        user = self._catch_up(state, address, state.current_checkpoint_id)

        if state.total_shares == 0:
            state = state._replace(window_opened_at=ctx.timestamp)
        state = state._replace(total_shares=Amount(state.total_shares + amount))
        self.storage.put_user(address, user._replace(shares=Amount(user.shares + amount)))
        self.storage.put_global_state(state)
        self._validate_state(state)

        self.storage.emit(Staked(address, amount, ctx.timestamp))
        self._transfer(self.stake_ledger, address, self.pool_address, amount)
        logger.debug('%s staked %d, total=%d', address.hex(), amount, state.total_shares)

    @public
    def unstake(self, ctx: Context, amount: Amount) -> None:
        self._validate_amount(amount)
        self._get_state()
        address = ctx.address
        user = self.storage.get_user(address)
        balance = user.shares if user is not None else 0
        if amount > balance:
            raise InsufficientShares(address, balance, amount)

        state = self._advance(ctx)
        user = self._catch_up(state, address, state.current_checkpoint_id)

        state = state._replace(total_shares=Amount(state.total_shares - amount))
        self.storage.put_user(address, user._replace(shares=Amount(user.shares - amount)))
        self.storage.put_global_state(state)
        self._validate_state(state)

        self.storage.emit(Unstaked(address, amount, ctx.timestamp))
        self._transfer(self.stake_ledger, self.pool_address, address, amount)
        logger.debug('%s unstaked %d, total=%d', address.hex(), amount, state.total_shares)

    @public
    def deposit_rewards(self, ctx: Context, amount: Amount) -> CheckpointId:
        """Seal the open window with `amount` of reward pulled from the owner.

        Returns the id of the sealed checkpoint.
        """
        state = self._get_state()
        if ctx.address != state.owner:
            raise Unauthorized('Unauthorized')
        self._validate_amount(amount)

        state = self._advance(ctx)
        sealed_id = state.current_checkpoint_id
        state = CheckpointStore(self.storage).seal(state, amount, ctx.timestamp)
        self.storage.put_global_state(state)
        self._validate_state(state)

        self._pull(self.reward_ledger, ctx.address, amount)
        return sealed_id

    @public
    def claim_rewards_until(self, ctx: Context, checkpoint_id: int) -> Amount:
        """Pay out rewards from every checkpoint strictly below `checkpoint_id`."""
        return self._claim(ctx, checkpoint_id)

    @public
    def claim_rewards(self, ctx: Context) -> Amount:
        return self._claim(ctx, None)

    @view
    def get_staking_data(self) -> StakingData:
        return StakingData.from_state(self._get_state())

    @view
    def get_checkpoint(self, checkpoint_id: int, timestamp: Optional[Timestamp] = None) -> CheckpointData:
        """Sealed checkpoint, or the open one as of `timestamp` for the current id."""
        state = self._get_state()
        if timestamp is not None:
            state = advance(state, timestamp, self.precision)
        checkpoint = CheckpointStore(self.storage).at(checkpoint_id, state)
        return CheckpointData.from_checkpoint(checkpoint, sealed=checkpoint_id < state.current_checkpoint_id)

    @view
    def get_user_staking_data(self, address: Address) -> UserStakingData:
        self._get_state()
        user = self.storage.get_user(address)
        cursor = self.storage.get_cursor(address)
        if user is None or cursor is None:
            return UserStakingData.empty()
        return UserStakingData.from_records(user, cursor)

    @view
    def get_pending_rewards(self, address: Address) -> Amount:
        """Rewards `address` could claim now. Runs the catch-up without committing it."""
        state = self._get_state()
        if self.storage.get_user(address) is None:
            return Amount(0)
        self._catch_up(state, address, state.current_checkpoint_id)
        cursor = self.storage.get_cursor(address)
        assert cursor is not None
        return Amount(cursor.pending_rewards)
