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

from sfusd.staking.exception import InvariantViolation
from sfusd.staking.state import UserDistribution

logger = logging.getLogger(__name__)


def accrued_value(shares: int, from_sum: int, to_sum: int, precision: int) -> int:
    """Virtual reward earned by `shares` while the integral went from `from_sum` to `to_sum`."""
    if shares == 0 or to_sum <= from_sum:
        return 0
    return shares * (to_sum - from_sum) // precision


def reconcile_user(user: UserDistribution, cumulative_sum: int, precision: int) -> UserDistribution:
    """Fold accrual since the user's watermark into `owed_value`.

    A target at or below the watermark leaves the user untouched.
    """
    if cumulative_sum <= user.cumulative_sum:
        return user
    return user._replace(
        owed_value=user.owed_value + accrued_value(user.shares, user.cumulative_sum, cumulative_sum, precision),
        cumulative_sum=cumulative_sum,
    )


def consume_owed(user: UserDistribution, amount: int) -> UserDistribution:
    """Remove the virtual reward attributed to a processed checkpoint window."""
    if amount > user.owed_value:
        logger.error('owed value underflow: owed=%d consumed=%d', user.owed_value, amount)
        raise InvariantViolation(f'owed value {user.owed_value} is lower than consumed {amount}')
    return user._replace(owed_value=user.owed_value - amount)
