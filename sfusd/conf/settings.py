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

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sfusd.types import Address

DEFAULT_PRECISION: int = 10**25
DEFAULT_MAX_VALUE: int = 2**200 - 1


class StakingSettings(BaseSettings):
    """Settings shared by every staking pool.

    Values can be overridden through environment variables prefixed with
    ``SFUSD_``, e.g. ``SFUSD_PRECISION=1000000000000000000``.
    """
    model_config = SettingsConfigDict(env_prefix='SFUSD_', frozen=True, extra='ignore')

    # Fixed-point multiplier for the cumulative sum. Must not change for the
    # lifetime of a pool.
    precision: int = DEFAULT_PRECISION

    # Upper bound for any stake, unstake or deposit amount.
    max_value: int = DEFAULT_MAX_VALUE

    # Account holding staked and reward assets in the collaborator ledgers.
    pool_address: Address = Address(b'sfusd-pool')

    @field_validator('precision', 'max_value')
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError('must be positive')
        return v

    @field_validator('pool_address', mode='before')
    @classmethod
    def parse_pool_address(cls, v):
        """Accept hex strings coming from the environment."""
        if isinstance(v, str):
            return bytes.fromhex(v)
        return v
