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
from unittest import mock

from pydantic import ValidationError

from sfusd.conf import StakingSettings
from sfusd.conf.settings import DEFAULT_MAX_VALUE, DEFAULT_PRECISION


class StakingSettingsTest(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict('os.environ', {}, clear=True):
            settings = StakingSettings()
        self.assertEqual(settings.precision, DEFAULT_PRECISION)
        self.assertEqual(settings.precision, 10**25)
        self.assertEqual(settings.max_value, DEFAULT_MAX_VALUE)
        self.assertEqual(settings.pool_address, b'sfusd-pool')

    def test_env_override(self):
        env = {
            'SFUSD_PRECISION': str(10**18),
            'SFUSD_POOL_ADDRESS': 'abcdef',
        }
        with mock.patch.dict('os.environ', env, clear=True):
            settings = StakingSettings()
        self.assertEqual(settings.precision, 10**18)
        self.assertEqual(settings.pool_address, bytes.fromhex('abcdef'))

    def test_rejects_non_positive_precision(self):
        with self.assertRaises(ValidationError):
            StakingSettings(precision=0)

    def test_frozen(self):
        settings = StakingSettings()
        with self.assertRaises(ValidationError):
            settings.precision = 1
