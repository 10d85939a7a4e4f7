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


def mul_div(x: int, y: int, denominator: int) -> int:
    """Return ``x * y // denominator`` rounding down.

    The product is taken in full before dividing so no precision is lost on
    long elapsed periods or large share counts.
    """
    if denominator <= 0:
        raise ZeroDivisionError('mul_div denominator must be positive')
    if x < 0 or y < 0:
        raise ValueError('mul_div operands must be non-negative')
    return (x * y) // denominator
