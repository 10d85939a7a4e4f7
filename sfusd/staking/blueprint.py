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

import threading
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from sfusd.staking.context import Context
from sfusd.staking.exception import ReentrantCall
from sfusd.staking.storage import ChangesTracker, PoolStorage

T = TypeVar('T')


class Blueprint:
    """Base class for a pool whose calls run one at a time.

    Methods decorated with `public` mutate state: they run under the pool lock
    against a `ChangesTracker` that is committed only if the method returns.
    Methods decorated with `view` run under the same lock against a tracker
    that is always discarded.
    """

    def __init__(self, storage: Optional[PoolStorage] = None) -> None:
        self._base_storage = storage if storage is not None else PoolStorage()
        self._lock = threading.RLock()
        self._tracker: Optional[ChangesTracker] = None

    @property
    def storage(self) -> PoolStorage:
        if self._tracker is not None:
            return self._tracker
        return self._base_storage

    @property
    def events(self) -> list:
        return list(self._base_storage.events)

    def _run(self, fn: Callable[..., T], commit: bool, *args: Any, **kwargs: Any) -> T:
        with self._lock:
            if self._tracker is not None:
                raise ReentrantCall('re-entrant call into a pool is not allowed')
            tracker = ChangesTracker(self._base_storage)
            self._tracker = tracker
            try:
                result = fn(self, *args, **kwargs)
            finally:
                self._tracker = None
            if commit:
                tracker.commit()
            return result


def public(fn: Callable[..., T]) -> Callable[..., T]:
    """Mark a state-mutating method. The first argument must be a `Context`."""
    @wraps(fn)
    def wrapper(self: Blueprint, ctx: Context, *args: Any, **kwargs: Any) -> T:
        if not isinstance(ctx, Context):
            raise TypeError('public methods take a Context as first argument')
        return self._run(fn, True, ctx, *args, **kwargs)
    return wrapper


def view(fn: Callable[..., T]) -> Callable[..., T]:
    """Mark a read-only method. Anything it writes is thrown away."""
    @wraps(fn)
    def wrapper(self: Blueprint, *args: Any, **kwargs: Any) -> T:
        return self._run(fn, False, *args, **kwargs)
    return wrapper
