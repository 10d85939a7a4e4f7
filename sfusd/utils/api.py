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

import json
from typing import Any

from pydantic import BaseModel, ConfigDict


class Response(BaseModel):
    """Base class for read-only projections returned to callers."""
    model_config = ConfigDict(frozen=True)

    def json_dumpb(self) -> bytes:
        return json.dumps(self.json_dict(), sort_keys=True).encode('utf-8')

    def json_dict(self) -> dict[str, Any]:
        # Amounts may exceed the 53 bits JSON consumers handle, so they travel as strings.
        data = self.model_dump()
        return {key: _encode(value) for key, value in data.items()}


def _encode(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, bytes):
        return value.hex()
    return value
