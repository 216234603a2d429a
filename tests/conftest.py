# Copyright 2024 Hathor Labs
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

from typing import Iterator

import pytest
from structlog.testing import capture_logs

from myriad.conf.get_params import _reset_global_params


@pytest.fixture(autouse=True)
def reset_global_params() -> Iterator[None]:
    _reset_global_params()
    yield
    _reset_global_params()


@pytest.fixture(autouse=True)
def captured_logs() -> Iterator[list[dict]]:
    """Keep log events out of stdout, where commands print their output."""
    with capture_logs() as logs:
        yield logs
