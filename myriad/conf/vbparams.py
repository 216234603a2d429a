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

import re
from typing import Iterable

from structlog import get_logger

from myriad.conf.deployment import Deployment, DeploymentPos
from myriad.conf.exceptions import (
    InvalidVersionBitsIntegerError,
    MalformedVersionBitsParamsError,
    UnknownDeploymentError,
)

logger = get_logger()

INT64_MIN = -2**63
INT64_MAX = 2**63 - 1

_INT64_RE = re.compile(r'[+-]?[0-9]+')


def parse_int64(text: str) -> int | None:
    """Parse a signed 64-bit decimal integer, returning None if the text is not one.

    Surrounding whitespace and digit separators are not accepted.

    >>> parse_int64('-1')
    -1
    >>> parse_int64('+42')
    42
    >>> parse_int64(' 42') is None
    True
    >>> parse_int64('1_000') is None
    True
    >>> parse_int64('42\\n') is None
    True
    >>> parse_int64('9223372036854775808') is None
    True
    """
    if not _INT64_RE.fullmatch(text):
        return None

    value = int(text)
    if not INT64_MIN <= value <= INT64_MAX:
        return None

    return value


def parse_vbparam(raw_arg: str) -> tuple[DeploymentPos, int, int]:
    """Parse a single `deployment:start:end` override."""
    parts = raw_arg.split(':')
    if len(parts) != 3:
        raise MalformedVersionBitsParamsError(raw_arg)

    name, raw_start, raw_timeout = parts

    start_time = parse_int64(raw_start)
    if start_time is None:
        raise InvalidVersionBitsIntegerError('start time', raw_start)

    timeout = parse_int64(raw_timeout)
    if timeout is None:
        raise InvalidVersionBitsIntegerError('timeout', raw_timeout)

    try:
        pos = DeploymentPos(name)
    except ValueError:
        raise UnknownDeploymentError(name)

    return pos, start_time, timeout


def apply_vbparams(raw_args: Iterable[str], deployments: dict[DeploymentPos, Deployment]) -> None:
    """Apply `-vbparams` overrides to the deployments of a consensus table that is still being built.

    Each override replaces the signalling window of one deployment, keeping its bit. Overrides are applied in order,
    so a later override of the same deployment wins. The windows are not checked for ordering, `segwit:0:0` is a
    valid way of making a deployment never start.

    On the first invalid override an exception is raised and the remaining ones are not applied.
    """
    log = logger.new()

    for raw_arg in raw_args:
        pos, start_time, timeout = parse_vbparam(raw_arg)
        deployments[pos] = deployments[pos].model_copy(update=dict(start_time=start_time, timeout=timeout))
        log.info(
            'setting version bits activation parameters',
            deployment=pos.value,
            start_time=start_time,
            timeout=timeout,
        )
