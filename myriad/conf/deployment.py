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

from enum import StrEnum, unique

from pydantic import Field, model_validator

from myriad.utils.pydantic import BaseModel

# Special start time for deployments that are active from the genesis block on.
ALWAYS_ACTIVE = -1

# Special timeout for deployments that never expire.
NO_TIMEOUT = 2**63 - 1


@unique
class DeploymentPos(StrEnum):
    """Known soft-fork deployments, the value is the name used in `-vbparams` and in the settings files."""

    TESTDUMMY = 'testdummy'

    # BIP68, BIP112 and BIP113
    CSV = 'csv'

    # BIP141, BIP143 and BIP147
    SEGWIT = 'segwit'

    # Legacy blocks, keeps v0.11 nodes on the same chain
    LEGBIT = 'legbit'

    # MIP2, reserve algorithm ids
    RESERVEALGO = 'reservealgo'

    # MIP3, longer block intervals
    LONGBLOCKS = 'longblocks'

    # Argon2d4096 mining replacing Skein
    ARGON2D = 'argon2d'


class Deployment(BaseModel):
    """
    Signalling window of a soft-fork deployment.

    Attributes:
        bit: which bit in the version field of the block is used to signal support.

        start_time: median time past from which signalling counts, or ALWAYS_ACTIVE.

        timeout: median time past at which the deployment fails if not yet locked in, or NO_TIMEOUT.
    """
    bit: int = Field(ge=0, le=31)
    start_time: int = Field(ge=ALWAYS_ACTIVE, le=NO_TIMEOUT)
    timeout: int = Field(ge=0, le=NO_TIMEOUT)

    @model_validator(mode='after')
    def _validate_window(self) -> 'Deployment':
        """Validates that a concrete start_time comes before a concrete timeout."""
        if self.is_always_active() or not self.has_timeout():
            return self

        if self.start_time >= self.timeout:
            raise ValueError(f'start_time must be lower than timeout: {self.start_time} >= {self.timeout}')

        return self

    def is_always_active(self) -> bool:
        return self.start_time == ALWAYS_ACTIVE

    def has_timeout(self) -> bool:
        return self.timeout != NO_TIMEOUT
