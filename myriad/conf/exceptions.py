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

from myriad.exception import MyriadError


class ChainParamsError(MyriadError):
    """Base class for configuration errors when building chain params, the offending text is kept in `value`."""

    def __init__(self, message: str, value: str) -> None:
        super().__init__(message)
        self.value = value


class UnknownNetworkError(ChainParamsError):
    """Raised when the requested network name is not one of the known networks."""

    def __init__(self, network: str) -> None:
        super().__init__(f'Unknown chain {network}.', network)


class VersionBitsParamsError(ChainParamsError):
    """Base class for errors in a `-vbparams` override."""


class MalformedVersionBitsParamsError(VersionBitsParamsError):
    """Raised when an override does not have exactly three `:` separated parts."""

    def __init__(self, value: str) -> None:
        super().__init__('Version bits parameters malformed, expecting deployment:start:end', value)


class InvalidVersionBitsIntegerError(VersionBitsParamsError):
    """Raised when the start time or the timeout of an override is not a 64-bit integer."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f'Invalid {field} ({value})', value)
        self.field = field


class UnknownDeploymentError(VersionBitsParamsError):
    """Raised when an override names a deployment that does not exist."""

    def __init__(self, value: str) -> None:
        super().__init__(f'Invalid deployment ({value})', value)


class GenesisIntegrityError(MyriadError):
    """Raised when the genesis block built from the literal params does not match the recorded hashes.

    This is not a configuration error, it means the compiled-in params are inconsistent with themselves and the
    node must not start with them.
    """


class ParamsNotSelectedError(MyriadError):
    """Raised when the global chain params are read before any network was selected."""
