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

from myriad.conf.get_params import (
    MAINNET_PARAMS_FILEPATH,
    REGTEST_PARAMS_FILEPATH,
    TESTNET_PARAMS_FILEPATH,
    create_chain_params,
    get_global_params,
    select_params,
)
from myriad.conf.settings import ChainParams, NetworkName

__all__ = [
    'MAINNET_PARAMS_FILEPATH',
    'TESTNET_PARAMS_FILEPATH',
    'REGTEST_PARAMS_FILEPATH',
    'ChainParams',
    'NetworkName',
    'create_chain_params',
    'get_global_params',
    'select_params',
]
