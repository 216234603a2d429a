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

from pathlib import Path
from types import MappingProxyType
from typing import Iterable, NamedTuple, Optional, Union

from structlog import get_logger

from myriad.conf.consensus import ConsensusParams
from myriad.conf.exceptions import ParamsNotSelectedError, UnknownNetworkError
from myriad.conf.settings import ChainParams, NetworkName
from myriad.conf.vbparams import apply_vbparams
from myriad.utils.yaml import dict_from_extended_yaml

logger = get_logger()

_CONSENSUS_KEY = 'CONSENSUS'

parent_dir = Path(__file__).parent

MAINNET_PARAMS_FILEPATH = str(parent_dir / 'mainnet.yml')
TESTNET_PARAMS_FILEPATH = str(parent_dir / 'testnet.yml')
REGTEST_PARAMS_FILEPATH = str(parent_dir / 'regtest.yml')


class _NetworkEntry(NamedTuple):
    filepath: str
    # Whether `-vbparams` overrides are honoured on this network.
    accepts_vbparams: bool


_NETWORKS: dict[NetworkName, _NetworkEntry] = {
    NetworkName.MAINNET: _NetworkEntry(MAINNET_PARAMS_FILEPATH, accepts_vbparams=False),
    NetworkName.TESTNET: _NetworkEntry(TESTNET_PARAMS_FILEPATH, accepts_vbparams=False),
    NetworkName.REGTEST: _NetworkEntry(REGTEST_PARAMS_FILEPATH, accepts_vbparams=True),
}


def _get_network_name(network: Union[NetworkName, str]) -> NetworkName:
    try:
        return NetworkName(network)
    except ValueError:
        raise UnknownNetworkError(str(network))


def create_chain_params(network: Union[NetworkName, str], *, vbparams: Iterable[str] = ()) -> ChainParams:
    """Create the chain params of a network from its settings file.

    `vbparams` are `deployment:start:end` overrides of the deployment windows, only honoured on networks that accept
    them. Every call builds a new, independent instance.
    """
    log = logger.new(network=str(network))
    network_name = _get_network_name(network)
    entry = _NETWORKS[network_name]

    params_dict = dict_from_extended_yaml(filepath=entry.filepath)
    consensus = ConsensusParams.model_validate(params_dict.pop(_CONSENSUS_KEY, None))

    vbparams = list(vbparams)
    if vbparams and not entry.accepts_vbparams:
        log.warn('version bits parameters are only accepted on regtest, ignoring them', vbparams=vbparams)
    elif vbparams:
        deployments = dict(consensus.deployments)
        apply_vbparams(vbparams, deployments)
        consensus = consensus.model_copy(update=dict(deployments=MappingProxyType(deployments)))

    params = ChainParams.model_validate({**params_dict, _CONSENSUS_KEY: consensus})
    log.debug('chain params created', genesis=params.genesis_hash.hex())
    return params


class _ParamsMetadata(NamedTuple):
    network: NetworkName
    vbparams: tuple[str, ...]
    params: ChainParams


_params_singleton: Optional[_ParamsMetadata] = None


def select_params(network: Union[NetworkName, str], *, vbparams: Iterable[str] = ()) -> ChainParams:
    """Create the chain params of a network and make them the globally selected ones.

    The params are fully built before being published, so if building them fails the previously selected params,
    if any, are kept.
    """
    global _params_singleton

    vbparams = tuple(vbparams)
    params = create_chain_params(network, vbparams=vbparams)
    _params_singleton = _ParamsMetadata(network=params.NETWORK_NAME, vbparams=vbparams, params=params)

    logger.info('chain params selected', network=params.NETWORK_NAME.value)
    return params


def get_global_params() -> ChainParams:
    """Return the globally selected chain params.

    Prefer receiving the params as an argument, this is meant for process entry points.
    """
    if _params_singleton is None:
        raise ParamsNotSelectedError('chain params were not selected, call select_params() first')

    return _params_singleton.params


def get_selected_network() -> Optional[NetworkName]:
    """Return the name of the globally selected network, or None if none was selected yet."""
    if _params_singleton is None:
        return None

    return _params_singleton.network


def _reset_global_params() -> None:
    """Forget the globally selected chain params, only meant to be used by tests."""
    global _params_singleton
    _params_singleton = None
