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

from copy import deepcopy
from typing import Any

import pytest
from pydantic import ValidationError

from myriad.conf import MAINNET_PARAMS_FILEPATH
from myriad.conf.consensus import ConsensusParams
from myriad.conf.deployment import ALWAYS_ACTIVE, NO_TIMEOUT, Deployment, DeploymentPos
from myriad.utils.yaml import dict_from_extended_yaml


@pytest.fixture
def consensus_dict() -> dict[str, Any]:
    return deepcopy(dict_from_extended_yaml(filepath=MAINNET_PARAMS_FILEPATH)['CONSENSUS'])


@pytest.mark.parametrize(
    ['start_time', 'timeout'],
    [
        (0, 1),
        (1199145601, 1230767999),
        (ALWAYS_ACTIVE, NO_TIMEOUT),
        (ALWAYS_ACTIVE, 0),
        (1000, NO_TIMEOUT),
        (0, 999999999999),
    ]
)
def test_valid_deployment(start_time: int, timeout: int) -> None:
    deployment = Deployment(bit=1, start_time=start_time, timeout=timeout)

    assert deployment.is_always_active() is (start_time == ALWAYS_ACTIVE)
    assert deployment.has_timeout() is (timeout != NO_TIMEOUT)


@pytest.mark.parametrize(
    ['start_time', 'timeout', 'error'],
    [
        (10, 10, 'Value error, start_time must be lower than timeout: 10 >= 10'),
        (200, 100, 'Value error, start_time must be lower than timeout: 200 >= 100'),
    ]
)
def test_invalid_deployment_window(start_time: int, timeout: int, error: str) -> None:
    with pytest.raises(ValidationError) as e:
        Deployment(bit=1, start_time=start_time, timeout=timeout)

    errors = e.value.errors()
    assert errors[0]['msg'] == error


@pytest.mark.parametrize(
    ['bit', 'start_time', 'timeout'],
    [
        (-1, 0, 1),
        (32, 0, 1),
        (0, -2, 1),
        (0, 0, -1),
        (0, 0, NO_TIMEOUT + 1),
    ]
)
def test_deployment_out_of_range(bit: int, start_time: int, timeout: int) -> None:
    with pytest.raises(ValidationError):
        Deployment(bit=bit, start_time=start_time, timeout=timeout)


def test_deployment_names() -> None:
    assert [pos.value for pos in DeploymentPos] == [
        'testdummy', 'csv', 'segwit', 'legbit', 'reservealgo', 'longblocks', 'argon2d'
    ]

    with pytest.raises(ValueError):
        DeploymentPos('SEGWIT')


def test_valid_consensus_params(consensus_dict: dict[str, Any]) -> None:
    consensus = ConsensusParams.model_validate(consensus_dict)

    assert consensus.pow_limit == (2**256 - 1) >> 20
    assert consensus.auxpow_chain_id == 0x5a
    assert consensus.minimum_chain_work == 0x0ce40000000000000000000000000000000000000000167e92f47c43f03e9eb4
    assert consensus.bip34_hash.hex() == 'cb41589c918fba1beccca8bc6b34b2b928b4f9888595d7664afd6ec60a576291'
    assert consensus.get_deployment(DeploymentPos.ARGON2D) == Deployment(
        bit=6, start_time=1550188800, timeout=1581724800
    )


def test_missing_deployment(consensus_dict: dict[str, Any]) -> None:
    del consensus_dict['deployments']['argon2d']

    with pytest.raises(ValidationError) as e:
        ConsensusParams.model_validate(consensus_dict)

    errors = e.value.errors()
    assert errors[0]['msg'] == "Value error, missing deployments: ['argon2d']"


def test_unknown_deployment(consensus_dict: dict[str, Any]) -> None:
    consensus_dict['deployments']['taproot'] = dict(bit=7, start_time=0, timeout=1)

    with pytest.raises(ValidationError):
        ConsensusParams.model_validate(consensus_dict)


def test_deployments_with_same_bit(consensus_dict: dict[str, Any]) -> None:
    consensus_dict['deployments']['argon2d']['bit'] = 5

    with pytest.raises(ValidationError) as e:
        ConsensusParams.model_validate(consensus_dict)

    errors = e.value.errors()
    assert errors[0]['msg'].startswith('Value error, deployments must use distinct bits')


@pytest.mark.parametrize(
    ['threshold', 'window', 'error'],
    [
        (2017, 2016, 'Value error, rule_change_activation_threshold must not exceed miner_confirmation_window: '
                     '2017 > 2016'),
        (145, 144, 'Value error, rule_change_activation_threshold must not exceed miner_confirmation_window: '
                   '145 > 144'),
    ]
)
def test_threshold_exceeds_window(consensus_dict: dict[str, Any], threshold: int, window: int, error: str) -> None:
    consensus_dict['rule_change_activation_threshold'] = threshold
    consensus_dict['miner_confirmation_window'] = window

    with pytest.raises(ValidationError) as e:
        ConsensusParams.model_validate(consensus_dict)

    errors = e.value.errors()
    assert errors[0]['msg'] == error


def test_threshold_equal_to_window(consensus_dict: dict[str, Any]) -> None:
    consensus_dict['rule_change_activation_threshold'] = 144
    consensus_dict['miner_confirmation_window'] = 144

    ConsensusParams.model_validate(consensus_dict)


@pytest.mark.parametrize('field', ['pow_limit', 'minimum_chain_work'])
def test_uint256_out_of_range(consensus_dict: dict[str, Any], field: str) -> None:
    consensus_dict[field] = 2**256

    with pytest.raises(ValidationError):
        ConsensusParams.model_validate(consensus_dict)


def test_extra_field(consensus_dict: dict[str, Any]) -> None:
    consensus_dict['unknown_field'] = 1

    with pytest.raises(ValidationError) as e:
        ConsensusParams.model_validate(consensus_dict)

    errors = e.value.errors()
    assert errors[0]['type'] == 'extra_forbidden'


def test_consensus_params_are_frozen(consensus_dict: dict[str, Any]) -> None:
    consensus = ConsensusParams.model_validate(consensus_dict)

    with pytest.raises(ValidationError):
        consensus.pow_no_retargeting = True  # type: ignore[misc]
