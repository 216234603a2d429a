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

import pytest
from structlog.testing import capture_logs

from myriad.conf.deployment import Deployment, DeploymentPos
from myriad.conf.exceptions import (
    InvalidVersionBitsIntegerError,
    MalformedVersionBitsParamsError,
    UnknownDeploymentError,
    VersionBitsParamsError,
)
from myriad.conf.get_params import create_chain_params
from myriad.conf.vbparams import apply_vbparams, parse_int64, parse_vbparam


@pytest.fixture
def deployments() -> dict[DeploymentPos, Deployment]:
    return dict(create_chain_params('regtest').CONSENSUS.deployments)


def test_apply_vbparams(deployments: dict[DeploymentPos, Deployment]) -> None:
    original = dict(deployments)

    with capture_logs() as logs:
        apply_vbparams(['segwit:100:200'], deployments)

    assert deployments[DeploymentPos.SEGWIT] == Deployment(bit=1, start_time=100, timeout=200)
    for pos, deployment in original.items():
        if pos != DeploymentPos.SEGWIT:
            assert deployments[pos] == deployment

    assert logs == [dict(
        event='setting version bits activation parameters',
        log_level='info',
        deployment='segwit',
        start_time=100,
        timeout=200,
    )]


def test_apply_vbparams_empty(deployments: dict[DeploymentPos, Deployment]) -> None:
    original = dict(deployments)
    apply_vbparams([], deployments)

    assert deployments == original


def test_apply_vbparams_last_wins(deployments: dict[DeploymentPos, Deployment]) -> None:
    apply_vbparams(['csv:1:2', 'argon2d:5:6', 'csv:3:4'], deployments)

    assert deployments[DeploymentPos.CSV] == Deployment(bit=0, start_time=3, timeout=4)
    assert deployments[DeploymentPos.ARGON2D] == Deployment(bit=6, start_time=5, timeout=6)


@pytest.mark.parametrize('raw_arg', ['segwit:0:0', 'segwit:200:100', 'segwit:-1:0', 'segwit:+5:-5'])
def test_apply_vbparams_does_not_check_ordering(deployments: dict[DeploymentPos, Deployment], raw_arg: str) -> None:
    apply_vbparams([raw_arg], deployments)

    _, start_time, timeout = raw_arg.split(':')
    assert deployments[DeploymentPos.SEGWIT].start_time == int(start_time)
    assert deployments[DeploymentPos.SEGWIT].timeout == int(timeout)


@pytest.mark.parametrize('raw_arg', ['', 'segwit', 'segwit:100', 'segwit:100:200:300', 'segwit::100:200'])
def test_malformed_vbparams(deployments: dict[DeploymentPos, Deployment], raw_arg: str) -> None:
    with pytest.raises(MalformedVersionBitsParamsError) as e:
        apply_vbparams([raw_arg], deployments)

    assert str(e.value) == 'Version bits parameters malformed, expecting deployment:start:end'
    assert e.value.value == raw_arg


@pytest.mark.parametrize(
    ['raw_arg', 'field', 'value'],
    [
        ('segwit:abc:200', 'start time', 'abc'),
        ('segwit::200', 'start time', ''),
        ('segwit: 100:200', 'start time', ' 100'),
        ('segwit:1.5:200', 'start time', '1.5'),
        ('segwit:9223372036854775808:200', 'start time', '9223372036854775808'),
        ('segwit:100:2x', 'timeout', '2x'),
        ('segwit:100:', 'timeout', ''),
        ('segwit:100:-9223372036854775809', 'timeout', '-9223372036854775809'),
        # integers are checked before the deployment name
        ('unknown:abc:200', 'start time', 'abc'),
    ]
)
def test_invalid_vbparams_integer(
    deployments: dict[DeploymentPos, Deployment],
    raw_arg: str,
    field: str,
    value: str,
) -> None:
    with pytest.raises(InvalidVersionBitsIntegerError) as e:
        apply_vbparams([raw_arg], deployments)

    assert str(e.value) == f'Invalid {field} ({value})'
    assert e.value.field == field
    assert e.value.value == value


@pytest.mark.parametrize('name', ['unknown', 'SEGWIT', 'segwit ', ''])
def test_unknown_deployment(deployments: dict[DeploymentPos, Deployment], name: str) -> None:
    with pytest.raises(UnknownDeploymentError) as e:
        apply_vbparams([f'{name}:100:200'], deployments)

    assert str(e.value) == f'Invalid deployment ({name})'
    assert e.value.value == name
    assert isinstance(e.value, VersionBitsParamsError)


def test_parse_vbparam() -> None:
    assert parse_vbparam('longblocks:-1:9223372036854775807') == (DeploymentPos.LONGBLOCKS, -1, 2**63 - 1)


@pytest.mark.parametrize(
    ['text', 'expected'],
    [
        ('0', 0),
        ('-0', 0),
        ('007', 7),
        ('-9223372036854775808', -2**63),
        ('9223372036854775807', 2**63 - 1),
        ('', None),
        ('+', None),
        ('1e3', None),
        ('0x10', None),
        ('١٢', None),
    ]
)
def test_parse_int64(text: str, expected: int | None) -> None:
    assert parse_int64(text) == expected
