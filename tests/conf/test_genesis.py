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

from myriad.conf.exceptions import GenesisIntegrityError
from myriad.conf.genesis import COIN, GenesisParams, build_genesis, verify_genesis
from myriad.primitives import NULL_HASH, SEQUENCE_FINAL, build_merkle_root
from myriad.script import create_p2pk_script

TIMESTAMP = '2014-02-23 FT - G20 aims to add $2tn to global economy'
OUTPUT_SCRIPT = create_p2pk_script(bytes.fromhex(
    '04e941763c7750969e751bee1ffbe96a651a0feb131db046546c219ea40bff40b95077dc9ba1c05af991588772d8daabbda57386c068fb9bc7'
    '477c5e28702d5eb9'
))
MERKLE_ROOT = '3f75db3c18e92f46c21530dc1222e1fddf4ccebbf88e289a6c9dc787fd6469da'

MAINNET_INPUTS = dict(
    timestamp=TIMESTAMP,
    output_script=OUTPUT_SCRIPT,
    time=1393164995,
    nonce=2092903596,
    bits=0x1e0fffff,
    version=2,
    reward=1000 * COIN,
)


@pytest.mark.parametrize(
    ['time', 'nonce', 'bits', 'expected_hash'],
    [
        (1393164995, 2092903596, 0x1e0fffff, '00000ffde4c020b5938441a0ea3d314bf619eff0b38f32f78f7583cffa1ea485'),
        (1392876393, 416875379, 0x1e0fffff, '0000017ce2a79c8bddafbbe47c004aa92b20678c354b34085f62b762084b9788'),
        (1296688602, 4, 0x207fffff, '63b92987ddc93808aa33dddc80b3e52948bdfffaf2420bf4cd9c5137b54ea37c'),
    ]
)
def test_genesis_hashes(time: int, nonce: int, bits: int, expected_hash: str) -> None:
    block = build_genesis(**{**MAINNET_INPUTS, 'time': time, 'nonce': nonce, 'bits': bits})

    assert block.hash.hex() == expected_hash
    # the coinbase does not depend on the header, so every network shares the merkle root
    assert block.header.merkle_root.hex() == MERKLE_ROOT


def test_genesis_structure() -> None:
    block = build_genesis(**MAINNET_INPUTS)

    assert block.header.prev_block == NULL_HASH
    assert block.header.version == 2
    assert len(block.transactions) == 1

    coinbase = block.transactions[0]
    assert coinbase.is_coinbase()
    assert coinbase.version == 1
    assert coinbase.lock_time == 0
    assert coinbase.inputs[0].sequence == SEQUENCE_FINAL
    assert coinbase.inputs[0].script_sig == bytes.fromhex('04ffff001d010436') + TIMESTAMP.encode()
    assert coinbase.outputs[0].value == 100_000_000_000
    assert coinbase.outputs[0].script_pubkey == OUTPUT_SCRIPT

    assert block.header.merkle_root == coinbase.hash
    assert build_merkle_root([tx.hash for tx in block.transactions]) == block.header.merkle_root
    assert len(bytes(block)) == 80 + 1 + len(bytes(coinbase))


def test_genesis_is_deterministic() -> None:
    first = build_genesis(**MAINNET_INPUTS)
    second = build_genesis(**MAINNET_INPUTS)

    assert first == second
    assert bytes(first) == bytes(second)


@pytest.mark.parametrize(
    ['field', 'value'],
    [
        ('timestamp', TIMESTAMP + '!'),
        ('output_script', OUTPUT_SCRIPT[:-1]),
        ('time', 1393164996),
        ('nonce', 2092903597),
        ('bits', 0x1e0ffffe),
        ('version', 1),
        ('reward', 1000),
    ]
)
def test_genesis_hash_depends_on_every_input(field: str, value: object) -> None:
    block = build_genesis(**{**MAINNET_INPUTS, field: value})

    assert block.hash.hex() != '00000ffde4c020b5938441a0ea3d314bf619eff0b38f32f78f7583cffa1ea485'


@pytest.mark.parametrize(
    ['field', 'value', 'merkle_changes'],
    [
        ('timestamp', TIMESTAMP + '!', True),
        ('reward', 1000, True),
        ('nonce', 0, False),
        ('time', 0, False),
    ]
)
def test_merkle_root_depends_on_coinbase_only(field: str, value: object, merkle_changes: bool) -> None:
    block = build_genesis(**{**MAINNET_INPUTS, field: value})

    assert (block.header.merkle_root.hex() != MERKLE_ROOT) is merkle_changes


def test_verify_genesis() -> None:
    block = build_genesis(**MAINNET_INPUTS)

    verify_genesis(block, block_hash=block.hash, merkle_root=bytes.fromhex(MERKLE_ROOT))
    verify_genesis(block, block_hash=block.hash)

    with pytest.raises(GenesisIntegrityError, match='genesis block hash mismatch'):
        verify_genesis(block, block_hash=NULL_HASH)

    with pytest.raises(GenesisIntegrityError, match='genesis merkle root mismatch'):
        verify_genesis(block, block_hash=block.hash, merkle_root=NULL_HASH)


def test_genesis_params() -> None:
    genesis = GenesisParams(
        timestamp=TIMESTAMP,
        output_script=OUTPUT_SCRIPT.hex(),
        time=1393164995,
        nonce=2092903596,
        bits='1e0fffff',
        version=2,
        reward=1000 * COIN,
        block_hash='0x00000ffde4c020b5938441a0ea3d314bf619eff0b38f32f78f7583cffa1ea485',
        merkle_root=MERKLE_ROOT,
    )

    assert genesis.bits == 0x1e0fffff
    assert genesis.output_script == OUTPUT_SCRIPT
    assert genesis.build() == build_genesis(**MAINNET_INPUTS)
    assert genesis.build_verified().hash == genesis.block_hash


def test_genesis_params_mismatch() -> None:
    genesis = GenesisParams(
        timestamp=TIMESTAMP,
        output_script=OUTPUT_SCRIPT.hex(),
        time=1393164995,
        nonce=0,
        bits='1e0fffff',
        version=2,
        reward=1000 * COIN,
        block_hash='00000ffde4c020b5938441a0ea3d314bf619eff0b38f32f78f7583cffa1ea485',
    )

    genesis.build()

    with pytest.raises(GenesisIntegrityError):
        genesis.build_verified()
