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
from typing import Any, NamedTuple, Optional, Union

from pydantic import (
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    PrivateAttr,
    field_serializer,
    field_validator,
    model_validator,
)

from myriad.conf.checkpoint import Checkpoint
from myriad.conf.consensus import ConsensusParams
from myriad.conf.genesis import GenesisParams
from myriad.primitives import Block
from myriad.utils.pydantic import BaseModel, HexBytes, parse_hash256


@unique
class NetworkName(StrEnum):
    MAINNET = 'main'
    TESTNET = 'test'
    REGTEST = 'regtest'


class SeedSpec(NamedTuple):
    """A fixed peer address, used when no DNS seed answers."""
    host: str
    port: int

    def __str__(self) -> str:
        host = f'[{self.host}]' if ':' in self.host else self.host
        return f'{host}:{self.port}'

    @classmethod
    def parse(cls, description: str) -> 'SeedSpec':
        """Parse a `host:port` description, IPv6 hosts must be enclosed in brackets.

        >>> SeedSpec.parse('127.0.0.1:10888')
        SeedSpec(host='127.0.0.1', port=10888)
        >>> SeedSpec.parse('[::1]:10888')
        SeedSpec(host='::1', port=10888)
        >>> str(SeedSpec.parse('[::1]:10888'))
        '[::1]:10888'
        """
        host, sep, port = description.rpartition(':')
        if not sep or not host or not port.isdigit():
            raise ValueError(f'expected \'host:port\', got {description}')

        if host.startswith('[') and host.endswith(']'):
            host = host[1:-1]

        port_number = int(port)
        if not 0 < port_number <= 65535:
            raise ValueError(f'invalid port in {description}')

        return cls(host, port_number)


class Base58Prefixes(BaseModel):
    """Version bytes prepended to base58 encoded addresses and keys."""
    pubkey_address: HexBytes = Field(min_length=1, max_length=1)
    script_address: HexBytes = Field(min_length=1, max_length=1)
    secret_key: HexBytes = Field(min_length=1, max_length=1)
    ext_public_key: HexBytes = Field(min_length=4, max_length=4)
    ext_secret_key: HexBytes = Field(min_length=4, max_length=4)


class ChainTxData(BaseModel):
    """Transaction statistics of the chain at a known point, used to estimate the verification progress."""

    # Unix timestamp of the last known number of transactions.
    time: NonNegativeInt

    # Total number of transactions up to that point.
    tx_count: NonNegativeInt

    # Estimated number of transactions per second after that point.
    tx_rate: NonNegativeFloat


class ChainParams(BaseModel):
    # Name of the network: "main", "test" or "regtest"
    NETWORK_NAME: NetworkName

    # Consensus rules of the network
    CONSENSUS: ConsensusParams

    # Literal genesis block params, the block is built and checked when the params are created
    GENESIS: GenesisParams

    # Block checkpoints, strictly increasing in height
    CHECKPOINTS: tuple[Checkpoint, ...] = ()

    # First bytes of every p2p message
    MESSAGE_START: HexBytes = Field(min_length=4, max_length=4)

    DEFAULT_PORT: int = Field(gt=0, le=65535)

    # Blocks below this height are never pruned
    PRUNE_AFTER_HEIGHT: NonNegativeInt

    # Expected disk usage, in gigabytes
    ASSUMED_BLOCKCHAIN_SIZE: NonNegativeInt
    ASSUMED_CHAIN_STATE_SIZE: NonNegativeInt

    # Initial bootstrap servers
    DNS_SEEDS: tuple[str, ...] = ()
    FIXED_SEEDS: tuple[SeedSpec, ...] = ()

    BASE58_PREFIXES: Base58Prefixes

    # Human readable part of bech32 addresses
    BECH32_HRP: str = Field(min_length=1)

    CHAIN_TX_DATA: ChainTxData

    # Whether a fallback fee is used when fee estimation has no data
    FALLBACK_FEE_ENABLED: bool

    # Whether expensive consistency checks run by default
    DEFAULT_CONSISTENCY_CHECKS: bool = False

    # Whether only standard transactions are relayed and mined
    REQUIRE_STANDARD: bool = True

    # Whether blocks are mined on demand instead of by miners
    MINE_BLOCKS_ON_DEMAND: bool = False

    _genesis_block: Optional[Block] = PrivateAttr(default=None)

    @field_validator('CHECKPOINTS', mode='before')
    @classmethod
    def _parse_checkpoints(cls, checkpoints: Union[dict[int, str], list[Any], tuple[Any, ...]]) -> list[Checkpoint]:
        """Parse checkpoints from a `{height: hash}` dictionary or a list of `[height, hash]` pairs.

        Settings files use the list form, lists replace the extended value instead of being merged with it.
        """
        if isinstance(checkpoints, dict):
            checkpoints = list(checkpoints.items())

        if not isinstance(checkpoints, (list, tuple)):
            raise ValueError(f'expected \'dict[int, str]\' or \'list[Checkpoint]\', got {checkpoints}')

        return [
            Checkpoint(int(height), parse_hash256(_hash))
            for height, _hash in checkpoints
        ]

    @field_validator('CHECKPOINTS')
    @classmethod
    def _validate_checkpoints(cls, checkpoints: tuple[Checkpoint, ...]) -> tuple[Checkpoint, ...]:
        """Validates that checkpoints are strictly increasing in height."""
        for previous, current in zip(checkpoints, checkpoints[1:]):
            if current.height <= previous.height:
                raise ValueError(
                    f'checkpoints must be strictly increasing in height: {current.height} after {previous.height}'
                )

        return checkpoints

    @field_validator('FIXED_SEEDS', mode='before')
    @classmethod
    def _parse_fixed_seeds(cls, seeds: Any) -> Any:
        if not isinstance(seeds, (list, tuple)):
            return seeds

        return [SeedSpec.parse(seed) if isinstance(seed, str) else seed for seed in seeds]

    @field_serializer('CHECKPOINTS')
    def _serialize_checkpoints(self, checkpoints: tuple[Checkpoint, ...]) -> list[tuple[int, str]]:
        return [(checkpoint.height, checkpoint.hash.hex()) for checkpoint in checkpoints]

    @field_serializer('FIXED_SEEDS')
    def _serialize_fixed_seeds(self, seeds: tuple[SeedSpec, ...]) -> list[str]:
        return [str(seed) for seed in seeds]

    @model_validator(mode='after')
    def _build_genesis_block(self) -> 'ChainParams':
        """Build the genesis block and check it against the recorded hashes.

        GenesisIntegrityError is not a ValueError, so it is not converted to a ValidationError.
        """
        self._genesis_block = self.GENESIS.build_verified()
        return self

    @property
    def genesis_block(self) -> Block:
        assert self._genesis_block is not None
        return self._genesis_block

    @property
    def genesis_hash(self) -> bytes:
        return self.genesis_block.hash

    def is_test_chain(self) -> bool:
        """Whether this is a network used for testing, where coins have no value."""
        return self.NETWORK_NAME != NetworkName.MAINNET
