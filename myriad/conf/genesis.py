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

from typing import Optional

from pydantic import NonNegativeInt, PositiveInt
from structlog import get_logger

from myriad.conf.exceptions import GenesisIntegrityError
from myriad.primitives import NULL_HASH, Block, BlockHeader, Transaction, TxInput, TxOutput, build_merkle_root
from myriad.script import Script
from myriad.utils.pydantic import BaseModel, Hash256, HexBytes, Uint32Hex

logger = get_logger()

# Number of base units in one coin.
COIN = 100_000_000

# Constants pushed at the start of the genesis coinbase script, before the timestamp text.
GENESIS_SCRIPT_SIG_BITS = 486604799
GENESIS_SCRIPT_SIG_EXTRA_NONCE = 4


def create_genesis_coinbase(timestamp: str, output_script: bytes, reward: int) -> Transaction:
    """Create the coinbase transaction of a genesis block.

    The only input spends the null outpoint and its script carries the timestamp text, the only output pays `reward`
    base units to `output_script`.
    """
    script_sig = Script()
    script_sig.push_int(GENESIS_SCRIPT_SIG_BITS)
    script_sig.push_num(GENESIS_SCRIPT_SIG_EXTRA_NONCE)
    script_sig.push_data(timestamp.encode('utf-8'))

    return Transaction(
        version=1,
        inputs=(TxInput.coinbase(bytes(script_sig)),),
        outputs=(TxOutput(reward, output_script),),
        lock_time=0,
    )


def build_genesis(
    timestamp: str,
    output_script: bytes,
    time: int,
    nonce: int,
    bits: int,
    version: int,
    reward: int,
) -> Block:
    """Build the genesis block of a chain.

    The genesis block has no previous block and a single coinbase transaction, so its merkle root is the hash of that
    transaction. Building it is deterministic, the same inputs always give the same block.
    """
    coinbase = create_genesis_coinbase(timestamp, output_script, reward)
    header = BlockHeader(
        version=version,
        prev_block=NULL_HASH,
        merkle_root=build_merkle_root([coinbase.hash]),
        timestamp=time,
        bits=bits,
        nonce=nonce,
    )
    return Block(header, (coinbase,))


class GenesisParams(BaseModel):
    """Literal inputs of the genesis block of a network, together with the hashes it is known to have."""

    # Text embedded in the coinbase script, proving the chain did not start before it was written.
    timestamp: str

    # Script that receives the genesis reward.
    output_script: HexBytes

    time: NonNegativeInt
    nonce: NonNegativeInt
    bits: Uint32Hex
    version: int

    # Genesis reward, in base units.
    reward: PositiveInt

    # Recorded hash of the genesis block.
    block_hash: Hash256

    # Recorded merkle root, not every network records one.
    merkle_root: Optional[Hash256] = None

    def build(self) -> Block:
        return build_genesis(
            timestamp=self.timestamp,
            output_script=self.output_script,
            time=self.time,
            nonce=self.nonce,
            bits=self.bits,
            version=self.version,
            reward=self.reward,
        )

    def build_verified(self) -> Block:
        """Build the genesis block and check it against the recorded hashes."""
        block = self.build()
        verify_genesis(block, block_hash=self.block_hash, merkle_root=self.merkle_root)
        return block


def verify_genesis(block: Block, *, block_hash: bytes, merkle_root: Optional[bytes] = None) -> None:
    """Check a built genesis block against its recorded hash and, if given, merkle root.

    Raises GenesisIntegrityError on any mismatch.
    """
    log = logger.new()

    if block.hash != block_hash:
        raise GenesisIntegrityError(
            f'genesis block hash mismatch: computed {block.hash.hex()}, expected {block_hash.hex()}'
        )

    if merkle_root is not None and block.header.merkle_root != merkle_root:
        raise GenesisIntegrityError(
            f'genesis merkle root mismatch: computed {block.header.merkle_root.hex()}, expected {merkle_root.hex()}'
        )

    log.debug('genesis block verified', hash=block_hash.hex())
