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

import hashlib
import struct
from typing import NamedTuple, Sequence

NULL_HASH = b'\x00' * 32
SEQUENCE_FINAL = 0xffff_ffff


class BlockHeader(NamedTuple):
    version: int  # Block version information (note, this is signed), also carries the mining algorithm
    prev_block: bytes  # The hash value of the previous block this particular block references
    merkle_root: bytes  # The reference to a Merkle tree collection which is a hash of all transactions on this block
    timestamp: int  # A timestamp recording when this block was created (Will overflow in 2106)
    bits: int  # The calculated difficulty target being used for this block, in compact form
    nonce: int = 0  # The nonce used to generate this block

    def __bytes__(self) -> bytes:
        """ Convert to byte representation of the header.

        | Size | Field       | Type     |
        |------|-------------|----------|
        | 4    | version     | int32_t  |
        | 32   | prev_block  | char[32] |
        | 32   | merkle_root | char[32] |
        | 4    | timestamp   | uint32_t |
        | 4    | bits        | uint32_t |
        | 4    | nonce       | uint32_t |

        Hashes are stored in display order and reversed when serialized.

        >>> header = BlockHeader(
        ...     version=545259520,
        ...     prev_block=bytes.fromhex('00000000000000819567c00d364803c608f50d3baa50f6fb6ced4acee1f38ef4'),
        ...     merkle_root=bytes.fromhex('8927d337549640aaafdaa0dcbdb9c09972533a66bfb287aba3eb9c1be5b523ba'),
        ...     timestamp=1558960609,
        ...     bits=0x1a013e45,
        ...     nonce=175544256,
        ... )
        >>> bytes(header).hex() == (
        ...     '00008020f48ef3e1ce4aed6cfbf650aa3b0df508c60348360dc0679581000000000000'
        ...     '00ba23b5e51b9ceba3ab87b2bf663a537299c0b9bddca0daafaa40965437d32789e1d9eb5c'
        ...     '453e011ac097760a'
        ... )
        True
        """
        return b''.join([
            encode_int32(self.version),
            encode_revbytes(self.prev_block),
            encode_revbytes(self.merkle_root),
            encode_uint32(self.timestamp),
            encode_uint32(self.bits),
            encode_uint32(self.nonce),
        ])

    @property
    def hash(self) -> bytes:
        """ Calculated hash from header info."""
        return sha256d_hash(bytes(self))


def _merkle_concat(left: bytes, right: bytes) -> bytes:
    """ Concatenate two byte sequences in the way that works without altering the hashing function.
    """
    return bytes(reversed(left)) + bytes(reversed(right))


def build_merkle_root(merkle_leaves: Sequence[bytes]) -> bytes:
    """ Return the merkle root hash from hash leaves, a single leaf is its own root.

    >>> build_merkle_root([bytes.fromhex('aa' * 32)]).hex() == 'aa' * 32
    True
    """
    leaves = list(merkle_leaves)
    assert len(leaves) > 0
    while len(leaves) > 1:
        if len(leaves) % 2:
            leaves.append(leaves[-1])
        iter_leaves = iter(leaves)
        leaves = [sha256d_hash(_merkle_concat(left, right)) for left, right in zip(iter_leaves, iter_leaves)]
    return leaves[0]


class OutPoint(NamedTuple):
    hash: bytes  # The hash of the referenced transaction.
    idx: int  # The index of the specific output in the transaction. The first output is 0, etc.

    def __bytes__(self) -> bytes:
        """ Convert to byte representation of the outpoint.

        | Size | Field | Type     |
        |------|-------|----------|
        | 32   | hash  | char[32] |
        | 4    | index | uint32_t |
        """
        return encode_revbytes(self.hash) + encode_uint32(self.idx)

    @classmethod
    def null(cls) -> 'OutPoint':
        return cls(NULL_HASH, 0xffff_ffff)

    def is_null(self) -> bool:
        return self.idx == 0xffff_ffff and self.hash == NULL_HASH


class TxInput(NamedTuple):
    previous_output: OutPoint  # The previous output transaction reference
    script_sig: bytes  # Computational Script for confirming transaction authorization
    sequence: int = SEQUENCE_FINAL  # default value disables nLockTime

    def __bytes__(self) -> bytes:
        """ Convert to byte representation of the input.

        | Size | Field            | Type     |
        |------|------------------|----------|
        | 36   | previous_output  | outpoint |
        | 1+   | script length    | var_int  |
        | ?    | signature script | uchar[]  |
        | 4    | sequence         | uint32_t |
        """
        return bytes(self.previous_output) + encode_bytearray(self.script_sig) + encode_uint32(self.sequence)

    @classmethod
    def coinbase(cls, script_sig: bytes) -> 'TxInput':
        """ Create a coinbase input, which spends nothing and carries arbitrary data in its script.
        """
        return cls(OutPoint.null(), script_sig)


class TxOutput(NamedTuple):
    value: int  # Transaction Value, in base units
    script_pubkey: bytes = b''  # Usually contains the public key as a script to claim this output.

    def __bytes__(self) -> bytes:
        """ Convert to byte representation of the output.

        | Size | Field            | Type    |
        |------|------------------|---------|
        | 8    | value            | int64_t |
        | 1+   | pk_script length | var_int |
        | ?    | pk_script        | uchar[] |
        """
        return struct.pack('<q', self.value) + encode_bytearray(self.script_pubkey)


class Transaction(NamedTuple):
    version: int = 1  # Transaction data format version (note, this is signed)
    inputs: tuple[TxInput, ...] = ()  # A list of 1 or more transaction inputs or sources for coins
    outputs: tuple[TxOutput, ...] = ()  # A list of 1 or more transaction outputs or destinations for coins
    lock_time: int = 0  # The block number or timestamp at which this transaction is unlocked

    def __bytes__(self) -> bytes:
        """ Convert to byte representation of the transaction, without witness data.

        | Size | Field        | Type     |
        |------|--------------|----------|
        | 4    | version      | int32_t  |
        | 1+   | tx_in count  | var_int  |
        | 41+  | tx_in        | tx_in[]  |
        | 1+   | tx_out count | var_int  |
        | 9+   | tx_out       | tx_out[] |
        | 4    | lock_time    | uint32_t |
        """
        return b''.join([
            encode_int32(self.version),
            encode_list([bytes(i) for i in self.inputs]),
            encode_list([bytes(o) for o in self.outputs]),
            encode_uint32(self.lock_time),
        ])

    @property
    def hash(self) -> bytes:
        """ The hash of the transaction.
        """
        return sha256d_hash(bytes(self))

    def is_coinbase(self) -> bool:
        """ Whether this transaction is a coinbase transaction.
        """
        return len(self.inputs) == 1 and self.inputs[0].previous_output.is_null()


class Block(NamedTuple):
    header: BlockHeader
    transactions: tuple[Transaction, ...]

    def __bytes__(self) -> bytes:
        return bytes(self.header) + encode_list([bytes(t) for t in self.transactions])

    @property
    def hash(self) -> bytes:
        return self.header.hash


def sha256d_hash(data: bytes) -> bytes:
    """ Double SHA-256 hash, bytes to bytes, in display order."""
    return encode_revbytes(hashlib.sha256(hashlib.sha256(data).digest()).digest())


def encode_varint(number: int) -> bytes:
    """ Variable length integer encoding.

    >>> encode_varint(0xfc).hex()
    'fc'
    >>> encode_varint(0xfd).hex()
    'fdfd00'
    """
    if number < 0xfd:
        return struct.pack('<B', number)
    elif number <= 0xffff:
        return b'\xfd' + struct.pack('<H', number)
    elif number <= 0xffff_ffff:
        return b'\xfe' + struct.pack('<I', number)
    else:
        return b'\xff' + struct.pack('<Q', number)


def encode_int32(number: int) -> bytes:
    """ Encode signed 32-bit integer.
    """
    return struct.pack('<i', number)


def encode_uint32(number: int) -> bytes:
    """ Encode unsigned 32-bit integer.
    """
    return struct.pack('<I', number)


def encode_revbytes(array: bytes) -> bytes:
    """ Return bytes in reverse order.
    """
    return bytes(reversed(array))


def encode_bytearray(array: bytes) -> bytes:
    """ Variable length bytes/bytearray encoding.
    """
    return encode_varint(len(array)) + array


def encode_list(buffer: Sequence[bytes]) -> bytes:
    """ Variable length list encoding of already serialized elements.
    """
    return encode_varint(len(buffer)) + b''.join(buffer)
