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

import struct
from enum import IntEnum


class Opcode(IntEnum):
    OP_0 = 0x00
    OP_PUSHDATA1 = 0x4C
    OP_PUSHDATA2 = 0x4D
    OP_PUSHDATA4 = 0x4E
    OP_1NEGATE = 0x4F
    OP_1 = 0x51
    OP_CHECKSIG = 0xAC


def encode_script_num(number: int) -> bytes:
    """Minimal little-endian encoding of a script number, sign on the most significant bit.

    >>> encode_script_num(0)
    b''
    >>> encode_script_num(4).hex()
    '04'
    >>> encode_script_num(486604799).hex()
    'ffff001d'
    >>> encode_script_num(128).hex()
    '8000'
    >>> encode_script_num(-128).hex()
    '8080'
    >>> encode_script_num(-1).hex()
    '81'
    """
    if number == 0:
        return b''

    negative = number < 0
    absvalue = abs(number)
    result = bytearray()
    while absvalue:
        result.append(absvalue & 0xff)
        absvalue >>= 8

    # the sign bit is taken, so an extra byte is needed to hold it
    if result[-1] & 0x80:
        result.append(0x80 if negative else 0x00)
    elif negative:
        result[-1] |= 0x80

    return bytes(result)


class Script:
    """Helper to build scripts abstracting the corner cases of pushing data and numbers.

    When pushing data to the stack the prefix depends on the data length:
    - len(data) < OP_PUSHDATA1: [len(data) data]
    - len(data) <= 0xff: [OP_PUSHDATA1 len(data) data]
    - len(data) <= 0xffff: [OP_PUSHDATA2 len(data) data]
    - otherwise: [OP_PUSHDATA4 len(data) data]

    >>> script = Script()
    >>> script.push_int(486604799)
    >>> script.push_num(4)
    >>> script.push_data(b'abc')
    >>> script.data.hex()
    '04ffff001d010403616263'
    """
    def __init__(self) -> None:
        self.data = b''

    def __bytes__(self) -> bytes:
        return self.data

    def add_opcode(self, opcode: Opcode) -> None:
        self.data += bytes([opcode])

    def push_data(self, data: bytes) -> None:
        length = len(data)
        if length < Opcode.OP_PUSHDATA1:
            prefix = bytes([length])
        elif length <= 0xff:
            prefix = bytes([Opcode.OP_PUSHDATA1, length])
        elif length <= 0xffff:
            prefix = bytes([Opcode.OP_PUSHDATA2]) + struct.pack('<H', length)
        else:
            prefix = bytes([Opcode.OP_PUSHDATA4]) + struct.pack('<I', length)
        self.data += prefix + data

    def push_int(self, number: int) -> None:
        """Push an integer using the small-integer opcodes when possible.

        >>> script = Script()
        >>> for n in (0, -1, 1, 16, 17):
        ...     script.push_int(n)
        >>> script.data.hex()
        '004f51600111'
        """
        if number == 0:
            self.add_opcode(Opcode.OP_0)
        elif number == -1:
            self.add_opcode(Opcode.OP_1NEGATE)
        elif 1 <= number <= 16:
            self.data += bytes([Opcode.OP_1 + number - 1])
        else:
            self.push_data(encode_script_num(number))

    def push_num(self, number: int) -> None:
        """Push a script number as data, never using the small-integer opcodes."""
        self.push_data(encode_script_num(number))


def create_p2pk_script(public_key: bytes) -> bytes:
    """Return a pay-to-pubkey output script: <pubkey> OP_CHECKSIG.

    >>> create_p2pk_script(bytes(33)).hex()
    '21000000000000000000000000000000000000000000000000000000000000000000ac'
    """
    script = Script()
    script.push_data(public_key)
    script.add_opcode(Opcode.OP_CHECKSIG)
    return bytes(script)
