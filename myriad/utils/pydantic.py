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

from typing import Annotated, Any, Union

from pydantic import BaseModel as PydanticBaseModel, ConfigDict
from pydantic.functional_serializers import PlainSerializer
from pydantic.functional_validators import BeforeValidator, PlainValidator

UINT32_MAX = 2**32 - 1
UINT256_MAX = 2**256 - 1


def parse_hex_str(hex_str: Union[str, bytes]) -> bytes:
    """Parse a raw hex string into bytes.

    >>> parse_hex_str('x32')
    b'2'
    >>> parse_hex_str('af4576ee').hex()
    'af4576ee'
    >>> parse_hex_str(b'\\x01')
    b'\\x01'
    """
    if isinstance(hex_str, str):
        return bytes.fromhex(hex_str.lstrip('x'))

    if not isinstance(hex_str, bytes):
        raise ValueError(f'expected \'str\' or \'bytes\', got {hex_str}')

    return hex_str


def parse_hash256(value: Union[str, bytes]) -> bytes:
    """Parse a 256-bit hash, left padding short hex strings with zeroes.

    Hashes are kept in display order, the same order used by block explorers and RPC.

    >>> parse_hash256('0x00') == bytes(32)
    True
    >>> parse_hash256('ff').hex()
    '00000000000000000000000000000000000000000000000000000000000000ff'
    """
    if isinstance(value, str):
        hex_str = value[2:] if value.startswith('0x') else value
        if len(hex_str) > 64:
            raise ValueError(f'hash too long: {value}')
        return bytes.fromhex(hex_str.zfill(64))

    if not isinstance(value, bytes):
        raise ValueError(f'expected \'str\' or \'bytes\', got {value}')

    if len(value) != 32:
        raise ValueError(f'hash must have 32 bytes, got {len(value)}')

    return value


def parse_uint256(value: Any) -> int:
    """Parse an unsigned 256-bit integer from an int or a hex string.

    >>> parse_uint256('0x00')
    0
    >>> parse_uint256('00000fffff' + 'f' * 54) == 2**236 - 1
    True
    >>> parse_uint256(-1)
    Traceback (most recent call last):
     ...
    ValueError: value out of the uint256 range: -1
    """
    if isinstance(value, str):
        value = int(value[2:] if value.startswith('0x') else value, 16)

    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f'expected \'str\' or \'int\', got {value}')

    if not 0 <= value <= UINT256_MAX:
        raise ValueError(f'value out of the uint256 range: {value}')

    return value


def parse_uint32(value: Any) -> int:
    """Parse an unsigned 32-bit integer, hex strings are accepted for compact targets and magic numbers.

    >>> parse_uint32('1e0fffff') == 0x1e0fffff
    True
    >>> parse_uint32(0x207fffff) == 0x207fffff
    True
    """
    if isinstance(value, str):
        value = int(value[2:] if value.startswith('0x') else value, 16)

    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f'expected \'str\' or \'int\', got {value}')

    if not 0 <= value <= UINT32_MAX:
        raise ValueError(f'value out of the uint32 range: {value}')

    return value


def _bytes_to_hex(value: bytes) -> str:
    return value.hex()


def _uint256_to_hex(value: int) -> str:
    return f'{value:064x}'


def _uint32_to_hex(value: int) -> str:
    return f'{value:08x}'


HexBytes = Annotated[bytes, BeforeValidator(parse_hex_str), PlainSerializer(_bytes_to_hex, return_type=str)]
Hash256 = Annotated[bytes, BeforeValidator(parse_hash256), PlainSerializer(_bytes_to_hex, return_type=str)]
Uint256 = Annotated[int, PlainValidator(parse_uint256), PlainSerializer(_uint256_to_hex, return_type=str)]
Uint32Hex = Annotated[int, PlainValidator(parse_uint32), PlainSerializer(_uint32_to_hex, return_type=str)]


class BaseModel(PydanticBaseModel):
    """Substitute for pydantic's BaseModel.
    This class defines a project BaseModel to be used instead of pydantic's, setting stricter global configurations.
    Other configurations can be set on a case by case basis.

    Read: https://docs.pydantic.dev/latest/concepts/config/
    """
    model_config = ConfigDict(extra='forbid', frozen=True)
