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

import sys
from argparse import ArgumentParser, Namespace


def create_parser() -> ArgumentParser:
    from myriad.cli.show_params import add_network_args
    from myriad.cli.util import create_parser
    parser = create_parser()
    add_network_args(parser)
    parser.add_argument('--time', type=int, help='Override the genesis block timestamp')
    parser.add_argument('--nonce', type=int, help='Override the genesis block nonce')
    parser.add_argument('--bits', type=str, help='Override the genesis block compact target, in hex')
    parser.add_argument('--version', type=int, help='Override the genesis block version')
    parser.add_argument('--raw', action='store_true', help='Also print the serialized block')
    return parser


def execute(args: Namespace) -> None:
    from myriad.cli.util import check_or_exit
    from myriad.conf.exceptions import ChainParamsError
    from myriad.conf.get_params import create_chain_params
    from myriad.utils.pydantic import parse_uint32

    try:
        params = create_chain_params(args.network, vbparams=args.vbparams)
    except ChainParamsError as e:
        check_or_exit(False, f'Error: {e}')
        return

    genesis = params.GENESIS
    overrides = dict(time=args.time, nonce=args.nonce, version=args.version)
    if args.bits is not None:
        try:
            overrides['bits'] = parse_uint32(args.bits)
        except ValueError as e:
            check_or_exit(False, f'Error: invalid bits {args.bits}: {e}')
            return
    overrides = {key: value for key, value in overrides.items() if value is not None}

    if overrides:
        # a block built from overridden inputs is not expected to match the recorded hashes
        block = genesis.model_copy(update=overrides).build()
    else:
        block = params.genesis_block

    # The output format is compatible with the yaml settings files
    print('time:', block.header.timestamp)
    print('nonce:', block.header.nonce)
    print(f"bits: '{block.header.bits:08x}'")
    print('version:', block.header.version)
    print(f"block_hash: '{block.hash.hex()}'")
    print(f"merkle_root: '{block.header.merkle_root.hex()}'")
    if args.raw:
        print(f"raw: '{bytes(block).hex()}'")


def main():
    parser = create_parser()
    args = parser.parse_args(sys.argv[1:])
    execute(args)
