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

from myriad.conf.settings import NetworkName


def add_network_args(parser: ArgumentParser) -> None:
    parser.add_argument('--network', type=str, default=NetworkName.MAINNET.value,
                        help=f'Network to use: {", ".join(name.value for name in NetworkName)}')
    parser.add_argument('-vbparams', '--vbparams', type=str, action='append', default=[],
                        metavar='DEPLOYMENT:START:END',
                        help='Use given start and timeout for a version bits deployment (regtest only)')


def create_parser() -> ArgumentParser:
    from myriad.cli.util import create_parser
    parser = create_parser()
    add_network_args(parser)
    parser.add_argument('--indent', type=int, default=2, help='Indentation of the JSON output')
    return parser


def execute(args: Namespace) -> None:
    from myriad.cli.util import check_or_exit
    from myriad.conf.exceptions import ChainParamsError
    from myriad.conf.get_params import select_params

    try:
        params = select_params(args.network, vbparams=args.vbparams)
    except ChainParamsError as e:
        check_or_exit(False, f'Error: {e}')
        return

    print(params.model_dump_json(indent=args.indent))


def main():
    parser = create_parser()
    args = parser.parse_args(sys.argv[1:])
    execute(args)
