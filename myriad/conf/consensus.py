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

from types import MappingProxyType
from typing import Mapping

from pydantic import NonNegativeInt, PositiveInt, field_serializer, field_validator, model_validator

from myriad.conf.deployment import Deployment, DeploymentPos
from myriad.utils.pydantic import BaseModel, Hash256, Uint256


class ConsensusParams(BaseModel):
    """Consensus rules of a network, everything a validating node must agree on."""

    # Block subsidy halving intervals, before and after each longblocks phase.
    subsidy_halving_interval: PositiveInt
    subsidy_halving_interval_v2a: PositiveInt
    subsidy_halving_interval_v2b: PositiveInt
    subsidy_halving_interval_v2c: PositiveInt

    # The only block allowed to break the BIP16 (P2SH) rules.
    bip16_exception: Hash256

    # Block height and hash at which BIP34 becomes active.
    bip34_height: NonNegativeInt
    bip34_hash: Hash256

    # Block heights at which BIP65 and BIP66 become active.
    bip65_height: NonNegativeInt
    bip66_height: NonNegativeInt

    # Block height at which reserved algorithm ids are enforced.
    mip2_height: NonNegativeInt

    # Legacy blocks window, used to keep v0.11 nodes on the same chain.
    legbit_start: NonNegativeInt
    legbit_stop: NonNegativeInt

    # Auxiliary proof-of-work (merged mining).
    start_aux_pow: NonNegativeInt
    auxpow_chain_id: NonNegativeInt
    strict_chain_id: bool

    # Minimum block heights of the algorithm switch forks.
    fork1_min_block: NonNegativeInt
    fork2_min_block: NonNegativeInt

    # Longblocks start heights, each one switching to a longer block spacing.
    longblocks_start_v1a: NonNegativeInt
    longblocks_start_v1b: NonNegativeInt
    longblocks_start_v1c: NonNegativeInt

    # Proof-of-work limit, the easiest target allowed.
    pow_limit: Uint256

    # Difficulty retargeting, all times in seconds.
    pow_target_timespan: PositiveInt
    pow_target_spacing: PositiveInt
    pow_target_spacing_v1: PositiveInt
    pow_target_spacing_v2: PositiveInt
    pow_target_spacing_v3a: PositiveInt
    pow_target_spacing_v3b: PositiveInt
    pow_target_spacing_v3c: PositiveInt

    # Number of blocks the retargeting timespan is averaged over.
    averaging_interval: PositiveInt

    # Maximum retargeting adjustments, in percent.
    max_adjust_down: NonNegativeInt
    max_adjust_up_v1: NonNegativeInt
    max_adjust_up_v2: NonNegativeInt

    block_diff_adjust_v2: NonNegativeInt

    # Block height at which the 60 seconds target spacing kicks in.
    phase2_timespan_start: NonNegativeInt

    block_time_warp_prevent_start_1: NonNegativeInt
    block_time_warp_prevent_start_2: NonNegativeInt
    block_time_warp_prevent_start_3: NonNegativeInt

    pow_allow_min_difficulty_blocks: bool
    pow_no_retargeting: bool

    # Limits on how many sequential blocks may be mined with the same algorithm.
    block_sequential_algo_rule_start_1: NonNegativeInt
    block_sequential_algo_rule_start_2: NonNegativeInt
    block_sequential_algo_max_count_1: PositiveInt
    block_sequential_algo_max_count_2: PositiveInt
    block_sequential_algo_max_count_3: PositiveInt

    # Heights at which the different multi-algorithm work computations start.
    block_algo_work_weight_start: NonNegativeInt
    block_algo_normalised_work_start: NonNegativeInt
    block_algo_normalised_work_decay_start_1: NonNegativeInt
    block_algo_normalised_work_decay_start_2: NonNegativeInt
    geo_avg_work_start: NonNegativeInt

    # Number of signalling blocks in a confirmation window needed to lock in a deployment.
    rule_change_activation_threshold: PositiveInt
    miner_confirmation_window: PositiveInt

    # Soft-fork deployments, read-only after validation.
    deployments: Mapping[DeploymentPos, Deployment]

    # The best chain should have at least this much work.
    minimum_chain_work: Uint256

    # Signatures in the ancestors of this block are assumed valid by default.
    default_assume_valid: Hash256

    @field_validator('deployments')
    @classmethod
    def _validate_deployments(
        cls,
        deployments: Mapping[DeploymentPos, Deployment],
    ) -> Mapping[DeploymentPos, Deployment]:
        """Validates that every known deployment is defined and that no two deployments share a bit."""
        missing = [pos.value for pos in DeploymentPos if pos not in deployments]
        if missing:
            raise ValueError(f'missing deployments: {missing}')

        bits = [deployment.bit for deployment in deployments.values()]
        if len(bits) != len(set(bits)):
            raise ValueError(f'deployments must use distinct bits: {bits}')

        return MappingProxyType(dict(deployments))

    @field_serializer('deployments')
    def _serialize_deployments(
        self,
        deployments: Mapping[DeploymentPos, Deployment],
    ) -> dict[DeploymentPos, Deployment]:
        return dict(deployments)

    @model_validator(mode='after')
    def _validate_threshold(self) -> 'ConsensusParams':
        """Validates that the activation threshold fits in the confirmation window."""
        if self.rule_change_activation_threshold > self.miner_confirmation_window:
            raise ValueError(
                f'rule_change_activation_threshold must not exceed miner_confirmation_window: '
                f'{self.rule_change_activation_threshold} > {self.miner_confirmation_window}'
            )

        return self

    def get_deployment(self, pos: DeploymentPos) -> Deployment:
        return self.deployments[pos]
