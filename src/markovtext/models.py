"""
Pydantic models for markovtext configuration and reports.
"""

from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .constants import (
    CONFIGURATION_SCHEMA_VERSION,
    DEFAULT_OUTPUT_SIZE,
    DEFAULT_STATE_INDEX,
    DEFAULT_STATE_SIZE,
)
from .model import MarkovModel


class GenerationConfiguration(BaseModel):
    """
    Configuration for training and generation runs.

    :ivar schema_version: Configuration schema version.
    :vartype schema_version: int
    :ivar output_size: Approximate number of tokens to generate.
    :vartype output_size: int
    :ivar state_size: Chain order used when training from text.
    :vartype state_size: int
    :ivar state_index: State index backend identifier.
    :vartype state_index: str
    :ivar seed: Optional random seed for reproducible output.
    :vartype seed: int or None
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: int = Field(default=CONFIGURATION_SCHEMA_VERSION, ge=1)
    output_size: int = Field(default=DEFAULT_OUTPUT_SIZE, ge=0)
    state_size: int = Field(default=DEFAULT_STATE_SIZE, ge=1)
    state_index: Literal["hash", "linear"] = DEFAULT_STATE_INDEX
    seed: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _validate_schema_version(self) -> "GenerationConfiguration":
        if self.schema_version != CONFIGURATION_SCHEMA_VERSION:
            raise ValueError(f"Unsupported configuration schema version: {self.schema_version}")
        return self


class ModelSummary(BaseModel):
    """
    Summary of a trained or loaded model.

    :ivar state_size: Chain order.
    :vartype state_size: int
    :ivar states: Number of registered states.
    :vartype states: int
    :ivar matrix_shape: Matrix dimensions.
    :vartype matrix_shape: tuple[int, int]
    :ivar stored_entries: Number of stored matrix entries.
    :vartype stored_entries: int
    :ivar total_transitions: Sum of all stored counts.
    :vartype total_transitions: int
    :ivar dead_ends: Number of states whose row has no entries.
    :vartype dead_ends: int
    """

    model_config = ConfigDict(extra="forbid")

    state_size: int = Field(ge=1)
    states: int = Field(ge=0)
    matrix_shape: Tuple[int, int]
    stored_entries: int = Field(ge=0)
    total_transitions: int = Field(ge=0)
    dead_ends: int = Field(ge=0)

    @classmethod
    def from_model(cls, model: MarkovModel) -> "ModelSummary":
        return cls(
            state_size=model.state_size,
            states=len(model.states),
            matrix_shape=model.matrix.shape,
            stored_entries=model.matrix.nnz,
            total_transitions=model.matrix.total(),
            dead_ends=model.dead_end_count(),
        )
