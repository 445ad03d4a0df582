"""
Configuration loading tests for markovtext.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from markovtext.configuration import (
    build_configuration,
    configuration_keys,
    load_configuration_view,
    parse_override_value,
    parse_overrides,
)
from markovtext.models import GenerationConfiguration


def test_override_values_are_parsed():
    assert parse_override_value("12") == 12
    assert parse_override_value(" -3 ") == -3
    assert parse_override_value("none") is None
    assert parse_override_value("linear") == "linear"


def test_overrides_accept_configuration_keys():
    assert parse_overrides(["output_size=10", "state_index=linear", "seed=null"]) == {
        "output_size": 10,
        "state_index": "linear",
        "seed": None,
    }
    assert parse_overrides(None) == {}


def test_unknown_override_key_names_known_keys():
    """
    A misspelled key is rejected before validation, with the accepted keys listed.
    """
    with pytest.raises(ValueError) as excinfo:
        parse_overrides(["outputsize=10"])
    message = str(excinfo.value)
    assert "'outputsize'" in message
    assert ", ".join(configuration_keys()) in message
    assert "state_size" in configuration_keys()


def test_malformed_override_is_rejected():
    with pytest.raises(ValueError, match="key=value"):
        parse_overrides(["output_size"])
    with pytest.raises(ValueError, match="Unknown configuration key"):
        parse_overrides(["=3"])


def test_configuration_files_compose_in_order(tmp_path):
    """
    Later configuration files win over earlier ones, and overrides win over files.
    """
    base = tmp_path / "base.yml"
    base.write_text("output_size: 50\nstate_size: 3\n", encoding="utf-8")
    local = tmp_path / "local.yml"
    local.write_text("state_size: 1\n", encoding="utf-8")
    assert load_configuration_view([str(base), str(local)]) == {
        "output_size": 50,
        "state_size": 1,
    }
    configuration = build_configuration([str(base), str(local)], {"output_size": 7})
    assert configuration.output_size == 7
    assert configuration.state_size == 1
    assert configuration.state_index == "hash"
    assert configuration.seed is None


def test_missing_and_non_mapping_files_are_rejected(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_configuration_view([str(tmp_path / "missing.yml")])
    listing = tmp_path / "list.yml"
    listing.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        load_configuration_view([str(listing)])


def test_yaml_dates_are_reported_as_invalid_configuration(tmp_path):
    dated = tmp_path / "dated.yml"
    dated.write_text("seed: 2024-01-01\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid generation configuration"):
        build_configuration([str(dated)])


def test_generation_configuration_validates_fields():
    assert GenerationConfiguration().output_size == 200
    assert GenerationConfiguration().state_size == 2
    with pytest.raises(ValidationError):
        GenerationConfiguration(schema_version=2)
    with pytest.raises(ValidationError):
        GenerationConfiguration(state_size=0)
    with pytest.raises(ValidationError):
        GenerationConfiguration(state_index="trie")
    with pytest.raises(ValidationError):
        GenerationConfiguration.model_validate({"unknown": 1})
