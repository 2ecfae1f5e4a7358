"""Functional tests for configuration loading precedence and validation."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from records_api import config as config_mod
from records_api.config import load_config
from records_api.logic.etag_generator import EtagGenerator


@pytest.fixture()
def isolated_config(tmp_path, monkeypatch):
    """Run load_config against an empty working directory and clean env."""
    monkeypatch.chdir(tmp_path)
    for key in ("DATABASE_URL", "ETAG_ALGORITHM", "RECORDS_UPDATED_AT_FIELD"):
        monkeypatch.delenv(key, raising=False)
    return tmp_path


def test_defaults(isolated_config):
    cfg = load_config()
    assert cfg.database.dsn == config_mod.DEFAULT_DSN
    assert cfg.etag.algorithm == "sha1"
    assert cfg.records.updated_at_field == "updated_at"


def test_json_file_then_config_dir_then_env(isolated_config, monkeypatch):
    """Environment beats config/ files, which beat records_config.json."""
    # Arrange
    (isolated_config / "records_config.json").write_text(
        json.dumps({"etag": {"algorithm": "md5"}, "records": {"updated_at_field": "modified_on"}}),
        encoding="utf-8",
    )
    # Act / Assert: JSON base
    cfg = load_config()
    assert cfg.etag.algorithm == "md5"
    assert cfg.records.updated_at_field == "modified_on"
    # config/ text file overrides JSON
    (isolated_config / "config").mkdir()
    (isolated_config / "config" / "etag.algorithm").write_text("sha256\n", encoding="utf-8")
    assert load_config().etag.algorithm == "sha256"
    # Environment overrides everything
    monkeypatch.setenv("ETAG_ALGORITHM", "SHA512")
    assert load_config().etag.algorithm == "sha512"


def test_blank_updated_at_field_disables_last_modified(isolated_config, monkeypatch):
    monkeypatch.setenv("RECORDS_UPDATED_AT_FIELD", "")
    assert load_config().records.updated_at_field is None


def test_unknown_algorithm_is_rejected(isolated_config, monkeypatch):
    monkeypatch.setenv("ETAG_ALGORITHM", "rot13")
    with pytest.raises(ValidationError):
        load_config()


def test_generator_from_config(isolated_config, monkeypatch):
    monkeypatch.setenv("ETAG_ALGORITHM", "sha256")
    generator = EtagGenerator.from_config(load_config())
    assert generator.algorithm == "sha256"
