"""Shared pytest fixtures."""

import pytest

import sbom_dependents.config
from sbom_dependents.config import reset_config


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests independent of the developer's config files and env."""
    monkeypatch.setattr(sbom_dependents.config, "PROJECT_ROOT", tmp_path)
    for var in (
        "SBOM_DEPENDENTS_ROOT_NODE",
        "SBOM_DEPENDENTS_VERBOSE",
        "SBOM_DEPENDENTS_MAX_DEPTH",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield tmp_path
    reset_config()
