"""Tests for ec2docker.paths module."""

import pathlib

import pytest

from ec2docker.paths import Paths


def test_paths_root_with_ec2docker_root_set(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that Paths.root returns EC2DOCKER_ROOT when set."""
    test_path = "/custom/deployments/path"
    monkeypatch.setenv("EC2DOCKER_ROOT", test_path)

    paths = Paths()
    assert paths.root == pathlib.Path(test_path)


def test_paths_root_without_ec2docker_root_raises_error(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that Paths.root raises RuntimeError when EC2DOCKER_ROOT not set."""
    monkeypatch.delenv("EC2DOCKER_ROOT", raising=False)

    paths = Paths()
    with pytest.raises(RuntimeError, match="EC2DOCKER_ROOT environment variable not set"):
        _ = paths.root


def test_paths_deployments(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that deployments property works with EC2DOCKER_ROOT."""
    test_path = "/custom/deployments"
    monkeypatch.setenv("EC2DOCKER_ROOT", test_path)

    paths = Paths()
    assert paths.deployments == pathlib.Path(test_path) / "__deploy__"


def test_ec2docker_root_fixture_sets_environment(ec2docker_root: pathlib.Path) -> None:
    """Test that ec2docker_root fixture sets EC2DOCKER_ROOT environment variable."""
    assert Paths().root == ec2docker_root
