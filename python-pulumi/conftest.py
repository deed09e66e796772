"""Shared pytest fixtures for ec2docker Pulumi tests.

This module provides common fixtures used across test files:
- ec2docker_root: Sets EC2DOCKER_ROOT environment variable
- pulumi_mocks: Standard Pulumi mock class for resource tests
- recording_mocks: Installed Pulumi mocks that remember every registered resource
- deployment: Deployment for the "svelic" group with default configuration
- write_deployment_yaml: Writes an ec2docker.yaml for a named deployment
"""

import json
import pathlib
import sys
import typing

import pulumi
import pytest
import yaml

HERE = pathlib.Path(__file__).absolute().parent

sys.path.insert(0, str(HERE / "src"))

import ec2docker  # noqa: E402
import ec2docker.deployment  # noqa: E402

MOCK_VPC_ID = "vpc-0default"
MOCK_SUBNET_IDS = ["subnet-0c", "subnet-0a", "subnet-0b"]
MOCK_AMI_ID = "ami-0amazonlinux2"
MOCK_LB_ZONE_ID = "Z23TAZ1LSLMOCK"


# ============================================================================
# Environment Setup Fixtures
# ============================================================================


@pytest.fixture
def ec2docker_root(monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> pathlib.Path:
    """Set EC2DOCKER_ROOT environment variable to a temporary directory.

    Usage:
        def test_something(ec2docker_root):
            paths = Paths()
            assert paths.root == ec2docker_root
    """
    monkeypatch.setenv("EC2DOCKER_ROOT", str(tmp_path))
    return tmp_path


@pytest.fixture
def write_deployment_yaml(ec2docker_root: pathlib.Path) -> typing.Callable[[str, dict[str, typing.Any]], pathlib.Path]:
    """Return a function writing ``{"spec": spec}`` to a deployment's config file."""

    def write(name: str, spec: dict[str, typing.Any]) -> pathlib.Path:
        d = ec2docker_root / "__deploy__" / name
        d.mkdir(parents=True, exist_ok=True)
        path = d / ec2docker.deployment.CONFIG_FILENAME
        path.write_text(yaml.safe_dump({"spec": spec}))
        return path

    return write


# ============================================================================
# Pulumi Mock Fixtures
# ============================================================================


class StandardPulumiMocks(pulumi.runtime.Mocks):
    """Standard Pulumi mocks for testing Pulumi resources.

    Returns resource names as IDs and echoes back all inputs as outputs.
    """

    def new_resource(self, args: pulumi.runtime.MockResourceArgs) -> tuple[str | None, dict[typing.Any, typing.Any]]:
        """Mock resource creation - returns resource name as ID and inputs as outputs."""
        return args.name, dict(args.inputs)

    def call(
        self, args: pulumi.runtime.MockCallArgs
    ) -> dict[typing.Any, typing.Any] | tuple[dict[typing.Any, typing.Any], list[tuple[str, str]] | None]:
        """Mock function calls - returns empty dict."""
        return {}


class RecordingPulumiMocks(StandardPulumiMocks):
    """Pulumi mocks that stub the lookups ec2docker makes and record every resource.

    Load balancers and target groups get an ARN; load balancers also get a
    DNS name and a canonical hosted zone id, as the provider would return.
    """

    def __init__(self) -> None:
        self.resources: list[pulumi.runtime.MockResourceArgs] = []
        self.calls: list[pulumi.runtime.MockCallArgs] = []

    def new_resource(self, args: pulumi.runtime.MockResourceArgs) -> tuple[str | None, dict[typing.Any, typing.Any]]:
        self.resources.append(args)

        outputs = dict(args.inputs)
        if args.typ.startswith("aws:lb/"):
            outputs["arn"] = f"arn:aws:elasticloadbalancing:eu-north-1:123456789012:{args.name}"
        if args.typ == "aws:lb/loadBalancer:LoadBalancer":
            outputs["dnsName"] = f"{args.name}-1234567890.eu-north-1.elb.amazonaws.com"
            outputs["zoneId"] = MOCK_LB_ZONE_ID

        return args.name, outputs

    def call(
        self, args: pulumi.runtime.MockCallArgs
    ) -> dict[typing.Any, typing.Any] | tuple[dict[typing.Any, typing.Any], list[tuple[str, str]] | None]:
        self.calls.append(args)

        if args.token == "aws:ec2/getVpc:getVpc":
            return {"id": args.args.get("id") or MOCK_VPC_ID, "default": args.args.get("default", False)}
        if args.token == "aws:ec2/getSubnets:getSubnets":
            return {"id": "eu-north-1", "ids": MOCK_SUBNET_IDS}
        if args.token == "aws:ssm/getParameter:getParameter":
            return {"id": args.args["name"], "name": args.args["name"], "value": MOCK_AMI_ID}
        if args.token == "aws:iam/getPolicyDocument:getPolicyDocument":
            return {
                "id": "policy",
                "json": json.dumps({"Version": "2012-10-17", "Statement": args.args.get("statements", [])}),
            }

        return {}

    def of_type(self, typ: str) -> list[pulumi.runtime.MockResourceArgs]:
        return [r for r in self.resources if r.typ == typ]

    def named(self, name: str) -> pulumi.runtime.MockResourceArgs:
        (resource,) = [r for r in self.resources if r.name == name]
        return resource


@pytest.fixture
def pulumi_mocks() -> type[pulumi.runtime.Mocks]:
    """Returns the standard Pulumi mocks class.

    The mocks are not automatically set - you must call set_mocks() in your
    test or at module level.
    """
    return StandardPulumiMocks


@pytest.fixture
def recording_mocks() -> RecordingPulumiMocks:
    """Install RecordingPulumiMocks for a stack named "svelic" and return them.

    Usage:
        @pulumi.runtime.test
        def test_my_resource(recording_mocks, deployment):
            app = EC2DockerApplication(deployment)

            def check(_):
                assert recording_mocks.of_type("aws:ec2/instance:Instance")

            return app.app.instance.id.apply(check)
    """
    mocks = RecordingPulumiMocks()
    pulumi.runtime.set_mocks(mocks, project="ec2docker", stack="svelic", preview=False)
    return mocks


# ============================================================================
# Deployment Fixtures
# ============================================================================


@pytest.fixture
def deployment(ec2docker_root: pathlib.Path) -> ec2docker.deployment.Deployment:
    """A Deployment for group "svelic" with every setting at its default.

    EC2DOCKER_ROOT is set to a temporary directory and no config file exists.
    """
    d = ec2docker.deployment.Deployment(name="svelic", load_yaml=False)
    d.cfg = ec2docker.DeploymentConfig(group_name="svelic")
    return d
