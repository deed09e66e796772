from __future__ import annotations

import dataclasses
import enum
import re

import ec2docker.junkdrawer

AWS_ALL_IPV4 = "0.0.0.0/0"
AWS_ALL_IPV6 = "::/0"
AWS_POLICY_ARN_PREFIX = "arn:aws:iam::aws:policy"
EC2_SERVICE_PRINCIPAL = "ec2.amazonaws.com"

DEFAULT_REGION = "eu-north-1"
DEFAULT_HOSTED_ZONE_ID = "Z0413857YT73A0A8FRFF"
DEFAULT_ZONE_NAME = "cloud-ha.com"
DEFAULT_RECORD_SUFFIX = "-api"
DEFAULT_INSTANCE_TYPE = "t3.micro"
DEFAULT_MACHINE_IMAGE_PARAMETER = "/aws/service/ami-amazon-linux-latest/amzn2-ami-hvm-x86_64-gp2"
DEFAULT_LISTEN_PORT = 80

DEFAULT_CONTAINER_NAME = "my-application"
DEFAULT_CONTAINER_PORT = 8080
DEFAULT_REGISTRY_ACCOUNT_ID = "292370674225"
DEFAULT_REPOSITORY = "webshop-api"
LATEST = "latest"

DNS_LABEL_MAX_LENGTH = 63
DNS_LABEL_REGEX = re.compile("^[a-z0-9]([a-z0-9-]*[a-z0-9])?$")


class ManagedPolicies(enum.StrEnum):
    SSM_MANAGED_INSTANCE_CORE = "AmazonSSMManagedInstanceCore"
    EC2_CONTAINER_REGISTRY_READ_ONLY = "AmazonEC2ContainerRegistryReadOnly"


def managed_policy_arn(policy_name: str) -> str:
    return f"{AWS_POLICY_ARN_PREFIX}/{policy_name}"


class TagKeys(enum.StrEnum):
    EC2DOCKER_GROUP_NAME = "ec2docker/group-name"
    EC2DOCKER_MANAGED_BY = "ec2docker/managed-by"


def record_name(group_name: str, zone_name: str = DEFAULT_ZONE_NAME, suffix: str = DEFAULT_RECORD_SUFFIX) -> str:
    """Build the DNS name a group's application is published under.

    Example: ``record_name("svelic")`` is ``svelic-api.cloud-ha.com``.
    """
    return f"{group_name}{suffix}.{zone_name}"


def _validate_port(field: str, port: int) -> None:
    if isinstance(port, bool) or not isinstance(port, int):
        msg = f"{field} must be an integer, got {port!r}"
        raise ValueError(msg)

    if not 1 <= port <= 65535:  # noqa: PLR2004
        msg = f"{field} must be between 1 and 65535, got {port}"
        raise ValueError(msg)


@dataclasses.dataclass(frozen=True)
class ContainerConfig:
    name: str = DEFAULT_CONTAINER_NAME
    registry_account_id: str = DEFAULT_REGISTRY_ACCOUNT_ID
    registry_region: str | None = None  # falls back to the deployment region
    repository: str = DEFAULT_REPOSITORY
    tag: str = LATEST
    port: int = DEFAULT_CONTAINER_PORT

    def __post_init__(self):
        if not self.name:
            msg = "container name must not be empty"
            raise ValueError(msg)

        if not self.repository:
            msg = "container repository must not be empty"
            raise ValueError(msg)

        _validate_port("container port", self.port)

    def registry_hostname(self, region: str) -> str:
        return ec2docker.junkdrawer.ecr_registry_hostname(self.registry_account_id, self.registry_region or region)

    def image(self, region: str) -> str:
        return ec2docker.junkdrawer.ecr_image(
            self.registry_account_id,
            self.repository,
            self.tag,
            region=self.registry_region or region,
        )


@dataclasses.dataclass(frozen=True)
class DeploymentConfig:
    group_name: str
    region: str = DEFAULT_REGION
    hosted_zone_id: str = DEFAULT_HOSTED_ZONE_ID
    zone_name: str = DEFAULT_ZONE_NAME
    record_suffix: str = DEFAULT_RECORD_SUFFIX
    use_default_vpc: bool = True
    vpc_id: str | None = None
    instance_type: str = DEFAULT_INSTANCE_TYPE
    machine_image_parameter: str = DEFAULT_MACHINE_IMAGE_PARAMETER
    listen_port: int = DEFAULT_LISTEN_PORT
    container: ContainerConfig = dataclasses.field(default_factory=ContainerConfig)

    def __post_init__(self):
        label = f"{self.group_name}{self.record_suffix}"
        if not self.group_name or DNS_LABEL_REGEX.match(label) is None:
            msg = f"group name {self.group_name!r} does not produce a valid DNS label: {label!r}"
            raise ValueError(msg)

        if len(label) > DNS_LABEL_MAX_LENGTH:
            msg = f"DNS label {label!r} exceeds {DNS_LABEL_MAX_LENGTH} characters"
            raise ValueError(msg)

        if self.use_default_vpc and self.vpc_id is not None:
            msg = "vpc_id is set while use_default_vpc is true; pick one"
            raise ValueError(msg)

        if not self.use_default_vpc and not self.vpc_id:
            msg = "vpc_id is required when use_default_vpc is false"
            raise ValueError(msg)

        _validate_port("listen port", self.listen_port)

    @property
    def record_name(self) -> str:
        return record_name(self.group_name, self.zone_name, self.record_suffix)

    @property
    def registry_region(self) -> str:
        return self.container.registry_region or self.region

    @property
    def registry_hostname(self) -> str:
        return self.container.registry_hostname(self.region)

    @property
    def image(self) -> str:
        return self.container.image(self.region)

    @property
    def url(self) -> str:
        if self.listen_port == DEFAULT_LISTEN_PORT:
            return f"http://{self.record_name}"

        return f"http://{self.record_name}:{self.listen_port}"
