from __future__ import annotations

import dataclasses

import pulumi
import pulumi_aws as aws

import ec2docker

# an application load balancer must span at least two availability zones
MIN_PUBLIC_SUBNETS = 2


@dataclasses.dataclass(frozen=True)
class HostedZoneRef:
    zone_id: str
    zone_name: str


class AWSNetworkContext:
    """Read-only references to the network the application is placed in.

    Nothing here creates resources. The VPC and its public subnets are looked
    up through the provider; the hosted zone is referenced by its fixed id and
    name without a lookup.
    """

    cfg: ec2docker.DeploymentConfig
    vpc_id: str
    public_subnet_ids: list[str]
    hosted_zone: HostedZoneRef

    def __init__(self, cfg: ec2docker.DeploymentConfig, opts: pulumi.InvokeOptions | None = None):
        self.cfg = cfg
        self.opts = opts

        self.vpc_id = self._lookup_vpc_id()
        self.public_subnet_ids = self._lookup_public_subnet_ids()
        self.hosted_zone = HostedZoneRef(zone_id=cfg.hosted_zone_id, zone_name=cfg.zone_name)

    def _lookup_vpc_id(self) -> str:
        if self.cfg.use_default_vpc:
            vpc = aws.ec2.get_vpc(default=True, opts=self.opts)
        else:
            vpc = aws.ec2.get_vpc(id=self.cfg.vpc_id, opts=self.opts)

        pulumi.log.info(f"Using VPC {vpc.id} for {self.cfg.group_name}")
        return vpc.id

    def _lookup_public_subnet_ids(self) -> list[str]:
        subnets = aws.ec2.get_subnets(
            filters=[
                aws.ec2.GetSubnetsFilterArgs(name="vpc-id", values=[self.vpc_id]),
                aws.ec2.GetSubnetsFilterArgs(name="map-public-ip-on-launch", values=["true"]),
            ],
            opts=self.opts,
        )
        subnet_ids = sorted(subnets.ids or [])

        if len(subnet_ids) < MIN_PUBLIC_SUBNETS:
            msg = (
                f"VPC {self.vpc_id} has {len(subnet_ids)} public subnet(s); "
                f"an application load balancer needs at least {MIN_PUBLIC_SUBNETS}"
            )
            raise ValueError(msg)

        return subnet_ids
