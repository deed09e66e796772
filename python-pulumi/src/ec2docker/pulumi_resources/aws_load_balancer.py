import pulumi
import pulumi_aws as aws

import ec2docker
from ec2docker.pulumi_resources import StrInput


class AWSApplicationLoadBalancer(pulumi.ComponentResource):
    """Internet-facing application load balancer with one listener.

    The listener forwards to a target group whose only target is the given
    instance. The balancer's security group accepts the listen port from
    anywhere and may only talk to the instance's security group.
    """

    cfg: ec2docker.DeploymentConfig
    name: str
    tags: dict[str, str]

    security_group: aws.ec2.SecurityGroup
    listener_ingress_rules: dict[str, aws.vpc.SecurityGroupIngressRule]
    egress_rule: aws.vpc.SecurityGroupEgressRule
    load_balancer: aws.lb.LoadBalancer
    target_group: aws.lb.TargetGroup
    target_attachment: aws.lb.TargetGroupAttachment
    listener: aws.lb.Listener

    def __init__(
        self,
        name: str,
        cfg: ec2docker.DeploymentConfig,
        vpc_id: StrInput,
        subnet_ids: list[str],
        instance: aws.ec2.Instance,
        instance_security_group_id: StrInput,
        tags: dict[str, str],
        *args,
        **kwargs,
    ):
        super().__init__(
            f"ec2docker:{self.__class__.__name__}",
            name,
            *args,
            **kwargs,
        )

        self.cfg = cfg
        self.name = name
        self.tags = tags

        self._define_security_group(vpc_id, instance_security_group_id)
        self._define_load_balancer(subnet_ids)
        self._define_targets(vpc_id, instance)
        self._define_listener()

        self.register_outputs(
            {
                "dns_name": self.load_balancer.dns_name,
                "security_group_id": self.security_group_id,
            }
        )

    @property
    def security_group_id(self) -> pulumi.Output[str]:
        """The first security group attached to the balancer."""
        return self.load_balancer.security_groups.apply(lambda groups: groups[0])

    def _define_security_group(self, vpc_id: StrInput, instance_security_group_id: StrInput):
        self.security_group = aws.ec2.SecurityGroup(
            f"{self.name}-lb-sg",
            description=f"Load balancer for {self.cfg.group_name}",
            vpc_id=vpc_id,
            tags=self.tags | {"Name": f"{self.name}-lb"},
            opts=pulumi.ResourceOptions(parent=self),
        )

        # listener is open to the internet
        self.listener_ingress_rules = {}
        for suffix, cidr_args in (
            ("ipv4", {"cidr_ipv4": ec2docker.AWS_ALL_IPV4}),
            ("ipv6", {"cidr_ipv6": ec2docker.AWS_ALL_IPV6}),
        ):
            self.listener_ingress_rules[suffix] = aws.vpc.SecurityGroupIngressRule(
                f"{self.name}-lb-listener-{suffix}",
                aws.vpc.SecurityGroupIngressRuleArgs(
                    security_group_id=self.security_group.id,
                    ip_protocol="tcp",
                    from_port=self.cfg.listen_port,
                    to_port=self.cfg.listen_port,
                    description=f"Allow from anyone on port {self.cfg.listen_port}",
                    **cidr_args,
                ),
                opts=pulumi.ResourceOptions(parent=self.security_group),
            )

        self.egress_rule = aws.vpc.SecurityGroupEgressRule(
            f"{self.name}-lb-to-instance",
            aws.vpc.SecurityGroupEgressRuleArgs(
                security_group_id=self.security_group.id,
                referenced_security_group_id=instance_security_group_id,
                ip_protocol="tcp",
                from_port=self.cfg.listen_port,
                to_port=self.cfg.listen_port,
                description="Load balancer to target",
            ),
            opts=pulumi.ResourceOptions(parent=self.security_group),
        )

    def _define_load_balancer(self, subnet_ids: list[str]):
        self.load_balancer = aws.lb.LoadBalancer(
            f"{self.name}-lb",
            aws.lb.LoadBalancerArgs(
                load_balancer_type="application",
                internal=False,
                security_groups=[self.security_group.id],
                subnets=subnet_ids,
                tags=self.tags | {"Name": f"{self.name}-lb"},
            ),
            opts=pulumi.ResourceOptions(parent=self),
        )

    def _define_targets(self, vpc_id: StrInput, instance: aws.ec2.Instance):
        self.target_group = aws.lb.TargetGroup(
            f"{self.name}-tg",
            aws.lb.TargetGroupArgs(
                port=self.cfg.listen_port,
                protocol="HTTP",
                target_type="instance",
                vpc_id=vpc_id,
                tags=self.tags | {"Name": f"{self.name}-tg"},
            ),
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.target_attachment = aws.lb.TargetGroupAttachment(
            f"{self.name}-tg-instance",
            target_group_arn=self.target_group.arn,
            target_id=instance.id,
            port=self.cfg.listen_port,
            opts=pulumi.ResourceOptions(parent=self.target_group),
        )

    def _define_listener(self):
        self.listener = aws.lb.Listener(
            f"{self.name}-listener",
            aws.lb.ListenerArgs(
                load_balancer_arn=self.load_balancer.arn,
                port=self.cfg.listen_port,
                protocol="HTTP",
                default_actions=[
                    aws.lb.ListenerDefaultActionArgs(
                        type="forward",
                        target_group_arn=self.target_group.arn,
                    )
                ],
                tags=self.tags,
            ),
            opts=pulumi.ResourceOptions(parent=self.load_balancer),
        )
