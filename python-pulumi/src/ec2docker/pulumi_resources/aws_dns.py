import pulumi
import pulumi_aws as aws

from ec2docker.pulumi_resources.aws_network import HostedZoneRef


class AWSAliasRecord(pulumi.ComponentResource):
    """An A record in an existing hosted zone aliasing a load balancer."""

    name: str
    record_name: str
    hosted_zone: HostedZoneRef

    record: aws.route53.Record

    def __init__(
        self,
        name: str,
        record_name: str,
        hosted_zone: HostedZoneRef,
        load_balancer: aws.lb.LoadBalancer,
        *args,
        **kwargs,
    ):
        super().__init__(
            f"ec2docker:{self.__class__.__name__}",
            name,
            *args,
            **kwargs,
        )

        self.name = name
        self.record_name = record_name
        self.hosted_zone = hosted_zone

        self.record = aws.route53.Record(
            f"{self.name}-A",
            args=aws.route53.RecordArgs(
                zone_id=hosted_zone.zone_id,
                name=record_name,
                type="A",
                aliases=[
                    aws.route53.RecordAliasArgs(
                        evaluate_target_health=False,
                        name=load_balancer.dns_name,
                        zone_id=load_balancer.zone_id,
                    )
                ],
            ),
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.register_outputs({"fqdn": self.record.fqdn})
