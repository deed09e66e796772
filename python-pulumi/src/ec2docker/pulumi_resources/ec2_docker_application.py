import pulumi
import pulumi_aws as aws

import ec2docker
import ec2docker.deployment
from ec2docker.pulumi_resources.aws_dns import AWSAliasRecord
from ec2docker.pulumi_resources.aws_docker_instance import AWSDockerInstance
from ec2docker.pulumi_resources.aws_load_balancer import AWSApplicationLoadBalancer
from ec2docker.pulumi_resources.aws_network import AWSNetworkContext


class EC2DockerApplication(pulumi.ComponentResource):
    """A containerized web application on one EC2 instance.

    Resources are declared in dependency order:

    1. network context (VPC and public subnet lookups, hosted zone reference)
    2. instance security group, execution role and the instance itself
    3. internet-facing load balancer forwarding to the instance
    4. ingress rule on the instance from the balancer's security group
    5. alias record ``<group>-api.<zone>`` pointing at the balancer
    """

    deployment: ec2docker.deployment.Deployment
    cfg: ec2docker.DeploymentConfig
    required_tags: dict[str, str]

    provider: aws.Provider
    network: AWSNetworkContext
    app: AWSDockerInstance
    lb: AWSApplicationLoadBalancer
    lb_ingress_rule: aws.vpc.SecurityGroupIngressRule
    dns: AWSAliasRecord

    @classmethod
    def autoload(cls) -> "EC2DockerApplication":
        return cls(deployment=ec2docker.deployment.Deployment(pulumi.get_stack()))

    def __init__(self, deployment: ec2docker.deployment.Deployment, *args, **kwargs):
        super().__init__(
            f"ec2docker:{self.__class__.__name__}",
            deployment.compound_name,
            *args,
            **kwargs,
        )

        self.deployment = deployment
        self.cfg = deployment.cfg
        self.required_tags = self.deployment.required_tags | {
            str(ec2docker.TagKeys.EC2DOCKER_MANAGED_BY): __name__,
        }

        self.provider = aws.Provider(
            f"{self.deployment.compound_name}-aws",
            region=self.cfg.region,
            opts=pulumi.ResourceOptions(parent=self),
        )

        pulumi.log.info(f"Defining {self.cfg.record_name} in {self.cfg.region}", self)

        self._define_network()
        self._define_instance()
        self._define_load_balancer()
        self._define_dns()

        outputs = {
            "instance_id": self.app.instance.id,
            "instance_security_group_id": self.app.security_group.id,
            "load_balancer_dns_name": self.lb.load_balancer.dns_name,
            "load_balancer_security_group_id": self.lb.security_group_id,
            "record_name": self.cfg.record_name,
            "url": self.cfg.url,
        }

        for key, value in outputs.items():
            pulumi.export(key, value)

        self.register_outputs(outputs)

    def _define_network(self):
        self.network = AWSNetworkContext(
            self.cfg,
            opts=pulumi.InvokeOptions(parent=self, provider=self.provider),
        )

    def _define_instance(self):
        self.app = AWSDockerInstance(
            self.deployment.compound_name,
            cfg=self.cfg,
            vpc_id=self.network.vpc_id,
            subnet_id=self.network.public_subnet_ids[0],
            tags=self.required_tags,
            opts=pulumi.ResourceOptions(parent=self, providers=[self.provider]),
        )

    def _define_load_balancer(self):
        self.lb = AWSApplicationLoadBalancer(
            self.deployment.compound_name,
            cfg=self.cfg,
            vpc_id=self.network.vpc_id,
            subnet_ids=self.network.public_subnet_ids,
            instance=self.app.instance,
            instance_security_group_id=self.app.security_group.id,
            tags=self.required_tags,
            opts=pulumi.ResourceOptions(parent=self, providers=[self.provider]),
        )

        # only reachable once the balancer exists and its security group id is known
        self.lb_ingress_rule = self.app.allow_ingress_from(
            "from-lb",
            self.lb.security_group_id,
            "Allow traffic from load balancer",
            opts=pulumi.ResourceOptions(depends_on=[self.lb.load_balancer]),
        )

    def _define_dns(self):
        self.dns = AWSAliasRecord(
            self.deployment.compound_name,
            record_name=self.cfg.record_name,
            hosted_zone=self.network.hosted_zone,
            load_balancer=self.lb.load_balancer,
            opts=pulumi.ResourceOptions(parent=self, providers=[self.provider]),
        )
