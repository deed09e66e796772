import pulumi
import pulumi_aws as aws

import ec2docker
import ec2docker.user_data
from ec2docker.pulumi_resources import StrInput
from ec2docker.pulumi_resources.aws_iam import AWSInstanceRole


class AWSDockerInstance(pulumi.ComponentResource):
    cfg: ec2docker.DeploymentConfig
    name: str
    tags: dict[str, str]
    vpc_id: StrInput
    subnet_id: StrInput

    security_group: aws.ec2.SecurityGroup
    ingress_rules: dict[str, aws.vpc.SecurityGroupIngressRule]
    egress_rule: aws.vpc.SecurityGroupEgressRule
    role: AWSInstanceRole
    instance: aws.ec2.Instance

    def __init__(
        self,
        name: str,
        cfg: ec2docker.DeploymentConfig,
        vpc_id: StrInput,
        subnet_id: StrInput,
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
        self.vpc_id = vpc_id
        self.subnet_id = subnet_id
        self.ingress_rules = {}

        self._define_security_group()
        self.role = AWSInstanceRole(
            self.name,
            tags=self.tags,
            opts=pulumi.ResourceOptions(parent=self),
        )
        self._define_instance()

        self.register_outputs(
            {
                "instance_id": self.instance.id,
                "security_group_id": self.security_group.id,
            }
        )

    def _define_security_group(self):
        self.security_group = aws.ec2.SecurityGroup(
            f"{self.name}-instance-sg",
            description=f"{self.cfg.container.name} instance for {self.cfg.group_name}",
            vpc_id=self.vpc_id,
            tags=self.tags | {"Name": f"{self.name}-instance"},
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.egress_rule = aws.vpc.SecurityGroupEgressRule(
            f"{self.name}-instance-egress",
            aws.vpc.SecurityGroupEgressRuleArgs(
                security_group_id=self.security_group.id,
                cidr_ipv4=ec2docker.AWS_ALL_IPV4,
                ip_protocol="-1",
                description="Allow all outbound traffic",
            ),
            opts=pulumi.ResourceOptions(parent=self.security_group),
        )

        self.ingress_rules["http"] = aws.vpc.SecurityGroupIngressRule(
            f"{self.name}-instance-http",
            aws.vpc.SecurityGroupIngressRuleArgs(
                security_group_id=self.security_group.id,
                cidr_ipv4=ec2docker.AWS_ALL_IPV4,
                ip_protocol="tcp",
                from_port=self.cfg.listen_port,
                to_port=self.cfg.listen_port,
                description="Allow HTTP traffic",
            ),
            opts=pulumi.ResourceOptions(parent=self.security_group),
        )

    def _define_instance(self):
        ami = aws.ssm.get_parameter(
            name=self.cfg.machine_image_parameter,
            opts=pulumi.InvokeOptions(parent=self),
        )

        self.instance = aws.ec2.Instance(
            f"{self.name}-instance",
            aws.ec2.InstanceArgs(
                ami=ami.value,
                instance_type=self.cfg.instance_type,
                subnet_id=self.subnet_id,
                associate_public_ip_address=True,
                vpc_security_group_ids=[self.security_group.id],
                iam_instance_profile=self.role.instance_profile.name,
                user_data=ec2docker.user_data.render_user_data(self.cfg),
                user_data_replace_on_change=True,
                tags=self.tags | {"Name": f"{self.name}-instance"},
            ),
            opts=pulumi.ResourceOptions(parent=self, depends_on=[self.role]),
        )

    def allow_ingress_from(
        self,
        name: str,
        source_security_group_id: StrInput,
        description: str,
        opts: pulumi.ResourceOptions | None = None,
    ) -> aws.vpc.SecurityGroupIngressRule:
        rule = aws.vpc.SecurityGroupIngressRule(
            f"{self.name}-instance-{name}",
            aws.vpc.SecurityGroupIngressRuleArgs(
                security_group_id=self.security_group.id,
                referenced_security_group_id=source_security_group_id,
                ip_protocol="tcp",
                from_port=self.cfg.listen_port,
                to_port=self.cfg.listen_port,
                description=description,
            ),
            opts=pulumi.ResourceOptions.merge(
                pulumi.ResourceOptions(parent=self.security_group),
                opts,
            ),
        )
        self.ingress_rules[name] = rule

        return rule
