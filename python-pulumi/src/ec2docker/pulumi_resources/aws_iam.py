import pulumi
import pulumi_aws as aws

import ec2docker


def instance_assume_role_policy(opts: pulumi.InvokeOptions | None = None) -> str:
    return aws.iam.get_policy_document(
        statements=[
            aws.iam.GetPolicyDocumentStatementArgs(
                actions=["sts:AssumeRole"],
                principals=[
                    aws.iam.GetPolicyDocumentStatementPrincipalArgs(
                        type="Service",
                        identifiers=[ec2docker.EC2_SERVICE_PRINCIPAL],
                    )
                ],
            )
        ],
        opts=opts,
    ).json


class AWSInstanceRole(pulumi.ComponentResource):
    """Execution identity for the application instance.

    The role can use the SSM agent and pull images from a private ECR
    registry, read-only.
    """

    name: str
    tags: dict[str, str]
    managed_policies: list[ec2docker.ManagedPolicies]

    role: aws.iam.Role
    policy_attachments: dict[str, aws.iam.RolePolicyAttachment]
    instance_profile: aws.iam.InstanceProfile

    def __init__(
        self,
        name: str,
        tags: dict[str, str],
        managed_policies: list[ec2docker.ManagedPolicies] | None = None,
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
        self.tags = tags
        self.managed_policies = (
            list(ec2docker.ManagedPolicies) if managed_policies is None else list(managed_policies)
        )

        self._define_role()
        self._define_instance_profile()

        self.register_outputs(
            {
                "role_arn": self.role.arn,
                "instance_profile_name": self.instance_profile.name,
            }
        )

    def _define_role(self):
        self.role = aws.iam.Role(
            f"{self.name}-role",
            assume_role_policy=instance_assume_role_policy(pulumi.InvokeOptions(parent=self)),
            tags=self.tags | {"Name": f"{self.name}-role"},
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.policy_attachments = {}
        for policy in self.managed_policies:
            self.policy_attachments[str(policy)] = aws.iam.RolePolicyAttachment(
                f"{self.name}-{policy}",
                role=self.role.name,
                policy_arn=ec2docker.managed_policy_arn(policy),
                opts=pulumi.ResourceOptions(parent=self.role),
            )

    def _define_instance_profile(self):
        self.instance_profile = aws.iam.InstanceProfile(
            f"{self.name}-profile",
            role=self.role.name,
            tags=self.tags,
            opts=pulumi.ResourceOptions(parent=self, delete_before_replace=True),
        )
