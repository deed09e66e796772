from __future__ import annotations

import typing

if typing.TYPE_CHECKING:
    import ec2docker

SHEBANG = "#!/bin/bash"


def user_data_commands(cfg: ec2docker.DeploymentConfig) -> list[str]:
    """Commands that install Docker and start the application container.

    The container's port is published on the instance's listen port, which
    is the port the load balancer targets.
    """
    return [
        "yum install docker -y",
        "sudo systemctl start docker",
        (
            f"aws ecr get-login-password --region {cfg.registry_region}"
            f" | docker login --username AWS --password-stdin {cfg.registry_hostname}"
        ),
        (
            f"docker run -d --name {cfg.container.name}"
            f" -p {cfg.listen_port}:{cfg.container.port} {cfg.image}"
        ),
    ]


def render_user_data(cfg: ec2docker.DeploymentConfig) -> str:
    return "\n".join([SHEBANG, *user_data_commands(cfg)]) + "\n"
