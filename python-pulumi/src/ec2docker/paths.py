from __future__ import annotations

import os
import pathlib


class Paths:
    @property
    def root(self) -> pathlib.Path:
        """Return the deployment configuration directory.

        Set via the EC2DOCKER_ROOT environment variable before running
        the Pulumi program.

        Raises:
            RuntimeError: If EC2DOCKER_ROOT is not set in the environment

        """
        if "EC2DOCKER_ROOT" not in os.environ:
            msg = "EC2DOCKER_ROOT environment variable not set."
            raise RuntimeError(msg)

        return pathlib.Path(os.environ["EC2DOCKER_ROOT"])

    @property
    def deployments(self) -> pathlib.Path:
        return self.root / "__deploy__"
