import dataclasses
import pathlib
import typing
import warnings

import deepmerge  # type: ignore
import yaml

import ec2docker
import ec2docker.paths

CONFIG_FILENAME = "ec2docker.yaml"


def _normalize_keys(obj: typing.Any) -> typing.Any:
    if not isinstance(obj, dict):
        return obj

    return {str(key).replace("-", "_"): _normalize_keys(value) for key, value in obj.items()}


def _field_names(cls: type) -> set[str]:
    return {f.name for f in dataclasses.fields(cls)}


class Deployment:
    name: str
    d: pathlib.Path
    cfg: ec2docker.DeploymentConfig
    spec: dict[str, typing.Any]

    def __init__(self, name: str, paths: ec2docker.paths.Paths | None = None, *, load_yaml=True):
        self.name = name
        self.d = (paths or ec2docker.paths.Paths()).deployments / name

        if not load_yaml:
            return

        if not self.config_yaml.exists():
            self.spec = {"group_name": name}
            self.cfg = ec2docker.DeploymentConfig(group_name=name)
            return

        self._load_config()

    @property
    def config_yaml(self) -> pathlib.Path:
        return self.d / CONFIG_FILENAME

    @property
    def compound_name(self) -> str:
        return f"{self.cfg.group_name}{self.cfg.record_suffix}"

    @property
    def required_tags(self) -> dict[str, str]:
        return {
            str(ec2docker.TagKeys.EC2DOCKER_GROUP_NAME): self.cfg.group_name,
        }

    def _load_config(self) -> None:
        spec: dict[str, typing.Any] = {
            "group_name": self.name,
            "container": dataclasses.asdict(ec2docker.ContainerConfig()),
        }

        cfg_dict = yaml.safe_load(self.config_yaml.read_text()) or {}
        if not isinstance(cfg_dict, dict):
            msg = f"Expected a mapping in {self.config_yaml}, got {type(cfg_dict).__name__}"
            raise ValueError(msg)

        user_spec = _normalize_keys(cfg_dict.get("spec") or {})
        if not isinstance(user_spec, dict):
            msg = f"Expected spec to be a mapping in {self.config_yaml}, got {type(user_spec).__name__}"
            raise ValueError(msg)

        if not isinstance(user_spec.get("container") or {}, dict):
            msg = f"Expected spec.container to be a mapping in {self.config_yaml}"
            raise ValueError(msg)

        if "domain" in user_spec:
            warnings.warn(
                f"'spec.domain' found in {self.config_yaml}; this should be at 'spec.zone_name'",
                stacklevel=2,
            )
            domain = user_spec.pop("domain")
            user_spec.setdefault("zone_name", domain)

        deepmerge.always_merger.merge(spec, user_spec)

        container_spec = spec.pop("container") or {}

        unknown = sorted(set(spec) - _field_names(ec2docker.DeploymentConfig))
        if unknown:
            msg = f"Unknown keys in {self.config_yaml}: {unknown}"
            raise ValueError(msg)

        unknown = sorted(set(container_spec) - _field_names(ec2docker.ContainerConfig))
        if unknown:
            msg = f"Unknown container keys in {self.config_yaml}: {unknown}"
            raise ValueError(msg)

        self.spec = spec | {"container": container_spec}
        self.cfg = ec2docker.DeploymentConfig(
            **spec,
            container=ec2docker.ContainerConfig(**container_spec),
        )
