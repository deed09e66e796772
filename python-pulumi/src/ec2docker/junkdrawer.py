from __future__ import annotations


def ecr_registry_hostname(aws_account_id: str, region: str = "eu-north-1") -> str:
    return f"{aws_account_id}.dkr.ecr.{region}.amazonaws.com"


def ecr_repository_url(aws_account_id: str, repo_name: str, region: str = "eu-north-1") -> str:
    return f"{ecr_registry_hostname(aws_account_id, region)}/{repo_name}"


def ecr_image(aws_account_id: str, repo_name: str, tag: str, region: str = "eu-north-1") -> str:
    return f"{ecr_repository_url(aws_account_id, repo_name, region)}:{tag}"
