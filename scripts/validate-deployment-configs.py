#!/usr/bin/env python3
"""
Validate deployment config files against the Python config dataclasses.

USAGE: python scripts/validate-deployment-configs.py [ROOT]

Reads every <ROOT>/__deploy__/<name>/ec2docker.yaml (ROOT defaults to
$EC2DOCKER_ROOT) and checks its `spec` keys against the fields of
DeploymentConfig and ContainerConfig. The dataclasses are read from source,
so the check runs without Pulumi installed.

Exit code 0: All config files use known keys
Exit code 1: Unknown keys found, or no config files found
"""

import os
import re
import sys
from pathlib import Path
from typing import Dict, Set

import yaml

# Map the YAML section to the Python class that parses it
# Format: section -> python_name
TYPE_MAPPINGS = {
    "spec": "DeploymentConfig",
    "spec.container": "ContainerConfig",
}

PYTHON_FILE = "python-pulumi/src/ec2docker/__init__.py"
CONFIG_FILENAME = "ec2docker.yaml"

# Keys still accepted with a deprecation warning
DEPRECATED_KEYS = {
    "spec": {
        "domain": "zone_name",
    },
}


def extract_python_dataclass_fields(python_file: Path, class_name: str) -> Set[str]:
    """Extract field names from a Python dataclass."""
    content = python_file.read_text()

    # Find the class definition - look for @dataclasses.dataclass followed by class
    class_pattern = rf'@dataclasses\.dataclass[^\n]*\nclass {re.escape(class_name)}[:(]'
    match = re.search(class_pattern, content, re.MULTILINE)
    if not match:
        return set()

    # Extract class body (until next class, method or end of file)
    start_pos = match.end()
    rest = content[start_pos:]

    next_def = re.search(r'\n(?:@dataclasses\.dataclass|class |def [a-z_]|\s{4}def |\s{4}@property)', rest)
    if next_def:
        class_body = rest[:next_def.start()]
    else:
        class_body = rest

    # Match: field_name: type or field_name: type = default
    field_pattern = r'^\s{4}([a-z_][a-z0-9_]*)\s*:\s*'

    return {m.group(1) for m in re.finditer(field_pattern, class_body, re.MULTILINE)}


def normalize(key: str) -> str:
    return key.replace("-", "_")


def validate_file(config_file: Path, fields: Dict[str, Set[str]]) -> bool:
    """Print findings for one config file; return True when it is valid."""
    cfg_dict = yaml.safe_load(config_file.read_text()) or {}
    spec = cfg_dict.get("spec") or {}
    container = spec.get("container") or {}

    ok = True
    sections = {
        "spec": {normalize(k) for k in spec if normalize(k) != "container"},
        "spec.container": {normalize(k) for k in container},
    }

    for section, keys in sections.items():
        deprecated = DEPRECATED_KEYS.get(section, {})
        unknown = keys - fields[section] - set(deprecated)

        for key in sorted(keys & set(deprecated)):
            print(f"⚠️  {config_file}: '{section}.{key}' is deprecated, use '{section}.{deprecated[key]}'")

        if unknown:
            print(f"❌ {config_file}:")
            print(f"   Keys in '{section}' not known to {TYPE_MAPPINGS[section]}:")
            for key in sorted(unknown):
                print(f"     - {key}")
            ok = False

    if ok:
        print(f"✅ {config_file}: All keys known")

    return ok


def main() -> int:
    """Main validation logic."""
    repo_root = Path(__file__).parent.parent
    python_file = repo_root / PYTHON_FILE

    if len(sys.argv) > 1:
        root = Path(sys.argv[1])
    elif "EC2DOCKER_ROOT" in os.environ:
        root = Path(os.environ["EC2DOCKER_ROOT"])
    else:
        print("ERROR: pass ROOT or set EC2DOCKER_ROOT")
        return 1

    fields = {
        section: extract_python_dataclass_fields(python_file, python_class)
        for section, python_class in TYPE_MAPPINGS.items()
    }

    for section, section_fields in fields.items():
        if not section_fields:
            print(f"ERROR: No fields found for Python class {TYPE_MAPPINGS[section]} in {python_file}")
            return 1

    config_files = sorted((root / "__deploy__").glob(f"*/{CONFIG_FILENAME}"))
    if not config_files:
        print(f"ERROR: No {CONFIG_FILENAME} files found under {root / '__deploy__'}")
        return 1

    print("Validating deployment configs...\n")

    results = [validate_file(config_file, fields) for config_file in config_files]

    print()
    if not all(results):
        print("❌ Validation failed: unknown keys found")
        print("   Deployment raises ValueError when loading these files.")
        return 1

    print("✅ All deployment configs are valid")
    return 0


if __name__ == "__main__":
    sys.exit(main())
