"""Service packaging configuration.

A service definition declares how its functions are packaged: either into one
shared service artifact or into individual per-function artifacts. Functions
may override the service default.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from upstage._errors import ConfigurationError

DEFAULT_PACKAGE_PATH = ".upstage"


@dataclass(frozen=True)
class Shared:
    """Code ships in the shared service artifact."""


@dataclass(frozen=True)
class Individual:
    """Code ships in its own artifact at ``artifact_path``."""

    artifact_path: str


PackagingMode = Shared | Individual


@dataclass
class FunctionPackage:
    """Packaging settings of a single function.

    Attributes:
        name: Function name as declared in the service definition.
        individually: Per-function override; None inherits the service default.
        artifact: Explicit artifact path, empty when not set.
    """

    name: str
    individually: bool | None = None
    artifact: str = ""


@dataclass
class PackageConfig:
    """Packaging settings of a service.

    Attributes:
        service_name: Name of the service, used for the default artifact name.
        package_path: Directory holding built artifacts.
        individually: Package every function into its own artifact by default.
        artifact: Explicit service artifact path, empty when not set.
        functions: Functions in declaration order.
    """

    service_name: str = ""
    package_path: str = DEFAULT_PACKAGE_PATH
    individually: bool = False
    artifact: str = ""
    functions: list[FunctionPackage] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PackageConfig:
        """Create a PackageConfig from a parsed service definition."""
        package = d.get("package") or {}
        if not isinstance(package, dict):
            raise ConfigurationError("'package' must be a mapping")
        service_individually = package.get("individually", False)
        if not isinstance(service_individually, bool):
            raise ConfigurationError("'package.individually' must be a boolean")

        functions_config = d.get("functions") or {}
        if not isinstance(functions_config, dict):
            raise ConfigurationError("'functions' must be a mapping of name to config")

        functions: list[FunctionPackage] = []
        for name, fn_config in functions_config.items():
            fn_config = fn_config or {}
            if not isinstance(fn_config, dict):
                raise ConfigurationError(f"Function '{name}' must be a mapping")
            fn_package = fn_config.get("package") or {}
            if not isinstance(fn_package, dict):
                raise ConfigurationError(
                    f"Function '{name}': 'package' must be a mapping"
                )
            individually = fn_package.get("individually")
            if individually is not None and not isinstance(individually, bool):
                raise ConfigurationError(
                    f"Function '{name}': 'package.individually' must be a boolean"
                )
            functions.append(
                FunctionPackage(
                    name=str(name),
                    individually=individually,
                    artifact=str(fn_package.get("artifact") or ""),
                )
            )

        return cls(
            service_name=str(d.get("service") or ""),
            package_path=str(package.get("path", DEFAULT_PACKAGE_PATH) or ""),
            individually=service_individually,
            artifact=str(package.get("artifact") or ""),
            functions=functions,
        )


def resolve_function_mode(
    package_config: PackageConfig, function: FunctionPackage
) -> PackagingMode:
    """Resolve how a function is packaged.

    The function's own ``individually`` flag, falling back to the service
    default, decides. An explicit artifact is only used by individually
    packaged functions; shared functions ignore it.
    """
    individually = function.individually
    if individually is None:
        individually = package_config.individually
    if not individually:
        return Shared()

    if function.artifact:
        return Individual(function.artifact)
    if not package_config.package_path:
        raise ConfigurationError(
            f"Function '{function.name}' is packaged individually but has no "
            "artifact and no package path is configured"
        )
    return Individual(str(Path(package_config.package_path) / f"{function.name}.zip"))


def resolve_service_artifact(package_config: PackageConfig) -> str:
    """Resolve the path of the shared service artifact."""
    if package_config.artifact:
        return package_config.artifact
    if not package_config.service_name or not package_config.package_path:
        raise ConfigurationError(
            "Cannot resolve the service artifact: set 'package.artifact' or both "
            "'service' and 'package.path'"
        )
    return str(
        Path(package_config.package_path) / f"{package_config.service_name}.zip"
    )


def load_service(path: Path) -> PackageConfig:
    """Load a service definition YAML file.

    Relative artifact and package paths are resolved against the file's
    directory.
    """
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Failed to read service definition: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid service definition {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Service definition {path} must be a mapping")

    config = PackageConfig.from_dict(data)
    base_dir = path.parent
    if config.package_path:
        config.package_path = str(base_dir / config.package_path)
    if config.artifact:
        config.artifact = str(base_dir / config.artifact)
    for function in config.functions:
        if function.artifact:
            function.artifact = str(base_dir / function.artifact)
    return config


def load_template(path: Path) -> dict[str, Any]:
    """Load a compiled template from a JSON or YAML file."""
    try:
        text = path.read_text()
    except OSError as e:
        raise ConfigurationError(f"Failed to read template: {e}") from e

    try:
        if path.suffix == ".json":
            template = json.loads(text)
        else:
            template = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Invalid template {path}: {e}") from e

    if not isinstance(template, dict):
        raise ConfigurationError(f"Template {path} must be a mapping")
    return template
