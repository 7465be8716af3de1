"""Settings for reaching the assisted-installer services."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from typing import Mapping

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def _parse_bool(variable: str, value: str) -> bool:
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean value {value!r} for {variable}")


@dataclass
class ServiceConfig:
    """Where the assisted-service and its image service live, and how to trust them."""

    # False: use the InfraEnv's ISO download URL as is. True: point the URL
    # at the assisted-image-service's cluster IP instead.
    use_internal_image_url: bool = field(
        default=False, metadata={"env": "USE_INTERNAL_IMAGE_URL"}
    )
    image_service_name: str = field(
        default="assisted-image-service", metadata={"env": "IMAGE_SERVICE_NAME"}
    )
    image_service_namespace: str = field(
        default="", metadata={"env": "IMAGE_SERVICE_NAMESPACE"}
    )
    assisted_service_name: str = field(
        default="assisted-service", metadata={"env": "ASSISTED_SERVICE_NAME"}
    )
    assisted_installer_namespace: str = field(
        default="", metadata={"env": "ASSISTED_INSTALLER_NAMESPACE"}
    )
    # Name and namespace of a ConfigMap holding the CA bundle to trust.
    assisted_ca_bundle_namespace: str = field(
        default="", metadata={"env": "ASSISTED_CA_BUNDLE_NAMESPACE"}
    )
    assisted_ca_bundle_name: str = field(
        default="", metadata={"env": "ASSISTED_CA_BUNDLE_NAME"}
    )
    # Key inside the CA bundle ConfigMap where the bundle is stored.
    assisted_ca_bundle_key: str = field(
        default="ca-bundle.crt", metadata={"env": "ASSISTED_CA_BUNDLE_KEY"}
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServiceConfig":
        """Build a config from environment variables, falling back to defaults."""
        if environ is None:
            environ = os.environ
        values = {}
        for spec in fields(cls):
            variable = spec.metadata["env"]
            if variable not in environ:
                continue
            raw = environ[variable]
            if spec.type in (bool, "bool"):
                values[spec.name] = _parse_bool(variable, raw)
            else:
                values[spec.name] = raw
        return cls(**values)