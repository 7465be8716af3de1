"""Bootstrap API types: OpenshiftAssistedConfig and its template."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping

GROUP = "bootstrap.cluster.x-k8s.io"
VERSION = "v1alpha1"
GROUP_VERSION = f"{GROUP}/{VERSION}"

INFRA_ENV_FAILED_REASON = "InfraEnvFailed"
PROPAGATING_LIVE_ISO_URL_FAILED_REASON = "PropagatingLiveISOURLFailed"
CREATING_SECRET_FAILED_REASON = "CreatingSecretFailed"
WAITING_FOR_LIVE_ISO_URL_REASON = "WaitingForLiveISOURL"
WAITING_FOR_INSTALL_COMPLETE_REASON = "WaitingForInstallComplete"
WAITING_FOR_ASSISTED_INSTALLER_REASON = "WaitingForAssistedInstaller"
WAITING_FOR_CLUSTER_INFRASTRUCTURE_REASON = "WaitingForClusterInfrastructure"
DATA_SECRET_AVAILABLE_CONDITION = "DataSecretAvailable"
OPENSHIFT_ASSISTED_CONFIG_LABEL = "bootstrap.cluster.x-k8s.io/openshiftAssistedConfig"

DEFAULT_CPU_ARCHITECTURE = "x86_64"


def _put(data: dict[str, Any], key: str, value: Any) -> None:
    """Store a copy of value unless it is empty."""
    if value:
        data[key] = copy.deepcopy(value)


def _check_kind(data: Mapping[str, Any], kind: str) -> None:
    found = data.get("kind")
    if found is not None and found != kind:
        raise ValueError(f"expected kind {kind}, got {found}")


@dataclass
class NodeRegistrationOptions:
    """Settings for registering a node with the cluster."""

    name: str = ""
    kubelet_extra_labels: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        _put(data, "name", self.name)
        _put(data, "kubeletExtraLabels", self.kubelet_extra_labels)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "NodeRegistrationOptions":
        data = data or {}
        return cls(
            name=data.get("name", ""),
            kubelet_extra_labels=list(data.get("kubeletExtraLabels") or []),
        )


@dataclass
class OpenshiftAssistedConfigSpec:
    """Desired state; most fields map onto the InfraEnv that is generated."""

    proxy: dict[str, Any] | None = None
    pull_secret_ref: dict[str, Any] | None = None
    additional_ntp_sources: list[str] = field(default_factory=list)
    ssh_authorized_key: str = ""
    nm_state_config_label_selector: dict[str, Any] = field(default_factory=dict)
    cpu_architecture: str = DEFAULT_CPU_ARCHITECTURE
    kernel_arguments: list[dict[str, Any]] = field(default_factory=list)
    additional_trust_bundle: str = ""
    os_image_version: str = ""
    node_registration: NodeRegistrationOptions = field(
        default_factory=NodeRegistrationOptions
    )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        _put(data, "proxy", self.proxy)
        _put(data, "pullSecretRef", self.pull_secret_ref)
        _put(data, "additionalNTPSources", self.additional_ntp_sources)
        _put(data, "sshAuthorizedKey", self.ssh_authorized_key)
        data["nmStateConfigLabelSelector"] = copy.deepcopy(self.nm_state_config_label_selector)
        _put(data, "cpuArchitecture", self.cpu_architecture)
        _put(data, "kernelArguments", self.kernel_arguments)
        _put(data, "additionalTrustBundle", self.additional_trust_bundle)
        _put(data, "osImageVersion", self.os_image_version)
        data["nodeRegistration"] = self.node_registration.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "OpenshiftAssistedConfigSpec":
        data = copy.deepcopy(dict(data or {}))
        return cls(
            proxy=data.get("proxy"),
            pull_secret_ref=data.get("pullSecretRef"),
            additional_ntp_sources=list(data.get("additionalNTPSources") or []),
            ssh_authorized_key=data.get("sshAuthorizedKey", ""),
            nm_state_config_label_selector=data.get("nmStateConfigLabelSelector") or {},
            cpu_architecture=data.get("cpuArchitecture") or DEFAULT_CPU_ARCHITECTURE,
            kernel_arguments=list(data.get("kernelArguments") or []),
            additional_trust_bundle=data.get("additionalTrustBundle", ""),
            os_image_version=data.get("osImageVersion", ""),
            node_registration=NodeRegistrationOptions.from_dict(data.get("nodeRegistration")),
        )


@dataclass
class OpenshiftAssistedConfigStatus:
    """Observed state of an OpenshiftAssistedConfig."""

    infra_env_ref: dict[str, Any] | None = None
    agent_ref: dict[str, Any] | None = None
    iso_download_url: str = ""
    ready: bool = False
    data_secret_name: str | None = None
    failure_reason: str = ""
    failure_message: str = ""
    observed_generation: int = 0
    conditions: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        _put(data, "infraEnvRef", self.infra_env_ref)
        _put(data, "agentRef", self.agent_ref)
        _put(data, "isoDownloadURL", self.iso_download_url)
        data["ready"] = self.ready
        if self.data_secret_name is not None:
            data["dataSecretName"] = self.data_secret_name
        _put(data, "failureReason", self.failure_reason)
        _put(data, "failureMessage", self.failure_message)
        _put(data, "observedGeneration", self.observed_generation)
        _put(data, "conditions", self.conditions)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "OpenshiftAssistedConfigStatus":
        data = copy.deepcopy(dict(data or {}))
        return cls(
            infra_env_ref=data.get("infraEnvRef"),
            agent_ref=data.get("agentRef"),
            iso_download_url=data.get("isoDownloadURL", ""),
            ready=bool(data.get("ready", False)),
            data_secret_name=data.get("dataSecretName"),
            failure_reason=data.get("failureReason", ""),
            failure_message=data.get("failureMessage", ""),
            observed_generation=int(data.get("observedGeneration", 0)),
            conditions=list(data.get("conditions") or []),
        )


@dataclass
class OpenshiftAssistedConfig:
    """Bootstrap configuration for one machine installed through the assisted installer."""

    kind: ClassVar[str] = "OpenshiftAssistedConfig"
    api_version: ClassVar[str] = GROUP_VERSION

    metadata: dict[str, Any] = field(default_factory=dict)
    spec: OpenshiftAssistedConfigSpec = field(default_factory=OpenshiftAssistedConfigSpec)
    status: OpenshiftAssistedConfigStatus = field(
        default_factory=OpenshiftAssistedConfigStatus
    )

    @property
    def name(self) -> str:
        return self.metadata.get("name", "")

    @property
    def namespace(self) -> str:
        return self.metadata.get("namespace", "")

    @property
    def labels(self) -> dict[str, str]:
        return self.metadata.get("labels") or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": copy.deepcopy(self.metadata),
            "spec": self.spec.to_dict(),
            "status": self.status.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OpenshiftAssistedConfig":
        _check_kind(data, cls.kind)
        return cls(
            metadata=copy.deepcopy(dict(data.get("metadata") or {})),
            spec=OpenshiftAssistedConfigSpec.from_dict(data.get("spec")),
            status=OpenshiftAssistedConfigStatus.from_dict(data.get("status")),
        )


@dataclass
class OpenshiftAssistedConfigTemplateResource:
    """The template body: metadata and spec for the configs it stamps out."""

    metadata: dict[str, Any] = field(default_factory=dict)
    spec: OpenshiftAssistedConfigSpec = field(default_factory=OpenshiftAssistedConfigSpec)

    def to_dict(self) -> dict[str, Any]:
        return {"metadata": copy.deepcopy(self.metadata), "spec": self.spec.to_dict()}

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any] | None
    ) -> "OpenshiftAssistedConfigTemplateResource":
        data = data or {}
        return cls(
            metadata=copy.deepcopy(dict(data.get("metadata") or {})),
            spec=OpenshiftAssistedConfigSpec.from_dict(data.get("spec")),
        )


@dataclass
class OpenshiftAssistedConfigTemplateSpec:
    """Desired state of an OpenshiftAssistedConfigTemplate."""

    template: OpenshiftAssistedConfigTemplateResource = field(
        default_factory=OpenshiftAssistedConfigTemplateResource
    )

    def to_dict(self) -> dict[str, Any]:
        return {"template": self.template.to_dict()}

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any] | None
    ) -> "OpenshiftAssistedConfigTemplateSpec":
        data = data or {}
        return cls(
            template=OpenshiftAssistedConfigTemplateResource.from_dict(data.get("template"))
        )


@dataclass
class OpenshiftAssistedConfigTemplate:
    """A template from which OpenshiftAssistedConfigs are created."""

    kind: ClassVar[str] = "OpenshiftAssistedConfigTemplate"
    api_version: ClassVar[str] = GROUP_VERSION

    metadata: dict[str, Any] = field(default_factory=dict)
    spec: OpenshiftAssistedConfigTemplateSpec = field(
        default_factory=OpenshiftAssistedConfigTemplateSpec
    )
    status: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.metadata.get("name", "")

    @property
    def namespace(self) -> str:
        return self.metadata.get("namespace", "")

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": copy.deepcopy(self.metadata),
            "spec": self.spec.to_dict(),
            "status": copy.deepcopy(self.status),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OpenshiftAssistedConfigTemplate":
        _check_kind(data, cls.kind)
        return cls(
            metadata=copy.deepcopy(dict(data.get("metadata") or {})),
            spec=OpenshiftAssistedConfigTemplateSpec.from_dict(data.get("spec")),
            status=copy.deepcopy(dict(data.get("status") or {})),
        )