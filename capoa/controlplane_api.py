"""Control plane API types: OpenshiftAssistedControlPlane."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping

from capoa.bootstrap_api import OpenshiftAssistedConfigSpec

GROUP = "controlplane.cluster.x-k8s.io"
VERSION = "v1alpha2"
GROUP_VERSION = f"{GROUP}/{VERSION}"

CONTROL_PLANE_READY_CONDITION = "ControlPlaneReady"
KUBECONFIG_AVAILABLE_CONDITION = "KubeconfigAvailable"
UPGRADE_COMPLETED_CONDITION = "UpgradeCompleted"
UPGRADE_AVAILABLE_CONDITION = "UpgradeAvailable"
MACHINES_CREATED_CONDITION = "MachinesCreated"
KUBERNETES_VERSION_AVAILABLE_CONDITION = "KubernetesVersionAvailableCondition"

CONTROL_PLANE_INSTALLING_REASON = "ControlPlaneInstalling"
KUBERNETES_VERSION_UNAVAILABLE_FAILED_REASON = "KubernetesVersionUnavailable"
KUBECONFIG_UNAVAILABLE_FAILED_REASON = "KubeconfigUnavailable"
UPGRADE_IN_PROGRESS_REASON = "UpgradeInProgress"
UPGRADE_IMAGE_UNAVAILABLE_REASON = "UpgradeImageUnavailable"
INFRASTRUCTURE_TEMPLATE_CLONING_FAILED_REASON = "InfrastructureTemplateCloningFailed"
BOOTSTRAP_TEMPLATE_CLONING_FAILED_REASON = "BootstrapTemplateCloningFailed"
MACHINE_GENERATION_FAILED_REASON = "MachineGenerationFailed"

MAX_VIPS = 2


def _put(data: dict[str, Any], key: str, value: Any) -> None:
    """Store a copy of value unless it is empty."""
    if value:
        data[key] = copy.deepcopy(value)


def _check_vips(label: str, vips: list[str]) -> None:
    if len(vips) > MAX_VIPS:
        raise ValueError(f"{label} may hold at most {MAX_VIPS} items, got {len(vips)}")


@dataclass
class Capabilities:
    """OpenShift capabilities set during installation."""

    baseline_capability: str = ""
    additional_enabled_capabilities: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        _put(data, "baselineCapability", self.baseline_capability)
        _put(data, "additionalEnabledCapabilities", self.additional_enabled_capabilities)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Capabilities":
        data = data or {}
        return cls(
            baseline_capability=data.get("baselineCapability", ""),
            additional_enabled_capabilities=list(
                data.get("additionalEnabledCapabilities") or []
            ),
        )


@dataclass
class OpenshiftAssistedControlPlaneConfigSpec:
    """Configuration of the cluster that the assisted installer provisions."""

    api_vips: list[str] = field(default_factory=list)
    ingress_vips: list[str] = field(default_factory=list)
    manifests_config_map_refs: list[dict[str, Any]] = field(default_factory=list)
    disk_encryption: dict[str, Any] | None = None
    proxy: dict[str, Any] | None = None
    masters_schedulable: bool = False
    ssh_authorized_key: str = ""
    cluster_name: str = ""
    base_domain: str = ""
    pull_secret_ref: dict[str, Any] | None = None
    image_registry_ref: dict[str, Any] | None = None
    capabilities: Capabilities = field(default_factory=Capabilities)

    def __post_init__(self) -> None:
        _check_vips("apiVIPs", self.api_vips)
        _check_vips("ingressVIPs", self.ingress_vips)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        _put(data, "apiVIPs", self.api_vips)
        _put(data, "ingressVIPs", self.ingress_vips)
        _put(data, "manifestsConfigMapRefs", self.manifests_config_map_refs)
        _put(data, "diskEncryption", self.disk_encryption)
        _put(data, "proxy", self.proxy)
        _put(data, "mastersSchedulable", self.masters_schedulable)
        _put(data, "sshAuthorizedKey", self.ssh_authorized_key)
        data["clusterName"] = self.cluster_name
        data["baseDomain"] = self.base_domain
        _put(data, "pullSecretRef", self.pull_secret_ref)
        _put(data, "imageRegistryRef", self.image_registry_ref)
        data["capabilities"] = self.capabilities.to_dict()
        return data

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any] | None
    ) -> "OpenshiftAssistedControlPlaneConfigSpec":
        data = copy.deepcopy(dict(data or {}))
        return cls(
            api_vips=list(data.get("apiVIPs") or []),
            ingress_vips=list(data.get("ingressVIPs") or []),
            manifests_config_map_refs=list(data.get("manifestsConfigMapRefs") or []),
            disk_encryption=data.get("diskEncryption"),
            proxy=data.get("proxy"),
            masters_schedulable=bool(data.get("mastersSchedulable", False)),
            ssh_authorized_key=data.get("sshAuthorizedKey", ""),
            cluster_name=data.get("clusterName", ""),
            base_domain=data.get("baseDomain", ""),
            pull_secret_ref=data.get("pullSecretRef"),
            image_registry_ref=data.get("imageRegistryRef"),
            capabilities=Capabilities.from_dict(data.get("capabilities")),
        )


@dataclass
class OpenshiftAssistedControlPlaneMachineTemplate:
    """Template for the control plane machines; timeouts are duration strings."""

    metadata: dict[str, Any] = field(default_factory=dict)
    infrastructure_ref: dict[str, Any] = field(default_factory=dict)
    node_drain_timeout: str | None = None
    node_volume_detach_timeout: str | None = None
    node_deletion_timeout: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        _put(data, "metadata", self.metadata)
        data["infrastructureRef"] = copy.deepcopy(self.infrastructure_ref)
        for key, value in (
            ("nodeDrainTimeout", self.node_drain_timeout),
            ("nodeVolumeDetachTimeout", self.node_volume_detach_timeout),
            ("nodeDeletionTimeout", self.node_deletion_timeout),
        ):
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any] | None
    ) -> "OpenshiftAssistedControlPlaneMachineTemplate":
        data = copy.deepcopy(dict(data or {}))
        return cls(
            metadata=dict(data.get("metadata") or {}),
            infrastructure_ref=dict(data.get("infrastructureRef") or {}),
            node_drain_timeout=data.get("nodeDrainTimeout"),
            node_volume_detach_timeout=data.get("nodeVolumeDetachTimeout"),
            node_deletion_timeout=data.get("nodeDeletionTimeout"),
        )


@dataclass
class OpenshiftAssistedControlPlaneSpec:
    """Desired state of an OpenshiftAssistedControlPlane."""

    config: OpenshiftAssistedControlPlaneConfigSpec = field(
        default_factory=OpenshiftAssistedControlPlaneConfigSpec
    )
    machine_template: OpenshiftAssistedControlPlaneMachineTemplate = field(
        default_factory=OpenshiftAssistedControlPlaneMachineTemplate
    )
    openshift_assisted_config_spec: OpenshiftAssistedConfigSpec = field(
        default_factory=OpenshiftAssistedConfigSpec
    )
    replicas: int = 0
    distribution_version: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "config": self.config.to_dict(),
            "machineTemplate": self.machine_template.to_dict(),
            "openshiftAssistedConfigSpec": self.openshift_assisted_config_spec.to_dict(),
        }
        _put(data, "replicas", self.replicas)
        data["distributionVersion"] = self.distribution_version
        return data

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any] | None
    ) -> "OpenshiftAssistedControlPlaneSpec":
        data = data or {}
        return cls(
            config=OpenshiftAssistedControlPlaneConfigSpec.from_dict(data.get("config")),
            machine_template=OpenshiftAssistedControlPlaneMachineTemplate.from_dict(
                data.get("machineTemplate")
            ),
            openshift_assisted_config_spec=OpenshiftAssistedConfigSpec.from_dict(
                data.get("openshiftAssistedConfigSpec")
            ),
            replicas=int(data.get("replicas", 0)),
            distribution_version=data.get("distributionVersion", ""),
        )


@dataclass
class OpenshiftAssistedControlPlaneStatus:
    """Observed state of an OpenshiftAssistedControlPlane."""

    cluster_deployment_ref: dict[str, Any] | None = None
    selector: str = ""
    replicas: int = 0
    version: str | None = None
    distribution_version: str = ""
    updated_replicas: int = 0
    ready_replicas: int = 0
    unavailable_replicas: int = 0
    initialized: bool = False
    ready: bool = False
    failure_reason: str | None = None
    failure_message: str | None = None
    conditions: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        _put(data, "clusterDeploymentRef", self.cluster_deployment_ref)
        _put(data, "selector", self.selector)
        data["replicas"] = self.replicas
        if self.version is not None:
            data["version"] = self.version
        _put(data, "distributionVersion", self.distribution_version)
        data["updatedReplicas"] = self.updated_replicas
        data["readyReplicas"] = self.ready_replicas
        data["unavailableReplicas"] = self.unavailable_replicas
        data["initialized"] = self.initialized
        data["ready"] = self.ready
        if self.failure_reason is not None:
            data["failureReason"] = self.failure_reason
        if self.failure_message is not None:
            data["failureMessage"] = self.failure_message
        _put(data, "conditions", self.conditions)
        return data

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any] | None
    ) -> "OpenshiftAssistedControlPlaneStatus":
        data = copy.deepcopy(dict(data or {}))
        return cls(
            cluster_deployment_ref=data.get("clusterDeploymentRef"),
            selector=data.get("selector", ""),
            replicas=int(data.get("replicas", 0)),
            version=data.get("version"),
            distribution_version=data.get("distributionVersion", ""),
            updated_replicas=int(data.get("updatedReplicas", 0)),
            ready_replicas=int(data.get("readyReplicas", 0)),
            unavailable_replicas=int(data.get("unavailableReplicas", 0)),
            initialized=bool(data.get("initialized", False)),
            ready=bool(data.get("ready", False)),
            failure_reason=data.get("failureReason"),
            failure_message=data.get("failureMessage"),
            conditions=list(data.get("conditions") or []),
        )


@dataclass
class OpenshiftAssistedControlPlane:
    """A control plane installed through the assisted installer."""

    kind: ClassVar[str] = "OpenshiftAssistedControlPlane"
    api_version: ClassVar[str] = GROUP_VERSION

    metadata: dict[str, Any] = field(default_factory=dict)
    spec: OpenshiftAssistedControlPlaneSpec = field(
        default_factory=OpenshiftAssistedControlPlaneSpec
    )
    status: OpenshiftAssistedControlPlaneStatus = field(
        default_factory=OpenshiftAssistedControlPlaneStatus
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
    def from_dict(cls, data: Mapping[str, Any]) -> "OpenshiftAssistedControlPlane":
        found = data.get("kind")
        if found is not None and found != cls.kind:
            raise ValueError(f"expected kind {cls.kind}, got {found}")
        return cls(
            metadata=copy.deepcopy(dict(data.get("metadata") or {})),
            spec=OpenshiftAssistedControlPlaneSpec.from_dict(data.get("spec")),
            status=OpenshiftAssistedControlPlaneStatus.from_dict(data.get("status")),
        )