import pytest

from capoa.bootstrap_api import OpenshiftAssistedConfigSpec
from capoa.controlplane_api import (
    GROUP_VERSION,
    Capabilities,
    OpenshiftAssistedControlPlane,
    OpenshiftAssistedControlPlaneConfigSpec,
    OpenshiftAssistedControlPlaneMachineTemplate,
    OpenshiftAssistedControlPlaneSpec,
    OpenshiftAssistedControlPlaneStatus,
)


def _full_control_plane():
    return OpenshiftAssistedControlPlane(
        metadata={"name": "test-oacp", "namespace": "test-namespace",
                  "labels": {"cluster.x-k8s.io/cluster-name": "test-cluster"}},
        spec=OpenshiftAssistedControlPlaneSpec(
            config=OpenshiftAssistedControlPlaneConfigSpec(
                api_vips=["192.168.10.5"],
                ingress_vips=["192.168.10.6"],
                masters_schedulable=True,
                ssh_authorized_key="ssh-ed25519 placeholder",
                cluster_name="test-cluster",
                base_domain="example.com",
                pull_secret_ref={"name": "pull-secret"},
                capabilities=Capabilities(
                    baseline_capability="None",
                    additional_enabled_capabilities=["baremetal"],
                ),
            ),
            machine_template=OpenshiftAssistedControlPlaneMachineTemplate(
                infrastructure_ref={"kind": "Metal3MachineTemplate", "name": "tmpl"},
                node_drain_timeout="10s",
            ),
            openshift_assisted_config_spec=OpenshiftAssistedConfigSpec(
                ssh_authorized_key="ssh-ed25519 placeholder"
            ),
            replicas=3,
            distribution_version="4.16.0",
        ),
        status=OpenshiftAssistedControlPlaneStatus(
            selector="cluster.x-k8s.io/cluster-name=test-cluster",
            replicas=3,
            version="v1.29.0",
            ready_replicas=2,
            ready=True,
            failure_reason=None,
            conditions=[{"type": "ControlPlaneReady", "status": "True"}],
        ),
    )


def test_round_trip_preserves_everything():
    oacp = _full_control_plane()
    again = OpenshiftAssistedControlPlane.from_dict(oacp.to_dict())
    assert again == oacp
    assert again.to_dict() == oacp.to_dict()


def test_manifest_header():
    data = OpenshiftAssistedControlPlane(metadata={"name": "cp"}).to_dict()
    assert data["kind"] == "OpenshiftAssistedControlPlane"
    assert data["apiVersion"] == "controlplane.cluster.x-k8s.io/v1alpha2"
    assert GROUP_VERSION == "controlplane.cluster.x-k8s.io/v1alpha2"


def test_required_fields_always_serialized():
    spec = OpenshiftAssistedControlPlaneSpec().to_dict()
    assert spec["distributionVersion"] == ""
    assert spec["config"]["clusterName"] == ""
    assert spec["config"]["baseDomain"] == ""
    assert spec["machineTemplate"]["infrastructureRef"] == {}
    assert "replicas" not in spec


def test_status_counters_always_serialized():
    status = OpenshiftAssistedControlPlaneStatus().to_dict()
    for key in ("replicas", "updatedReplicas", "readyReplicas", "unavailableReplicas"):
        assert status[key] == 0
    assert status["initialized"] is False
    assert status["ready"] is False
    assert "version" not in status
    assert "failureReason" not in status


def test_optional_fields_omitted_when_empty():
    config = OpenshiftAssistedControlPlaneConfigSpec().to_dict()
    assert "apiVIPs" not in config
    assert "proxy" not in config
    assert "mastersSchedulable" not in config
    assert config["capabilities"] == {}


def test_machine_template_timeouts():
    tmpl = OpenshiftAssistedControlPlaneMachineTemplate(node_deletion_timeout="0s")
    data = tmpl.to_dict()
    assert data["nodeDeletionTimeout"] == "0s"
    assert "nodeDrainTimeout" not in data
    assert OpenshiftAssistedControlPlaneMachineTemplate.from_dict(data) == tmpl


def test_from_empty_dict_gives_defaults():
    oacp = OpenshiftAssistedControlPlane.from_dict({})
    assert oacp == OpenshiftAssistedControlPlane()
    assert oacp.spec.openshift_assisted_config_spec.cpu_architecture == "x86_64"


def test_wrong_kind_rejected():
    with pytest.raises(ValueError):
        OpenshiftAssistedControlPlane.from_dict({"kind": "OpenshiftAssistedConfig"})


@pytest.mark.parametrize("field_name", ["api_vips", "ingress_vips"])
def test_too_many_vips_rejected(field_name):
    with pytest.raises(ValueError):
        OpenshiftAssistedControlPlaneConfigSpec(**{field_name: ["10.0.0.1", "fd00::1", "10.0.0.2"]})


def test_vips_from_dict_validated():
    with pytest.raises(ValueError):
        OpenshiftAssistedControlPlaneConfigSpec.from_dict(
            {"apiVIPs": ["10.0.0.1", "fd00::1", "10.0.0.2"]}
        )


def test_from_dict_does_not_alias_input():
    data = _full_control_plane().to_dict()
    oacp = OpenshiftAssistedControlPlane.from_dict(data)
    data["spec"]["config"]["apiVIPs"].append("10.0.0.9")
    data["metadata"]["labels"]["extra"] = "x"
    assert oacp.spec.config.api_vips == ["192.168.10.5"]
    assert "extra" not in oacp.labels


def test_accessors():
    oacp = _full_control_plane()
    assert oacp.name == "test-oacp"
    assert oacp.namespace == "test-namespace"
    assert oacp.labels["cluster.x-k8s.io/cluster-name"] == "test-cluster"


def test_capabilities_round_trip():
    caps = Capabilities(baseline_capability="vCurrent", additional_enabled_capabilities=["Console"])
    data = caps.to_dict()
    assert data == {"baselineCapability": "vCurrent", "additionalEnabledCapabilities": ["Console"]}
    assert Capabilities.from_dict(data) == caps