import pytest

from capoa.config import ServiceConfig


def test_defaults_without_environment():
    config = ServiceConfig.from_env({})
    assert config.use_internal_image_url is False
    assert config.image_service_name == "assisted-image-service"
    assert config.assisted_service_name == "assisted-service"
    assert config.assisted_ca_bundle_key == "ca-bundle.crt"
    assert config.image_service_namespace == ""
    assert config.assisted_ca_bundle_name == ""


def test_from_env_equals_plain_defaults():
    assert ServiceConfig.from_env({}) == ServiceConfig()


def test_string_values_are_read():
    config = ServiceConfig.from_env(
        {
            "IMAGE_SERVICE_NAMESPACE": "assisted-test-namespace",
            "ASSISTED_CA_BUNDLE_NAME": "test-cm-name",
            "ASSISTED_CA_BUNDLE_NAMESPACE": "test-cm-namespace",
            "ASSISTED_CA_BUNDLE_KEY": "bundle.crt",
            "ASSISTED_SERVICE_NAME": "svc",
            "ASSISTED_INSTALLER_NAMESPACE": "installer-ns",
            "IMAGE_SERVICE_NAME": "images",
        }
    )
    assert config.image_service_namespace == "assisted-test-namespace"
    assert config.assisted_ca_bundle_name == "test-cm-name"
    assert config.assisted_ca_bundle_namespace == "test-cm-namespace"
    assert config.assisted_ca_bundle_key == "bundle.crt"
    assert config.assisted_service_name == "svc"
    assert config.assisted_installer_namespace == "installer-ns"
    assert config.image_service_name == "images"


@pytest.mark.parametrize(
    "raw, expected",
    [("true", True), ("1", True), ("T", True), ("False", False), ("0", False)],
)
def test_boolean_values(raw, expected):
    config = ServiceConfig.from_env({"USE_INTERNAL_IMAGE_URL": raw})
    assert config.use_internal_image_url is expected


@pytest.mark.parametrize("raw", ["yes", "", "maybe"])
def test_invalid_boolean_raises(raw):
    with pytest.raises(ValueError, match="USE_INTERNAL_IMAGE_URL"):
        ServiceConfig.from_env({"USE_INTERNAL_IMAGE_URL": raw})


def test_reads_process_environment_by_default(monkeypatch):
    monkeypatch.setenv("IMAGE_SERVICE_NAMESPACE", "from-process")
    monkeypatch.setenv("USE_INTERNAL_IMAGE_URL", "true")
    config = ServiceConfig.from_env()
    assert config.image_service_namespace == "from-process"
    assert config.use_internal_image_url is True


def test_unrelated_variables_are_ignored():
    config = ServiceConfig.from_env({"SOMETHING_ELSE": "x"})
    assert config == ServiceConfig()