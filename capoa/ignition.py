"""Ignition config overrides handed to assisted-installer agents."""

from __future__ import annotations

import copy
import json
from typing import Any

IGNITION_VERSION = "3.1.0"

_CONFIGDRIVE_METADATA_PATH = "/usr/local/bin/configdrive_metadata"
_CONFIGDRIVE_METADATA_SOURCE = (
    "data:text/plain;charset=utf-8;base64,"
    "IyEvYmluL2Jhc2gKCmVudl9maWxlPS9ldGMvbWV0YWRhdGFfZW52CmNvbmZpZ19kaXI9JChta3RlbXAgLWQpCnN1ZG8gbW91bnQgLUwgY29uZmlnLTIgJGNvbmZpZ19kaXIKY2F0ICRjb25maWdfZGlyL29wZW5zdGFjay9sYXRlc3QvbWV0YV9kYXRhLmpzb24gfCBqcSAtciAnLiB8IGtleXNbXScgfCB3aGlsZSByZWFkIGtleTsgZG8gdmFsdWU9JChqcSAtciAiLltcIiRrZXlcIl0iICRjb25maWdfZGlyL29wZW5zdGFjay9sYXRlc3QvbWV0YV9kYXRhLmpzb24pOyBlY2hvICJNRVRBREFUQV8kKGVjaG8gJHtrZXl9IHwgdHIgYS16IEEtWiB8IHRyIC0gXyk9JHt2YWx1ZX0iOyBkb25lIHwgc29ydCB8IHVuaXEgfCBzdWRvIHRlZSAkZW52X2ZpbGUK"
)

_CONFIGDRIVE_METADATA_UNIT = """[Unit]
Description=Configdrive Metadata
Before=kubelet-customlabels.service
After=ostree-finalize-staged.service

[Service]
Type=oneshot

ExecStart=/usr/local/bin/configdrive_metadata
[Install]
WantedBy=multi-user.target
"""

_KUBELET_CUSTOM_LABELS_UNIT = """[Unit]
Description=Kubelet Custom Labels
Before=kubelet.service
After=ostree-finalize-staged.service

[Service]
Type=oneshot
EnvironmentFile=/etc/metadata_env

ExecStart=/usr/local/bin/kubelet_custom_labels
[Install]
WantedBy=multi-user.target
"""


def _systemd_units() -> list[dict[str, Any]]:
    return [
        {
            "contents": _CONFIGDRIVE_METADATA_UNIT,
            "enabled": True,
            "name": "configdrive-metadata.service",
        },
        {
            "contents": _KUBELET_CUSTOM_LABELS_UNIT,
            "enabled": True,
            "name": "kubelet-customlabels.service",
        },
    ]


def create_ignition_file(
    path: str, user: str, content: str, mode: int, overwrite: bool
) -> dict[str, Any]:
    """An ignition storage file entry whose contents come from the given source URL."""
    return {
        "path": path,
        "overwrite": overwrite,
        "user": {"name": user},
        "contents": {"source": content},
        "mode": mode,
    }


def get_ignition_config_overrides(*args: dict[str, Any]) -> str:
    """Serialize an ignition config holding the given files plus the metadata helpers."""
    files = [copy.deepcopy(entry) for entry in args]
    files.append(
        create_ignition_file(
            _CONFIGDRIVE_METADATA_PATH, "root", _CONFIGDRIVE_METADATA_SOURCE, 493, True
        )
    )
    config: dict[str, Any] = {
        "ignition": {"version": IGNITION_VERSION},
        "storage": {"files": files},
    }
    units = _systemd_units()
    if units:
        config["systemd"] = {"units": units}
    return json.dumps(config, separators=(",", ":"))