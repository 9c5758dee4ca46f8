import copy
import json
from pathlib import Path

import json5
import pytest

from hapsign.src.core.toolchain import (
    KEYSTORE_NAME,
    PROFILE_CERT_NAME,
    PROFILE_TEMPLATE_NAME,
    SIGN_TOOL_NAME,
)


def make_pem_bundle(count: int) -> str:
    blocks = []
    for i in range(count):
        blocks.append(
            "-----BEGIN CERTIFICATE-----\n"
            f"MIIBcert{i}body\n"
            "-----END CERTIFICATE-----\n"
        )
    return "".join(blocks)


TEMPLATE = {
    "version-name": "2.0.0",
    "version-code": 2,
    "uuid": "fe686e1b-3770-4824-a938-961b140a7c98",
    "validity": {"not-before": 1610519532, "not-after": 1705127532},
    "type": "release",
    "bundle-info": {
        "developer-id": "OpenHarmony",
        "distribution-certificate": "placeholder",
        "bundle-name": "com.OpenHarmony.app.test",
        "apl": "normal",
        "app-feature": "hos_normal_app",
    },
    "acls": {"allowed-acls": [""]},
    "permissions": {"restricted-permissions": []},
    "issuer": "pki_internal",
}


class FakeSigner:
    """Stands in for hap-sign-tool; writes a dummy .p7b and records calls."""

    def __init__(self, java_path="java"):
        self.java_path = java_path
        self.calls = []

    def sign_profile(self, toolchain, in_file, out_file):
        self.calls.append((toolchain, Path(in_file), Path(out_file)))
        Path(out_file).write_bytes(b"p7b")
        return Path(out_file)


@pytest.fixture
def pem_bundle():
    return make_pem_bundle


@pytest.fixture
def profile_template():
    """A fresh copy of the SDK release profile template"""
    return copy.deepcopy(TEMPLATE)


@pytest.fixture
def sdk_home(tmp_path):
    """An SDK root with API 12 signing resources"""
    root = tmp_path / "sdk"
    lib_dir = root / "12" / "toolchains" / "lib"
    lib_dir.mkdir(parents=True)
    (lib_dir / SIGN_TOOL_NAME).write_bytes(b"jar")
    (lib_dir / KEYSTORE_NAME).write_bytes(b"p12")
    (lib_dir / PROFILE_CERT_NAME).write_text(make_pem_bundle(3))
    (lib_dir / PROFILE_TEMPLATE_NAME).write_text(json.dumps(TEMPLATE, indent=2))
    return root


@pytest.fixture
def project_dir(tmp_path):
    project = tmp_path / "project"
    (project / "AppScope").mkdir(parents=True)
    (project / "build-profile.json5").write_text(
        json5.dumps(
            {
                "app": {
                    "signingConfigs": [{"name": "release", "material": {}}],
                    "products": [{"name": "default", "compileSdkVersion": "12"}],
                },
                "modules": [{"name": "entry", "srcPath": "./entry"}],
            },
            indent=2,
        )
    )
    (project / "AppScope" / "app.json5").write_text(
        '{\n  // app manifest\n  app: {\n    bundleName: "com.example.app",\n    versionCode: 1000000,\n  },\n}\n'
    )
    return project


@pytest.fixture
def fake_signer():
    return FakeSigner()
