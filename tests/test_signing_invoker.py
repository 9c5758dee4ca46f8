import subprocess
from pathlib import Path

import pytest

from hapsign.src.core import signing_invoker
from hapsign.src.core.errors import SigningFailed
from hapsign.src.core.signing_invoker import (
    KEY_ALIAS,
    KEYSTORE_PASSWORD,
    SIGN_ALG,
    ProfileSigner,
)
from hapsign.src.core.toolchain import ToolchainPaths


@pytest.fixture
def toolchain(tmp_path):
    return ToolchainPaths.resolve(tmp_path / "sdk", "12")


def test_command_shape(toolchain):
    cmd = ProfileSigner(java_path="/opt/java/bin/java").build_command(
        toolchain, "in.json", "out.p7b"
    )
    assert cmd[:4] == [
        "/opt/java/bin/java",
        "-jar",
        str(toolchain.sign_tool),
        "sign-profile",
    ]
    options = dict(zip(cmd[4::2], cmd[5::2]))
    assert options == {
        "-keyAlias": KEY_ALIAS,
        "-signAlg": SIGN_ALG,
        "-mode": "localSign",
        "-profileCertFile": str(toolchain.profile_cert),
        "-inFile": "in.json",
        "-keystoreFile": str(toolchain.keystore),
        "-outFile": "out.p7b",
        "-keyPwd": KEYSTORE_PASSWORD,
        "-keystorePwd": KEYSTORE_PASSWORD,
    }
    assert SIGN_ALG == "SHA256withECDSA"


def test_sign_profile_success(monkeypatch, toolchain, tmp_path):
    seen = {}

    def fake_run(cmd, **kwargs):
        seen["cmd"] = cmd
        seen["kwargs"] = kwargs
        return subprocess.CompletedProcess(cmd, 0, stdout="ok", stderr="")

    monkeypatch.setattr(signing_invoker.subprocess, "run", fake_run)
    out = ProfileSigner().sign_profile(toolchain, "in.json", tmp_path / "out.p7b")

    assert out == Path(tmp_path / "out.p7b")
    assert seen["kwargs"]["check"] is True
    assert seen["kwargs"]["capture_output"] is True


def test_sign_profile_failure_carries_diagnostics(monkeypatch, toolchain):
    def fake_run(cmd, **kwargs):
        raise subprocess.CalledProcessError(
            1, cmd, output="partial", stderr="keystore password incorrect"
        )

    monkeypatch.setattr(signing_invoker.subprocess, "run", fake_run)
    with pytest.raises(SigningFailed) as exc:
        ProfileSigner().sign_profile(toolchain, "in.json", "out.p7b")

    assert exc.value.returncode == 1
    assert exc.value.stderr == "keystore password incorrect"
    assert "keystore password incorrect" in str(exc.value)


def test_missing_java(monkeypatch, toolchain):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr(signing_invoker.subprocess, "run", fake_run)
    with pytest.raises(SigningFailed) as exc:
        ProfileSigner(java_path="nojava").sign_profile(toolchain, "a", "b")
    assert exc.value.returncode is None
