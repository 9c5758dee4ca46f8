import json5
import pytest

from hapsign.src.core.config_writer import (
    default_signing_entry,
    load_build_profile,
    write_signing_config,
)
from hapsign.src.core import config_writer
from hapsign.src.core.errors import ConfigParseError, ConfigWriteFailed, ParseError


def test_replaces_signing_configs_and_keeps_other_keys(tmp_path):
    path = tmp_path / "build-profile.json5"
    path.write_text(
        "{\n"
        "  // project settings\n"
        "  app: {\n"
        "    signingConfigs: [{name: 'default'}, {name: 'release'}],\n"
        "    products: [{name: 'default', compileSdkVersion: 12}],\n"
        "  },\n"
        "  modules: [{name: 'entry', srcPath: './entry'}],\n"
        "}\n"
    )
    write_signing_config(path, default_signing_entry("enc-store", "enc-key"))

    profile = json5.loads(path.read_text())
    assert profile["modules"] == [{"name": "entry", "srcPath": "./entry"}]
    assert profile["app"]["products"] == [
        {"name": "default", "compileSdkVersion": 12}
    ]
    assert len(profile["app"]["signingConfigs"]) == 1

    entry = profile["app"]["signingConfigs"][0]
    assert entry["name"] == "default"
    assert entry["material"] == {
        "certpath": "./signatures/OpenHarmonyProfileRelease.pem",
        "storePassword": "enc-store",
        "keyAlias": "openharmony application profile release",
        "keyPassword": "enc-key",
        "profile": "./signatures/app1-profile.p7b",
        "signAlg": "SHA256withECDSA",
        "storeFile": "./signatures/OpenHarmony.p12",
    }


def test_missing_profile_starts_from_skeleton(tmp_path):
    path = tmp_path / "build-profile.json5"
    assert load_build_profile(path) == {"app": {}}

    write_signing_config(path, default_signing_entry("a", "b"))
    profile = json5.loads(path.read_text())
    assert list(profile) == ["app"]
    assert profile["app"]["signingConfigs"][0]["name"] == "default"


def test_profile_without_app_section(tmp_path):
    path = tmp_path / "build-profile.json5"
    path.write_text("{modules: []}")
    write_signing_config(path, default_signing_entry("a", "b"))
    profile = json5.loads(path.read_text())
    assert profile["modules"] == []
    assert profile["app"]["signingConfigs"][0]["name"] == "default"


@pytest.mark.parametrize("content", ["{app: {", "[1, 2]", "{app: 3}"])
def test_malformed_profile(tmp_path, content):
    path = tmp_path / "build-profile.json5"
    path.write_text(content)
    with pytest.raises(ConfigParseError) as exc:
        write_signing_config(path, default_signing_entry("a", "b"))
    assert isinstance(exc.value, ParseError)
    assert path.read_text() == content


def test_unreadable_profile(tmp_path):
    path = tmp_path / "build-profile.json5"
    path.mkdir()
    with pytest.raises(ConfigParseError) as exc:
        write_signing_config(path, default_signing_entry("a", "b"))
    assert exc.value.path == path


def test_profile_write_failure(monkeypatch, tmp_path):
    path = tmp_path / "build-profile.json5"
    path.write_text("{app: {}}")

    def failing_write_text(self, *args, **kwargs):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(config_writer.Path, "write_text", failing_write_text)
    with pytest.raises(ConfigWriteFailed) as exc:
        write_signing_config(path, default_signing_entry("a", "b"))
    assert exc.value.path == path
    assert path.read_text() == "{app: {}}"
