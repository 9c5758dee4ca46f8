import os
from pathlib import Path
import toml
from typing import Dict, Any

from hapsign.src.core.errors import ToolchainNotConfigured

SDK_HOME_ENV = "OHOS_BASE_SDK_HOME"
JAVA_ENV = "HAPSIGN_JAVA"


def get_config_path() -> Path:
    """Return the path to the configuration file."""
    return Path.home() / ".hapsign" / "config.toml"


def load_config() -> Dict[str, Any]:
    """Load configuration from TOML file."""
    config_path = get_config_path()
    if not config_path.exists():
        return {}

    try:
        return toml.load(config_path)
    except Exception as e:
        raise ValueError(f"Failed to load config: {e}")


def get_sdk_home() -> Path:
    """Get the OpenHarmony SDK root from environment or config."""
    env_sdk_home = os.environ.get(SDK_HOME_ENV)
    if env_sdk_home:
        return Path(env_sdk_home)

    sdk_home = load_config().get("sdk", {}).get("home")
    if sdk_home:
        return Path(sdk_home).expanduser()

    raise ToolchainNotConfigured(
        f"SDK root not set. Export {SDK_HOME_ENV} or add [sdk] home to {get_config_path()}"
    )


def get_java_path() -> str:
    """Get the java executable used to run hap-sign-tool."""
    env_java = os.environ.get(JAVA_ENV)
    if env_java:
        return env_java
    return load_config().get("sdk", {}).get("java", "java")
