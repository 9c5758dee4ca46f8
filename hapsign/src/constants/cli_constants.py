from rich.text import Text

__version__ = "0.1.0"

APP_DESCRIPTION = "Generate OpenHarmony signing configs for a project"


def get_banner_text() -> Text:
    return Text("hapsign", style="bold cyan")
