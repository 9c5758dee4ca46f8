import json
from pathlib import Path
from typing import Any, Union

import json5

from hapsign.src.core.errors import MissingInputFile, ParseError


def load_json5(path: Union[str, Path], description: str = "Required file") -> Any:
    """Load a JSON5 document (build-profile.json5, app.json5)"""
    path = Path(path)
    if not path.exists():
        raise MissingInputFile(path, description)
    try:
        with open(path, encoding="utf-8") as f:
            return json5.load(f)
    except ValueError as e:
        raise ParseError(path, str(e))
    except OSError as e:
        raise ParseError(path, f"could not read file: {e}")


def load_json(path: Union[str, Path], description: str = "Required file") -> Any:
    """Load a strict JSON document (the SDK profile template)"""
    path = Path(path)
    if not path.exists():
        raise MissingInputFile(path, description)
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except ValueError as e:
        raise ParseError(path, str(e))
    except OSError as e:
        raise ParseError(path, f"could not read file: {e}")


def get_path(document: Any, *keys) -> Any:
    """Walk nested dicts/lists, returning None as soon as a step is missing"""
    current = document
    for key in keys:
        if isinstance(current, dict):
            current = current.get(key)
        elif isinstance(current, list) and isinstance(key, int):
            current = current[key] if -len(current) <= key < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current
