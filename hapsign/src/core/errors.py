from pathlib import Path
from typing import List, Optional, Union


class HapSignError(Exception):
    """Base class for every fatal error raised while generating signing configs"""


class ToolchainNotConfigured(HapSignError):
    """No SDK root was provided through the environment or the config file"""


class MissingInputFile(HapSignError):
    def __init__(self, path: Union[str, Path], description: str = "Required file"):
        self.path = Path(path)
        self.description = description
        super().__init__(f"{description} does not exist: {self.path}")


class ParseError(HapSignError):
    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Error parsing {self.path}: {reason}")


class ConfigParseError(ParseError):
    """The existing build profile could not be parsed"""


class MissingRequiredField(HapSignError):
    def __init__(self, document: str, field: str):
        self.document = document
        self.field = field
        super().__init__(f"{document} does not contain the required field: {field}")


class InsufficientCertificates(HapSignError):
    def __init__(self, source: Optional[Union[str, Path]], found: int, required: int):
        self.source = source
        self.found = found
        self.required = required
        where = source if source is not None else "certificate bundle"
        super().__init__(
            f"{where} does not contain enough certificates "
            f"(found {found}, need at least {required})"
        )


class SigningFailed(HapSignError):
    def __init__(
        self,
        command: List[str],
        returncode: Optional[int],
        stdout: str = "",
        stderr: str = "",
    ):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        super().__init__(
            f"Profile signing failed (exit code {returncode}):\n"
            f"Command: {' '.join(command)}\n"
            f"Stdout: {self.stdout}\n"
            f"Stderr: {self.stderr}"
        )


class MaterialGenerationFailed(HapSignError):
    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Key material error at {self.path}: {reason}")


class ConfigWriteFailed(HapSignError):
    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to write {self.path}: {reason}")
