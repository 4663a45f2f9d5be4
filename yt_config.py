"""
API key resolution for ytplay.

The key is looked up, in order, in the environment, in the config file, and
finally by asking the user. Each source is a resolver; ``resolve_api_key``
returns the first key any of them produces.

Config file format is a single dotenv-style assignment:

    YT_API_KEY="your_key_here"
"""

import logging
import os
import sys
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from dotenv import dotenv_values

from yt_errors import ConfigurationError

logger = logging.getLogger("ytplay.config")

# Configuration
API_KEY_VAR = "YT_API_KEY"
CONFIG_FILE = Path(os.environ.get("YTPLAY_CONFIG", Path.home() / ".ytplay.conf"))
CONFIG_FILE_MODE = 0o600


def read_config_value(path: Path, name: str = API_KEY_VAR) -> Optional[str]:
    """Return the value assigned to ``name`` in ``path``, or None."""
    path = Path(path)
    try:
        if not path.exists():
            return None
        if not path.is_file():
            raise ConfigurationError(f"Config file {path} is not a regular file")
        values = dotenv_values(path, interpolate=False, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    return values.get(name) or None


def write_config_value(path: Path, value: str, name: str = API_KEY_VAR) -> None:
    """Write ``name="value"`` to ``path``, readable and writable by the owner only."""
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CONFIG_FILE_MODE)
        with os.fdopen(fd, "w") as f:
            f.write(f'{name}="{value}"\n')
        # O_CREAT mode is ignored for an existing file
        os.chmod(path, CONFIG_FILE_MODE)
    except OSError as e:
        raise ConfigurationError(f"Cannot write config file {path}: {e}") from e
    logger.info(f"Saved API key to {path}")


class KeyResolver:
    """One source of the API key."""

    name = "base"

    def resolve(self) -> Optional[str]:
        raise NotImplementedError


class EnvironmentResolver(KeyResolver):
    name = "environment"

    def __init__(self, var: str = API_KEY_VAR, environ=None):
        self.var = var
        self.environ = os.environ if environ is None else environ

    def resolve(self) -> Optional[str]:
        return self.environ.get(self.var) or None


class ConfigFileResolver(KeyResolver):
    name = "config file"

    def __init__(self, path: Optional[Path] = None, var: str = API_KEY_VAR):
        self.path = Path(path) if path is not None else CONFIG_FILE
        self.var = var

    def resolve(self) -> Optional[str]:
        return read_config_value(self.path, self.var)


class InteractiveResolver(KeyResolver):
    """Ask for the key on the terminal, optionally saving it to the config file."""

    name = "prompt"

    def __init__(self, path: Optional[Path] = None, prompt: Callable[[str], str] = input):
        self.path = Path(path) if path is not None else CONFIG_FILE
        self.prompt = prompt

    def resolve(self) -> Optional[str]:
        try:
            save = self.prompt(f"Enter your YouTube Data API key (will be saved to {self.path})? [y/N] ")
            if save.strip() in ("y", "Y"):
                key = self.prompt("Paste API key: ").strip()
                if key:
                    write_config_value(self.path, key)
            else:
                key = self.prompt("Paste API key to use for this run (won't be saved): ").strip()
        except EOFError:
            return None
        return key or None


def default_resolvers(interactive: Optional[bool] = None, path: Optional[Path] = None) -> List[KeyResolver]:
    """Environment, then config file, then a prompt when stdin is a terminal."""
    if interactive is None:
        interactive = sys.stdin.isatty()
    resolvers: List[KeyResolver] = [EnvironmentResolver(), ConfigFileResolver(path)]
    if interactive:
        resolvers.append(InteractiveResolver(path))
    return resolvers


def resolve_api_key(resolvers: Iterable[KeyResolver]) -> str:
    """Return the first key produced by ``resolvers``."""
    tried = []
    for resolver in resolvers:
        key = resolver.resolve()
        if key:
            logger.debug(f"Using API key from {resolver.name}")
            return key
        tried.append(resolver.name)

    raise ConfigurationError(
        f"No YouTube API key found. Set {API_KEY_VAR} or add it to {CONFIG_FILE}.",
        {"tried": ", ".join(tried)}
    )
