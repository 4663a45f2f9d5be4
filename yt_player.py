"""
Media player backends.

A Player knows which binaries it can run and how to build the command line
for a URL. ``detect_player`` probes PATH once at startup and returns the
first available backend, mpv before VLC.
"""

import asyncio
import logging
import shutil
from typing import List, Optional, Sequence

from yt_errors import DependencyMissingError

logger = logging.getLogger("ytplay.player")


class Player:
    """Base class for an external media player."""

    name = "player"
    binaries: Sequence[str] = ()

    def __init__(self):
        self.binary: Optional[str] = None

    def is_available(self) -> bool:
        for binary in self.binaries:
            path = shutil.which(binary)
            if path:
                self.binary = binary
                return True
        return False

    def build_command(self, url: str) -> List[str]:
        raise NotImplementedError

    async def play(self, url: str) -> int:
        """Run the player on ``url`` with the terminal attached and wait for it to exit."""
        cmd = self.build_command(url)
        logger.info(f"Running {self.name}: {' '.join(cmd)}")

        process = await asyncio.create_subprocess_exec(*cmd)
        returncode = await process.wait()

        if returncode != 0:
            logger.warning(f"{self.name} exited with status {returncode}")
        return returncode


class MpvPlayer(Player):
    name = "mpv"
    binaries = ("mpv",)

    def is_available(self) -> bool:
        available = super().is_available()
        if available and not shutil.which("yt-dlp"):
            logger.warning("yt-dlp not found; mpv may be unable to open YouTube URLs")
        return available

    def build_command(self, url: str) -> List[str]:
        return [self.binary or "mpv", "--no-terminal", url]


class VlcPlayer(Player):
    name = "vlc"
    binaries = ("cvlc", "vlc")

    def build_command(self, url: str) -> List[str]:
        if self.binary == "vlc":
            return ["vlc", "-I", "dummy", "--play-and-exit", url]
        return ["cvlc", "--play-and-exit", url]


DEFAULT_PLAYERS = (MpvPlayer, VlcPlayer)


def detect_player(players: Sequence[type] = DEFAULT_PLAYERS) -> Player:
    """Return the first installed player, in preference order."""
    for player_cls in players:
        player = player_cls()
        if player.is_available():
            logger.debug(f"Using {player.name} ({player.binary})")
            return player

    names = " or ".join(p.name for p in players)
    raise DependencyMissingError(
        f"Missing dependencies: {names}. Install one (e.g. sudo apt install mpv) and try again."
    )
