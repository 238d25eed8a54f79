"""
Runtime Configuration

Tree defaults are read from the environment (and from a `.env` file when
present) so the CLI and library callers share one source of settings.

Environment variables:
    SMT_DEFAULT_DEPTH: Depth used when a tree is built without one (default 20)
    SMT_HASHER: Registry name of the default hasher (default "sha256")
"""

import os
import logging
from dataclasses import dataclass
from dotenv import load_dotenv

from .constants import DEFAULT_DEPTH, DEFAULT_HASHER, MAX_DEPTH
from .errors import InvalidDepthError
from .hasher import Hasher, get_hasher

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


@dataclass
class TreeSettings:
    """Default construction parameters for a sparse merkle tree."""
    depth: int = DEFAULT_DEPTH
    hasher: str = DEFAULT_HASHER

    @classmethod
    def from_env(cls) -> "TreeSettings":
        """
        Read settings from SMT_DEFAULT_DEPTH and SMT_HASHER.

        Raises:
            InvalidDepthError: If SMT_DEFAULT_DEPTH is not a valid depth
        """
        raw_depth = os.getenv("SMT_DEFAULT_DEPTH", str(DEFAULT_DEPTH))
        try:
            depth = int(raw_depth)
        except ValueError:
            raise InvalidDepthError(raw_depth, MAX_DEPTH) from None
        if depth < 1 or depth > MAX_DEPTH:
            raise InvalidDepthError(depth, MAX_DEPTH)

        hasher = os.getenv("SMT_HASHER", DEFAULT_HASHER)
        logger.debug(f"Loaded tree settings: depth={depth}, hasher={hasher}")
        return cls(depth=depth, hasher=hasher)

    def build_hasher(self) -> Hasher:
        return get_hasher(self.hasher)


def get_settings() -> TreeSettings:
    return TreeSettings.from_env()
