"""
Runtime settings, read from TREESKETCH_* environment variables.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

# Static page directory at the repository root (one level up from treesketch/)
DEFAULT_STATIC_DIR = Path(__file__).parent.parent / "public"

NODE_RADIUS = 24


@dataclass(frozen=True)
class RootZone:
    """The dashed circle a vertex is dropped into to become the root."""
    cx: float
    cy: float
    r: float

    def contains(self, x: float, y: float) -> bool:
        return (x - self.cx) ** 2 + (y - self.cy) ** 2 < self.r ** 2


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 9090
    static_dir: Path = DEFAULT_STATIC_DIR
    log_level: str = "INFO"
    canvas_width: float = 1200
    canvas_height: float = 800
    puzzle_size: int = 10
    node_radius: float = NODE_RADIUS
    root_zone: RootZone = field(init=False)

    def __post_init__(self):
        object.__setattr__(
            self, "root_zone",
            RootZone(cx=self.canvas_width / 2, cy=100, r=self.node_radius * 2),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from the environment, falling back to defaults."""
        env = os.environ if environ is None else environ
        try:
            return cls(
                host=env.get("TREESKETCH_HOST", cls.host),
                port=int(env.get("TREESKETCH_PORT", cls.port)),
                static_dir=Path(env.get("TREESKETCH_STATIC_DIR", str(DEFAULT_STATIC_DIR))),
                log_level=env.get("TREESKETCH_LOG_LEVEL", cls.log_level).upper(),
                canvas_width=float(env.get("TREESKETCH_CANVAS_WIDTH", cls.canvas_width)),
                canvas_height=float(env.get("TREESKETCH_CANVAS_HEIGHT", cls.canvas_height)),
                puzzle_size=int(env.get("TREESKETCH_PUZZLE_SIZE", cls.puzzle_size)),
            )
        except ValueError as e:
            raise ValueError(f"Invalid TREESKETCH_* setting: {e}") from e


# Global instance
settings = Settings.from_env()
