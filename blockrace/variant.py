"""
Variant Loader - YAML variant presets with Pydantic validation.

Every variant is the same game with different tuning: spawn period,
reset trigger, player speed, audio. Presets live as YAML files in the
variants/ directory next to this module.

Examples:
    >>> loader = VariantLoader()
    >>> variant = loader.load_variant("classic")
    >>> variant.spawn_interval
    2.0
    >>> loader.list_variants()
    ['arcade', 'classic', 'rush', 'silent']
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

VARIANTS_DIR = Path(__file__).parent / "variants"


class ResetTrigger(str, Enum):
    """How the reset key fires.

    PRESS fires once on the frame the key goes down; HOLD fires on every
    frame the key is held.
    """
    PRESS = "press"
    HOLD = "hold"


class SpawnArea(BaseModel):
    """Half extents of the area obstacles spawn in, centred on the origin."""
    model_config = {"frozen": True}

    half_width: float = Field(default=550.0, gt=0)
    half_height: float = Field(default=325.0, gt=0)


class VariantConfig(BaseModel):
    """Complete variant configuration from YAML."""
    model_config = {"frozen": True}

    name: str = Field(description="Variant identifier")
    description: str = Field(default="", description="One-line summary")
    spawn_interval: float = Field(
        default=2.0, ge=1.0, le=2.0,
        description="Seconds between timed obstacle spawns",
    )
    reset_trigger: ResetTrigger = Field(default=ResetTrigger.PRESS)
    player_speed: float = Field(default=100.0, gt=0, description="World units per second")
    collision_sfx: bool = Field(default=True, description="Play a sound on each pickup")
    music: bool = Field(default=True, description="Loop background music")
    spawn_area: SpawnArea = Field(default_factory=SpawnArea)
    bob_high_score: bool = Field(
        default=False, description="Animate the high score label as well as the score"
    )


class VariantLoader:
    """Loads and validates variant presets from YAML files.

    Attributes:
        variants_dir: Path to the directory containing variant YAML files
    """

    def __init__(self, variants_dir: Optional[Path] = None):
        self.variants_dir = Path(variants_dir) if variants_dir is not None else VARIANTS_DIR

    def load_variant(self, name: str) -> VariantConfig:
        """Load and validate a variant.

        Raises:
            FileNotFoundError: If the variant YAML file doesn't exist
            ValueError: If the YAML content fails validation
            yaml.YAMLError: If the YAML syntax is malformed
        """
        yaml_path = self.variants_dir / f"{name}.yaml"

        if not yaml_path.exists():
            raise FileNotFoundError(
                f"Variant '{name}' not found. Expected file: {yaml_path}"
            )

        try:
            with open(yaml_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Failed to parse YAML file '{yaml_path}': {e}") from e

        if not isinstance(data, dict):
            raise ValueError(
                f"Invalid variant configuration in '{yaml_path}': "
                f"expected a mapping, got {type(data).__name__}"
            )

        data.setdefault('name', name)
        try:
            return VariantConfig(**data)
        except ValidationError as e:
            raise ValueError(f"Invalid variant configuration in '{yaml_path}':\n{e}") from e

    def list_variants(self) -> List[str]:
        """All variant names, sorted alphabetically."""
        if not self.variants_dir.exists():
            return []
        return sorted(f.stem for f in self.variants_dir.glob("*.yaml"))

    def variant_exists(self, name: str) -> bool:
        return (self.variants_dir / f"{name}.yaml").exists()
