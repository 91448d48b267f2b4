from typing import Optional

from pydantic import BaseModel
import yaml

from .grid import GridMetadata


class CostmapConfig(BaseModel):
    grid: GridMetadata
    seed: Optional[int] = None  # None = fresh entropy per costmap
    default_z: float = 0.0


def load_config_from_yaml(file_path: str) -> CostmapConfig:
    """
    Read a CostmapConfig from YAML. The settings may sit at the top level
    or under a `costmap:` key.
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if isinstance(data, dict) and 'costmap' in data:
        data = data['costmap']
    return CostmapConfig.model_validate(data)
