"""Key material provisioning."""

from .key_material import KeyMaterial, KeyMaterialState

__all__ = ["KeyMaterial", "KeyMaterialState"]
