"""Pillow image adapter — default resize/encode backend."""

from responsive_images.adapters.pillow.adapter import PillowAdapter

__all__ = ["PillowAdapter"]
