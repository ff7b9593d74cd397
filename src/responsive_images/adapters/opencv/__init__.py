"""OpenCV image adapter — alternative resize/encode backend."""

from responsive_images.adapters.opencv.adapter import OpenCVAdapter

__all__ = ["OpenCVAdapter"]
