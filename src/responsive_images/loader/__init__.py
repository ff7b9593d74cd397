"""Responsive image loader — plan, render, emit and describe image derivatives."""

from responsive_images.loader.emit import DirectoryEmitter, MemoryEmitter
from responsive_images.loader.loader import load, load_sync
from responsive_images.loader.module import render_module
from responsive_images.loader.options import LoaderOptions, parse_query

__all__ = [
    "DirectoryEmitter",
    "LoaderOptions",
    "MemoryEmitter",
    "load",
    "load_sync",
    "parse_query",
    "render_module",
]
