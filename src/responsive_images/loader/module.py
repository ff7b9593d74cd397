"""Serialize an image descriptor into a CommonJS module for webpack-style bundlers."""

from __future__ import annotations

import json
from collections.abc import Sequence

from responsive_images.core.datatypes import Artifact, AssetReference, ImageDescriptor

RUNTIME_PUBLIC_PATH = "__webpack_public_path__"


def reference_expr(reference: AssetReference) -> str:
    """Return the JavaScript expression evaluating to the reference's URL."""
    if reference.runtime_public_path:
        return f"{RUNTIME_PUBLIC_PATH} + {json.dumps(reference.url)}"
    return json.dumps(reference.url)


def src_set_expr(artifacts: Sequence[Artifact]) -> str:
    """Return a JavaScript expression building a ``srcset`` from *artifacts*."""
    if not artifacts:
        return '""'
    return '+","+'.join(f"{reference_expr(a.path)}+{json.dumps(f' {a.width}w')}" for a in artifacts)


def render_module(descriptor: ImageDescriptor) -> str:
    """Render *descriptor* as ``module.exports = {...};``.

    Public URLs without a configured public path are prefixed with the
    bundler's runtime public path when the module is evaluated.
    """
    src = reference_expr(descriptor.src)
    if descriptor.passthrough:
        src_set = src
    else:
        src_set = src_set_expr(descriptor.images)
    images = ",".join(
        f"{{path:{reference_expr(a.path)},width:{a.width},height:{a.height}}}" for a in descriptor.images
    )

    fields = [
        f"srcSetWebP:{src_set_expr(descriptor.webp_images)}",
        f"srcSet:{src_set}",
        f"images:[{images}]",
        f"src:{src}",
        f"toString:function(){{return {src}}}",
    ]
    if descriptor.placeholder is not None:
        fields.append(f"placeholder:{json.dumps(descriptor.placeholder)}")
    fields += [f"width:{descriptor.width}", f"height:{descriptor.height}"]
    return "module.exports = {" + ",".join(fields) + "};"
