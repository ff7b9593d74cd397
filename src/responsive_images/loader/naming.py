"""Output naming — filename templating and output/public path resolution."""

from __future__ import annotations

import base64
import hashlib
import os
import posixpath
import re
from dataclasses import dataclass
from pathlib import PurePath

from responsive_images.core.datatypes import AssetReference
from responsive_images.core.exceptions import ConfigurationError
from responsive_images.loader.options import PathOption

DEFAULT_HASH = "md5"

# [hash], [contenthash], [hash:8], [sha1:hash:base64:10]
_HASH_TOKEN = re.compile(r"\[(?:([^:\]]+):)?(?:hash|contenthash)(?::([a-z]+\d*))?(?::(\d+))?\]", re.IGNORECASE)
_WEBP_SUFFIX = re.compile(r"(jpe?g|png|svg|gif)$", re.IGNORECASE)
_WIDTH_TOKEN = re.compile(r"\[width\]", re.IGNORECASE)
_HEIGHT_TOKEN = re.compile(r"\[height\]", re.IGNORECASE)
_EXT_TOKEN = re.compile(r"\[ext\]", re.IGNORECASE)


def content_hash(content: bytes, hash_type: str | None = None, digest: str | None = None, length: int | None = None) -> str:
    """Digest *content* the way the ``[hash]`` tokens describe it.

    Raises:
        ConfigurationError: If the hash algorithm or digest type is unknown.
    """
    hash_type = (hash_type or DEFAULT_HASH).lower()
    if hash_type not in hashlib.algorithms_available:
        msg = f"Unsupported hash type '{hash_type}' in filename template"
        raise ConfigurationError(msg)
    hasher = hashlib.new(hash_type, content)
    if hasher.digest_size == 0:
        msg = f"Hash type '{hash_type}' has no fixed digest length and cannot name files"
        raise ConfigurationError(msg)

    match (digest or "hex").lower():
        case "hex":
            value = hasher.hexdigest()
        case "base64":
            value = base64.urlsafe_b64encode(hasher.digest()).decode("ascii").rstrip("=")
        case other:
            msg = f"Unsupported digest type '{other}' in filename template"
            raise ConfigurationError(msg)
    return value[:length] if length else value


def _relative_dir(resource_path: PurePath, context: str | None) -> str:
    if context is None:
        return ""
    directory = os.path.relpath(str(resource_path.parent), context).replace(os.sep, "/")
    if directory == ".":
        return ""
    directory = re.sub(r"\.\.(/)?", r"_\1", directory)
    return directory + "/"


def interpolate_name(
    template: str,
    *,
    resource_path: str | PurePath,
    content: bytes,
    context: str | None = None,
) -> str:
    """Expand the resource and hash tokens of a filename template.

    ``[name]`` is the source stem, ``[path]`` its directory relative to
    *context*; ``[ext]``, ``[width]`` and ``[height]`` are expected to be
    substituted by the caller beforehand.

    Raises:
        ConfigurationError: If a hash token names an unknown algorithm.
    """
    resource = PurePath(resource_path)

    def replace_hash(match: re.Match[str]) -> str:
        hash_type, digest, length = match.groups()
        return content_hash(content, hash_type, digest, int(length) if length else None)

    name = _HASH_TOKEN.sub(replace_hash, template)
    directory = _relative_dir(resource, context)
    name = re.sub(r"\[name\]", lambda _m: resource.stem, name, flags=re.IGNORECASE)
    return re.sub(r"\[path\]", lambda _m: directory, name, flags=re.IGNORECASE)


def substitute_ext(template: str, ext: str) -> str:
    """Replace every ``[ext]`` token."""
    return _EXT_TOKEN.sub(ext, template)


def substitute_size(template: str, width: int, height: int) -> str:
    """Replace every ``[width]`` and ``[height]`` token."""
    return _HEIGHT_TOKEN.sub(str(height), _WIDTH_TOKEN.sub(str(width), template))


def webp_file_name(file_name: str) -> str:
    """Swap a trailing raster extension for ``webp``."""
    return _WEBP_SUFFIX.sub("webp", file_name)


def resolve_paths(file_name: str, output_path: PathOption = None, public_path: PathOption = None) -> AssetReference:
    """Turn a file name into its emitted location and public URL.

    Without a *public_path* the URL is the output path, left for the
    bundler's runtime public path to prefix.
    """
    if output_path is None:
        out = file_name
    elif callable(output_path):
        out = output_path(file_name)
    else:
        out = posixpath.join(output_path, file_name)

    if public_path is None:
        return AssetReference(output_path=out, url=out, runtime_public_path=True)

    if callable(public_path):
        url = public_path(file_name)
    elif public_path.endswith("/"):
        url = public_path + file_name
    else:
        url = f"{public_path}/{file_name}"
    return AssetReference(output_path=out, url=url)


@dataclass(frozen=True)
class TemplateNamer:
    """Default naming collaborator bound to one source resource."""

    resource_path: str | PurePath
    output_path: PathOption = None
    public_path: PathOption = None
    context: str | None = None

    def interpolate(self, template: str, content: bytes) -> str:
        """Expand *template* for a file holding *content*."""
        return interpolate_name(template, resource_path=self.resource_path, content=content, context=self.context)

    def resolve(self, file_name: str) -> AssetReference:
        """Resolve *file_name* to its output path and public URL."""
        return resolve_paths(file_name, self.output_path, self.public_path)
