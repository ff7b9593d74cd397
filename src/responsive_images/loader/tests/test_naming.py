"""Tests for filename templating and path resolution."""

from __future__ import annotations

import hashlib

import pytest

from responsive_images.core.exceptions import ConfigurationError
from responsive_images.loader.naming import (
    TemplateNamer,
    content_hash,
    interpolate_name,
    resolve_paths,
    substitute_ext,
    substitute_size,
    webp_file_name,
)

CONTENT = b"pixels"
MD5 = hashlib.md5(CONTENT).hexdigest()


class TestContentHash:
    """Tests for the ``content_hash`` function."""

    def test_default_is_md5_hex(self) -> None:
        """Without options the full md5 hex digest is returned."""
        assert content_hash(CONTENT) == MD5

    def test_length_truncates(self) -> None:
        """A length keeps only the leading characters."""
        assert content_hash(CONTENT, length=8) == MD5[:8]

    def test_other_algorithm(self) -> None:
        """Any hashlib algorithm can be named."""
        assert content_hash(CONTENT, "sha256") == hashlib.sha256(CONTENT).hexdigest()

    def test_base64_digest_is_filename_safe(self) -> None:
        """Base64 digests contain no path separators or padding."""
        value = content_hash(CONTENT, "sha1", "base64")
        assert "/" not in value
        assert not value.endswith("=")

    def test_unknown_algorithm_raises(self) -> None:
        """Unknown algorithms are configuration errors."""
        with pytest.raises(ConfigurationError, match="Unsupported hash type"):
            content_hash(CONTENT, "crc99")

    @pytest.mark.parametrize("algorithm", ["shake_128", "shake_256"])
    def test_variable_length_algorithm_raises(self, algorithm: str) -> None:
        """Extendable-output hashes have no fixed digest and are rejected."""
        with pytest.raises(ConfigurationError, match="no fixed digest length"):
            content_hash(CONTENT, algorithm)

    def test_variable_length_algorithm_in_template_raises(self) -> None:
        """The template path reports the same configuration error."""
        with pytest.raises(ConfigurationError, match="shake_128"):
            interpolate_name("[shake_128:hash:8].png", resource_path="a.png", content=CONTENT)

    def test_unknown_digest_raises(self) -> None:
        """Unknown digest encodings are configuration errors."""
        with pytest.raises(ConfigurationError, match="Unsupported digest type"):
            content_hash(CONTENT, "md5", "base26")


class TestInterpolateName:
    """Tests for the ``interpolate_name`` function."""

    def test_default_template(self) -> None:
        """``[hash]-[width].[ext]`` expands hash, width and ext."""
        template = substitute_size(substitute_ext("[hash]-[width].[ext]", "png"), 320, 200)
        assert interpolate_name(template, resource_path="img/a.png", content=CONTENT) == f"{MD5}-320.png"

    def test_hash_variants(self) -> None:
        """Short and fully qualified hash tokens are supported."""
        name = interpolate_name(
            "[hash:6]-[contenthash:4]-[sha1:hash:hex:5]",
            resource_path="a.png",
            content=CONTENT,
        )
        sha1 = hashlib.sha1(CONTENT).hexdigest()
        assert name == f"{MD5[:6]}-{MD5[:4]}-{sha1[:5]}"

    def test_name_and_path(self) -> None:
        """``[name]`` is the stem and ``[path]`` is relative to the context."""
        name = interpolate_name(
            "[path][name]-[height].jpg",
            resource_path="/project/assets/photos/beach.jpg",
            content=CONTENT,
            context="/project",
        )
        assert name == "assets/photos/beach-[height].jpg"

    def test_path_outside_context(self) -> None:
        """Parent directory hops are made filename-safe."""
        name = interpolate_name("[path][name]", resource_path="/other/x.png", content=CONTENT, context="/project")
        assert name == "_/other/x"

    def test_tokens_are_case_insensitive(self) -> None:
        """Tokens match regardless of case."""
        assert substitute_size("[WIDTH]x[Height]", 3, 4) == "3x4"


class TestWebpFileName:
    """Tests for the ``webp_file_name`` function."""

    @pytest.mark.parametrize("name", ["a-100.jpg", "a-100.jpeg", "a-100.PNG", "a-100.gif"])
    def test_rewrites_raster_extensions(self, name: str) -> None:
        """Trailing raster extensions become ``webp``."""
        assert webp_file_name(name).endswith(".webp")

    def test_webp_stays_webp(self) -> None:
        """A WebP name is untouched."""
        assert webp_file_name("a-100.webp") == "a-100.webp"


class TestResolvePaths:
    """Tests for the ``resolve_paths`` function."""

    def test_defaults_use_runtime_public_path(self) -> None:
        """Without a public path the URL awaits the runtime prefix."""
        ref = resolve_paths("a.png")
        assert ref.output_path == "a.png"
        assert ref.url == "a.png"
        assert ref.runtime_public_path is True

    def test_output_prefix(self) -> None:
        """A string output path is joined as a directory."""
        assert resolve_paths("a.png", output_path="img").output_path == "img/a.png"

    def test_output_callable(self) -> None:
        """A callable output path maps the file name."""
        assert resolve_paths("a.png", output_path=lambda n: f"x/{n}").output_path == "x/a.png"

    @pytest.mark.parametrize("prefix", ["https://cdn.test/img", "https://cdn.test/img/"])
    def test_public_prefix(self, prefix: str) -> None:
        """Public prefixes get exactly one separating slash."""
        ref = resolve_paths("a.png", public_path=prefix)
        assert ref.url == "https://cdn.test/img/a.png"
        assert ref.runtime_public_path is False

    def test_public_callable(self) -> None:
        """A callable public path maps the file name."""
        assert resolve_paths("a.png", public_path=lambda n: f"/s/{n}").url == "/s/a.png"


class TestTemplateNamer:
    """Tests for the default naming collaborator."""

    def test_interpolate_then_resolve(self) -> None:
        """The namer expands templates and resolves paths with its options."""
        namer = TemplateNamer(resource_path="/p/a.png", output_path="out", public_path="/static")
        file_name = namer.interpolate("[name]-[hash:4].png", CONTENT)
        ref = namer.resolve(file_name)

        assert file_name == f"a-{MD5[:4]}.png"
        assert ref.output_path == f"out/a-{MD5[:4]}.png"
        assert ref.url == f"/static/a-{MD5[:4]}.png"
