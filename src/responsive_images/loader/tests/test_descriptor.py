"""Tests for descriptor building and module serialization."""

from __future__ import annotations

import base64

import pytest

from responsive_images.core.datatypes import Artifact, AssetReference, ImageDescriptor, ResizeResult
from responsive_images.core.exceptions import ResponsiveImagesError
from responsive_images.loader.descriptor import build, build_passthrough, placeholder_data_uri
from responsive_images.loader.module import render_module


def _artifact(url: str, width: int, height: int, *, runtime: bool = False) -> Artifact:
    return Artifact(path=AssetReference(output_path=url, url=url, runtime_public_path=runtime), width=width, height=height)


NATIVE = [_artifact("/i/a-50.png", 50, 25), _artifact("/i/a-100.png", 100, 50)]
WEBP = [_artifact("/i/a-50.webp", 50, 25), _artifact("/i/a-100.webp", 100, 50)]


class TestBuild:
    """Tests for the ``build`` function."""

    def test_src_sets(self) -> None:
        """Both srcsets list every planned width with a ``w`` descriptor."""
        descriptor = build(NATIVE, WEBP, mime="image/png")

        assert descriptor.src_set == "/i/a-50.png 50w,/i/a-100.png 100w"
        assert descriptor.src_set_webp == "/i/a-50.webp 50w,/i/a-100.webp 100w"

    def test_first_artifact_is_default(self) -> None:
        """``src``, ``width`` and ``height`` mirror the first artifact."""
        descriptor = build(list(reversed(NATIVE)), list(reversed(WEBP)), mime="image/png")

        assert descriptor.src.url == "/i/a-100.png"
        assert (descriptor.width, descriptor.height) == (100, 50)
        assert str(descriptor) == "/i/a-100.png"

    def test_webp_set_never_exceeds_native(self) -> None:
        """Extra WebP artifacts are not listed."""
        descriptor = build(NATIVE[:1], WEBP, mime="image/png")
        assert descriptor.src_set_webp == "/i/a-50.webp 50w"

    def test_placeholder_data_uri_round_trips(self) -> None:
        """The placeholder decodes back to the placeholder bytes."""
        raw = b"\x89PNG tiny"
        descriptor = build(NATIVE, WEBP, placeholder=ResizeResult(data=raw, width=40, height=20), mime="image/png")

        assert descriptor.placeholder is not None
        prefix, payload = descriptor.placeholder.split(",", 1)
        assert prefix == "data:image/png;base64"
        assert base64.b64decode(payload) == raw
        assert len(descriptor.images) == 2

    def test_no_placeholder_by_default(self) -> None:
        """Without a placeholder result the field is absent."""
        descriptor = build(NATIVE, WEBP, mime="image/png")
        assert descriptor.placeholder is None
        assert "placeholder" not in descriptor.to_dict()

    def test_empty_artifacts_raise(self) -> None:
        """A descriptor needs at least one artifact."""
        with pytest.raises(ResponsiveImagesError):
            build([], [], mime="image/png")

    def test_to_dict(self) -> None:
        """The plain mapping uses the runtime field names."""
        data = build(NATIVE, WEBP, mime="image/png").to_dict()

        assert data["images"] == [
            {"path": "/i/a-50.png", "width": 50, "height": 25, "srcFragment": "/i/a-50.png 50w"},
            {"path": "/i/a-100.png", "width": 100, "height": 50, "srcFragment": "/i/a-100.png 100w"},
        ]
        assert data["src"] == "/i/a-50.png"
        assert set(data) == {"srcSet", "srcSetWebP", "images", "src", "width", "height"}


class TestPassthrough:
    """Tests for the ``build_passthrough`` function."""

    def test_sentinel_dimensions(self) -> None:
        """Pass-through output reports the 100x100 stand-in size."""
        ref = AssetReference(output_path="a.png", url="/a.png")
        descriptor = build_passthrough(ref)

        assert (descriptor.width, descriptor.height) == (100, 100)
        assert len(descriptor.images) == 1
        assert descriptor.src_set == "/a.png"
        assert descriptor.placeholder is None
        assert descriptor.passthrough

    def test_rendered_descriptor_is_not_passthrough(self) -> None:
        """Only ``build_passthrough`` marks a descriptor as pass-through."""
        assert not build(NATIVE, WEBP, mime="image/png").passthrough
        assert "passthrough" not in build_passthrough(AssetReference(output_path="a.png", url="/a.png")).to_dict()


class TestPlaceholderDataUri:
    """Tests for the ``placeholder_data_uri`` function."""

    def test_format(self) -> None:
        """The URI embeds the mime type and base64 payload."""
        assert placeholder_data_uri(b"abc", "image/jpeg") == "data:image/jpeg;base64,YWJj"


class TestRenderModule:
    """Tests for the CommonJS serializer."""

    def test_static_urls(self) -> None:
        """Configured public URLs are emitted as string literals."""
        module = render_module(build(NATIVE, WEBP, mime="image/png"))

        assert module.startswith("module.exports = {")
        assert module.endswith("};")
        assert 'srcSet:"/i/a-50.png"+" 50w"+","+"/i/a-100.png"+" 100w"' in module
        assert 'srcSetWebP:"/i/a-50.webp"+" 50w"' in module
        assert 'toString:function(){return "/i/a-50.png"}' in module
        assert "width:50,height:25}" in module
        assert "placeholder" not in module

    def test_runtime_public_path(self) -> None:
        """References without a public path use the bundler's runtime prefix."""
        native = [_artifact("a-50.png", 50, 25, runtime=True)]
        module = render_module(build(native, [], mime="image/png"))

        assert 'src:__webpack_public_path__ + "a-50.png"' in module
        assert 'srcSetWebP:""' in module

    def test_placeholder_included(self) -> None:
        """A placeholder is emitted as a JSON string."""
        placeholder = ResizeResult(data=b"abc", width=40, height=20)
        module = render_module(build(NATIVE, WEBP, placeholder=placeholder, mime="image/png"))
        assert 'placeholder:"data:image/png;base64,YWJj"' in module

    def test_passthrough_src_set_is_plain_reference(self) -> None:
        """Pass-through srcsets carry no width descriptor."""
        ref = AssetReference(output_path="a.png", url="a.png", runtime_public_path=True)
        module = render_module(build_passthrough(ref))
        assert 'srcSet:__webpack_public_path__ + "a.png",' in module

    def test_rendered_src_set_keeps_width_descriptors(self) -> None:
        """A rendered descriptor keeps width descriptors even if its srcset equals the src URL."""
        artifact = _artifact("/i/a-50.png", 50, 25)
        descriptor = ImageDescriptor(
            src_set=artifact.path.url,
            src_set_webp="",
            images=(artifact,),
            src=artifact.path,
            width=50,
            height=25,
        )
        module = render_module(descriptor)
        assert 'srcSet:"/i/a-50.png"+" 50w",' in module
