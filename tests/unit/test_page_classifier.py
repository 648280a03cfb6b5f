# ABOUTME: Unit tests for classify_image and PageImage.
# ABOUTME: Covers format detection, spread classification, error kinds, and markup generation.

from io import BytesIO

import pytest
from PIL import features

from comicpub.packaging.errors import InvalidImageError, UnsupportedImageError
from comicpub.packaging.page import PageImage, classify_image, read_source
from tests.fixtures.images import make_image, make_noisy_png, make_page, make_spread


class TestFormatDetection:
    """The format comes from the bytes, never from a name."""

    @pytest.mark.parametrize(
        ("fmt", "extension", "mime_type"),
        [
            ("PNG", ".png", "image/png"),
            ("JPEG", ".jpg", "image/jpeg"),
            ("GIF", ".gif", "image/gif"),
        ],
    )
    def test_supported_formats(self, fmt: str, extension: str, mime_type: str) -> None:
        page = classify_image(make_page(fmt=fmt))
        assert page.extension == extension
        assert page.mime_type == mime_type
        assert page.size == (60, 90)

    def test_bmp_is_unsupported(self) -> None:
        with pytest.raises(UnsupportedImageError) as excinfo:
            classify_image(make_page(fmt="BMP"))
        assert excinfo.value.image_format == "BMP"

    @pytest.mark.skipif(not features.check("webp"), reason="Pillow built without WebP")
    def test_webp_is_unsupported(self) -> None:
        with pytest.raises(UnsupportedImageError):
            classify_image(make_page(fmt="WEBP"))

    def test_unsupported_is_not_invalid(self) -> None:
        """Unsupported and invalid are distinct error kinds."""
        assert not issubclass(UnsupportedImageError, InvalidImageError)
        assert not issubclass(InvalidImageError, UnsupportedImageError)

    def test_garbage_is_invalid(self) -> None:
        with pytest.raises(InvalidImageError):
            classify_image(b"this is not an image at all")

    def test_empty_data_is_invalid(self) -> None:
        with pytest.raises(InvalidImageError):
            classify_image(b"")

    def test_truncated_png_is_invalid(self) -> None:
        data = make_noisy_png()
        with pytest.raises(InvalidImageError):
            classify_image(data[: len(data) // 2])


class TestSpreadClassification:
    """spread is exactly width > height."""

    def test_portrait_is_regular(self) -> None:
        assert classify_image(make_page()).spread is False

    def test_landscape_is_spread(self) -> None:
        assert classify_image(make_spread()).spread is True

    def test_square_is_regular(self) -> None:
        assert classify_image(make_image(80, 80)).spread is False

    def test_one_pixel_wider_is_spread(self) -> None:
        assert classify_image(make_image(81, 80)).spread is True

    def test_deterministic(self) -> None:
        """The same bytes always classify the same way."""
        data = make_spread(fmt="JPEG")
        first, second = classify_image(data), classify_image(data)
        assert first == second

    def test_label_kept_and_base_name_unassigned(self) -> None:
        page = classify_image(make_page(), "Chapter 1")
        assert page.nav_label == "Chapter 1"
        assert page.base_name == ""


class TestReadSource:
    """Bytes and readable streams are interchangeable."""

    def test_bytes(self) -> None:
        assert read_source(b"abc") == b"abc"

    def test_stream(self) -> None:
        assert read_source(BytesIO(b"abc")) == b"abc"


class TestPageMarkup:
    """File naming and generated markup."""

    def _page(self, width: int, height: int, label: str | None = None) -> PageImage:
        return PageImage(
            extension=".png",
            mime_type="image/png",
            width=width,
            height=height,
            nav_label=label,
            base_name="S01-C000001P000001",
        )

    def test_regular_file_names(self) -> None:
        page = self._page(600, 900)
        assert page.image_file_name() == "S01-C000001P000001.png"
        assert page.page_file_names() == ["S01-C000001P000001.xhtml"]
        assert page.page_file_names(right_to_left=True) == ["S01-C000001P000001.xhtml"]

    def test_spread_file_names_follow_direction(self) -> None:
        page = self._page(1200, 900)
        assert page.page_file_names() == [
            "S01-C000001P000001_L.xhtml",
            "S01-C000001P000001_R.xhtml",
        ]
        assert page.page_file_names(right_to_left=True) == [
            "S01-C000001P000001_R.xhtml",
            "S01-C000001P000001_L.xhtml",
        ]

    def test_regular_markup_embeds_size_and_file(self) -> None:
        [(name, markup)] = self._page(600, 900).render_pages()
        assert name == "S01-C000001P000001.xhtml"
        assert 'content="width=600, height=900"' in markup
        assert 'xlink:href="S01-C000001P000001.png"' in markup
        assert '<image x="0" y="0" width="600" height="900"' in markup

    def test_spread_markup_uses_half_width_viewports(self) -> None:
        pages = dict(self._page(1201, 900).render_pages())
        left = pages["S01-C000001P000001_L.xhtml"]
        right = pages["S01-C000001P000001_R.xhtml"]
        assert 'content="width=600, height=900"' in left
        assert 'content="width=600, height=900"' in right
        assert '<image x="0" y="0" width="1201"' in left
        assert '<image x="-600" y="0" width="1201"' in right

    def test_spread_markup_order_reverses_for_rtl(self) -> None:
        page = self._page(1200, 900)
        ltr = page.render_pages()
        rtl = page.render_pages(right_to_left=True)
        assert [name for name, _ in rtl] == [name for name, _ in reversed(ltr)]
        assert dict(ltr) == dict(rtl)

    def test_regular_markup_ignores_direction(self) -> None:
        page = self._page(600, 900, label="Opening")
        assert page.render_pages(right_to_left=True) == page.render_pages(right_to_left=False)

    def test_title_and_lang_are_escaped(self) -> None:
        [(_, markup)] = self._page(600, 900, label="Cats & <Dogs>").render_pages(lang="fr")
        assert "<title>Cats &amp; &lt;Dogs&gt;</title>" in markup
        assert 'xml:lang="fr"' in markup
