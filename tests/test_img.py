import pytest

from stufflib.img import segment_rgb
from stufflib.png import ColorType, PngHeader, PngImage


def _image(rows):
    img = PngImage.rgb(len(rows[0]), len(rows))
    for r, line in enumerate(rows, start=1):
        for c, color in enumerate(line, start=1):
            img.set_pixel(r, c, bytes(color))
    return img


def _pixels(img):
    return [
        img.get_pixel(r, c)
        for r in range(1, img.header.height + 1)
        for c in range(1, img.header.width + 1)
    ]


def test_zero_threshold_keeps_image():
    src = _image([[(10, 20, 30), (200, 10, 0)], [(0, 0, 255), (5, 5, 5)]])
    result = segment_rgb(src, 0)
    assert result.data == src.data
    assert result.header == src.header


def test_uniform_image_unchanged():
    src = _image([[(10, 20, 30)] * 4 for _ in range(3)])
    result = segment_rgb(src, 100)
    assert result.data == src.data


def test_far_colors_not_merged():
    black, white = (0, 0, 0), (255, 255, 255)
    src = _image([[black, white, black], [white, black, white], [black, white, black]])
    result = segment_rgb(src, 10)
    assert result.data == src.data


def test_similar_colors_merge_into_one_segment():
    a, b = (100, 100, 100), (102, 102, 102)
    src = _image([[a, b, a, b], [b, a, b, a], [a, b, a, b]])
    result = segment_rgb(src, 100)
    colors = {
        result.get_pixel(r, c)
        for r in range(1, 4)
        for c in range(1, 5)
        if (r, c) != (1, 1)
    }
    assert len(colors) == 1


def test_output_colors_come_from_source_and_source_untouched():
    src = _image(
        [
            [(10, 10, 10), (12, 12, 12), (200, 0, 0)],
            [(11, 11, 11), (13, 13, 13), (201, 1, 1)],
            [(0, 0, 250), (0, 0, 251), (0, 0, 252)],
        ]
    )
    before = bytes(src.data)
    result = segment_rgb(src, 5)
    assert bytes(src.data) == before
    assert set(_pixels(result)) <= set(_pixels(src))
    assert result is not src


def test_rgba_image_supported():
    header = PngHeader(width=2, height=2, color_type=ColorType.RGBA)
    src = PngImage(header, bytearray(4 * 4 * 4), bytes(2))
    for r in (1, 2):
        for c in (1, 2):
            src.set_pixel(r, c, bytes((50, 60, 70, 255)))
    result = segment_rgb(src, 50)
    assert result.data == src.data
    assert result.header.color_type is ColorType.RGBA


def test_grayscale_rejected():
    header = PngHeader(width=2, height=2, color_type=ColorType.GRAYSCALE)
    src = PngImage(header, bytearray(16), bytes(2))
    with pytest.raises(ValueError):
        segment_rgb(src, 50)