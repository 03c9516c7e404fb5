"""Region-merging segmentation of RGB images."""

from __future__ import annotations

from stufflib.numeric import clamp, norm2, scalar_vmul, vadd, vsub
from stufflib.png import ColorType, PngImage
from stufflib.unionfind import UnionFind

_CHANNELS = 3


def segment_rgb(src: PngImage, threshold_percent: float) -> PngImage:
    """Merge neighbouring pixels whose segment mean colors are close.

    A pixel joins the segment to its left or above when the Euclidean
    distance between the segment mean colors (channels scaled to ``[0, 1]``)
    is below ``threshold_percent / 100``, clamped to ``[0, 1]``. Merging
    repeats until nothing changes. Every pixel of the returned image takes
    the color of its segment's root pixel in ``src``; ``src`` is not modified.
    """
    if src.header.color_type not in (ColorType.RGB, ColorType.RGBA):
        raise ValueError(
            f"segmentation needs an RGB or RGBA image, got {src.header.color_type.label}"
        )
    width = src.header.width + 2
    height = src.header.height + 2
    threshold = clamp(0.0, threshold_percent / 100.0, 1.0)
    count = width * height

    segments = UnionFind(count)
    sizes = [1] * count
    sums = [
        [byte / 255.0 for byte in src.get_pixel(idx // width, idx % width)[:_CHANNELS]]
        for idx in range(count)
    ]

    def mean(segment: int) -> list[float]:
        return scalar_vmul(1.0 / sizes[segment], sums[segment])

    def distance(segment: int, cur_segment: int, cur_mean: list[float]) -> float:
        if segment == cur_segment:
            return threshold
        return norm2(vsub(mean(segment), cur_mean))

    merged = True
    while merged:
        merged = False
        for row in range(2, height - 1):
            for col in range(2, width - 1):
                cur_idx = row * width + col
                cur_seg = segments.find_root(cur_idx)
                cur_mean = mean(cur_seg)

                left_seg = segments.find_root(cur_idx - 1)
                above_seg = segments.find_root(cur_idx - width)
                dist_left = distance(left_seg, cur_seg, cur_mean)
                dist_above = distance(above_seg, cur_seg, cur_mean)

                if dist_left < dist_above and dist_left < threshold:
                    target = left_seg
                elif dist_above < threshold:
                    target = above_seg
                else:
                    continue
                segments.union(target, cur_seg)
                sizes[target] += sizes[cur_seg]
                sums[target] = vadd(sums[target], sums[cur_seg])
                merged = True

    dst = src.copy()
    for idx in range(count):
        seg = segments.find_root(idx)
        dst.set_pixel(idx // width, idx % width, src.get_pixel(seg // width, seg % width))
    return dst