"""
Target dimension planning.

Two policies are supported: "fill" forces the requested sides regardless of
aspect ratio, "fit inside" scales into the requested box keeping the source
ratio. Neither ever enlarges past the source resolution.
"""
from typing import Optional

from imagepress.models.domain import Dimensions


def _requested(value: Optional[int]) -> Optional[int]:
    if value is None or value <= 0:
        return None
    return int(value)


def _fit_inside(
    natural_width: int,
    natural_height: int,
    requested_width: Optional[int],
    requested_height: Optional[int]
) -> Dimensions:
    natural_ratio = natural_width / natural_height

    if requested_width and requested_height:
        target_ratio = requested_width / requested_height
        if natural_ratio > target_ratio:
            # width is the binding constraint
            return Dimensions(requested_width, max(1, round(requested_width / natural_ratio)))
        return Dimensions(max(1, round(requested_height * natural_ratio)), requested_height)

    if requested_width:
        return Dimensions(requested_width, max(1, round(requested_width / natural_ratio)))
    return Dimensions(max(1, round(requested_height * natural_ratio)), requested_height)


def plan_resize(
    natural_width: int,
    natural_height: int,
    requested_width: Optional[int] = None,
    requested_height: Optional[int] = None,
    maintain_aspect_ratio: bool = False
) -> Optional[Dimensions]:
    """
    Compute the dimensions an image should be resized to.

    Args:
        natural_width: Decoded source width
        natural_height: Decoded source height
        requested_width: Requested width; None or <= 0 means unset
        requested_height: Requested height; None or <= 0 means unset
        maintain_aspect_ratio: Fit inside the requested box instead of filling it

    Returns:
        Target Dimensions, or None if no resize should happen
    """
    requested_width = _requested(requested_width)
    requested_height = _requested(requested_height)

    if requested_width is None and requested_height is None:
        return None

    if not maintain_aspect_ratio or natural_width <= 0 or natural_height <= 0:
        return Dimensions(
            min(requested_width or natural_width, natural_width),
            min(requested_height or natural_height, natural_height)
        )

    planned = _fit_inside(natural_width, natural_height, requested_width, requested_height)

    # withoutEnlargement: keep the source size if the plan would upscale
    if planned.width > natural_width or planned.height > natural_height:
        return Dimensions(natural_width, natural_height)
    return planned
