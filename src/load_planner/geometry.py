"""Geometry utilities for container loading."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Container, Dimensions, PackedPackage

Bounds = tuple[float, float, float, float, float, float]


def volume(d: "Dimensions") -> float:
    return float(d.length) * float(d.width) * float(d.height)


def fits_axis_aligned(inner: "Dimensions", outer: "Dimensions") -> bool:
    """
    True when `inner` fits inside `outer` with axes kept as-is.

    No rotation is tried: length maps to length, width to width,
    height to height.
    """
    return (
        float(outer.length) >= float(inner.length)
        and float(outer.width) >= float(inner.width)
        and float(outer.height) >= float(inner.height)
    )


def boxes_overlap(a: Bounds, b: Bounds) -> bool:
    """
    Axis-aligned bounding box (AABB) overlap test.

    a, b are bounds: (x1, y1, z1, x2, y2, z2)

    Overlap exists only if they overlap on ALL 3 axes with positive volume.
    Touching faces/edges (ax2 == bx1) is NOT considered overlap.
    """
    ax1, ay1, az1, ax2, ay2, az2 = a
    bx1, by1, bz1, bx2, by2, bz2 = b

    return (ax1 < bx2 and ax2 > bx1) and (ay1 < by2 and ay2 > by1) and (az1 < bz2 and az2 > bz1)


def envelope_bounds(p: "PackedPackage") -> Bounds:
    """
    Bounds of a placed package from its center position.

    Axis convention: length runs along x, height along y, width along z.
    """
    half_l = float(p.dimensions.length) / 2
    half_h = float(p.dimensions.height) / 2
    half_w = float(p.dimensions.width) / 2
    x, y, z = float(p.position.x), float(p.position.y), float(p.position.z)
    return (x - half_l, y - half_h, z - half_w, x + half_l, y + half_h, z + half_w)


def within_container(p: "PackedPackage", container: "Container", tol: float = 1e-9) -> bool:
    x1, y1, z1, x2, y2, z2 = envelope_bounds(p)
    dims = container.dimensions
    return (
        x1 >= -tol
        and y1 >= -tol
        and z1 >= -tol
        and x2 <= float(dims.length) + tol
        and y2 <= float(dims.height) + tol
        and z2 <= float(dims.width) + tol
    )
