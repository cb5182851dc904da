"""Geometry module for the box primitive.

Components:
    box: Axis-aligned box, hit record and slab-method intersection

All intersection routines are Taichi functions (@ti.func) so they can be
called from the parallel pixel kernel.
"""

from .box import MISS_DISTANCE, Box, Hit, hit_normal, intersect_box, is_hit, make_miss

__all__ = [
    "Box",
    "Hit",
    "MISS_DISTANCE",
    "intersect_box",
    "hit_normal",
    "is_hit",
    "make_miss",
]
