"""Small vector helpers shared by the lighting and stepping code."""

from __future__ import annotations

from math import isfinite, sqrt
from random import Random

from .models import Vector3

ZERO: Vector3 = (0.0, 0.0, 0.0)


def scale(vector: Vector3, weight: float) -> Vector3:
    return (vector[0] * weight, vector[1] * weight, vector[2] * weight)


def add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def subtract(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def length(vector: Vector3) -> float:
    return sqrt(vector[0] ** 2 + vector[1] ** 2 + vector[2] ** 2)


def is_finite_vector(vector: Vector3) -> bool:
    return all(isfinite(component) for component in vector)


def random_vector(rng: Random, half_width: float) -> Vector3:
    return (
        rng.uniform(-half_width, half_width),
        rng.uniform(-half_width, half_width),
        rng.uniform(-half_width, half_width),
    )
