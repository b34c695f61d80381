#!/usr/bin/env python3
"""
Data models for the Three-Body Simulator.

This module defines the Body shared between physics, rendering, and UI, the
fixed-capacity trail ring that records its past positions, and the BodySpec
used to describe a body before it exists.

Units and usage
- position and velocity are (x, y, z) tuples in simulation units; mass is a positive scalar.
- trail is mutated only by the integrator; renderers read it through TrailBuffer.read().
- Access to Body instances from the app is coordinated by SimulationController using a lock.
"""
import math
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .constants import DEFAULT_MASS, TRAIL_CAPACITY
from .vector_utils import ZERO, Vec3, as_vec3


class InvalidMassError(ValueError):
    """Raised when a body is given a mass that is not a positive finite number."""


def validate_mass(mass, name: str = "Body") -> float:
    if isinstance(mass, bool):
        raise InvalidMassError(f"{name}: mass must be a number, got {mass!r}")
    try:
        m = float(mass)
    except (TypeError, ValueError):
        raise InvalidMassError(f"{name}: mass must be a number, got {mass!r}") from None
    if not math.isfinite(m) or m <= 0:
        raise InvalidMassError(f"{name}: mass must be positive, got {m!r}")
    return m


class TrailBuffer:
    """
    Fixed-capacity circular buffer of past positions.

    Slots are preallocated; write_index is the next slot to overwrite and count
    the number of valid entries. Once count reaches capacity, the slot at
    write_index holds the oldest surviving point.
    """

    __slots__ = ("_capacity", "_slots", "_write_index", "_count")

    def __init__(self, capacity: int = TRAIL_CAPACITY):
        capacity = int(capacity)
        if capacity < 1:
            raise ValueError(f"Trail capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._slots: List[Vec3] = [ZERO] * capacity
        self._write_index = 0
        self._count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def write_index(self) -> int:
        return self._write_index

    @property
    def count(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def append(self, point: Vec3) -> None:
        self._slots[self._write_index] = point
        self._write_index = (self._write_index + 1) % self._capacity
        if self._count < self._capacity:
            self._count += 1

    def clear(self) -> None:
        self._write_index = 0
        self._count = 0

    def __iter__(self) -> Iterator[Vec3]:
        """Yield valid points oldest first."""
        if self._count < self._capacity:
            for k in range(self._count):
                yield self._slots[k]
        else:
            for k in range(self._capacity):
                yield self._slots[(self._write_index + k) % self._capacity]

    def read(self) -> List[Vec3]:
        return list(self)

    def __repr__(self) -> str:
        return f"TrailBuffer(capacity={self._capacity}, count={self._count}, write_index={self._write_index})"


@dataclass
class BodySpec:
    """Initial conditions for one body, as supplied by the operator or a preset."""
    position: Vec3
    velocity: Vec3 = ZERO
    mass: float = DEFAULT_MASS
    name: Optional[str] = None
    color: Optional[Tuple[int, int, int]] = None


@dataclass
class Body:
    """
    A point mass taking part in the simulation.

    Fields:
    - name: Identifier for the body
    - mass: Positive mass, fixed for the body's lifetime
    - position: 3D position (x, y, z)
    - velocity: 3D velocity (vx, vy, vz)
    - color: RGB tuple used for rendering
    - trail: Ring buffer of past positions for drawing motion trails
    """
    name: str
    mass: float
    position: Vec3
    velocity: Vec3
    color: Tuple[int, int, int] = (200, 200, 255)
    trail: TrailBuffer = field(default_factory=TrailBuffer)

    def __post_init__(self):
        object.__setattr__(self, "mass", validate_mass(self.mass, self.name))
        self.position = as_vec3(self.position)
        self.velocity = as_vec3(self.velocity)

    def __setattr__(self, key, value):
        if key == "mass" and "mass" in self.__dict__:
            raise AttributeError(f"{self.name}: mass is fixed once the body is created")
        super().__setattr__(key, value)

    @property
    def radius(self) -> float:
        """Visual radius, proportional to the cube root of mass."""
        return math.pow(self.mass, 1.0 / 3.0) * 2

    def add_trail_point(self) -> None:
        """Append the current position to the trail."""
        self.trail.append(self.position)
