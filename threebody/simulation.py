#!/usr/bin/env python3
"""
Simulation state for the Three-Body Simulator.

SimulationContext bundles the configuration, the body registry and the
integrator for one simulation run, so nothing here depends on process-wide
mutable state. The renderer drives it:

    ctx = SimulationContext()
    ctx.initialize(specs)      # on start/reset
    ctx.step()                 # once per frame
    for body in ctx.bodies():  # draw
        ...
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from .constants import BODY_COLORS, DEFAULT_MASS, DT, G, MIN_DISTANCE_SQ, TRAIL_CAPACITY
from .data_models import Body, BodySpec, TrailBuffer, validate_mass
from .physics import GravityIntegrator

logger = logging.getLogger(__name__)

TeardownHook = Callable[[Sequence[Body]], None]


@dataclass
class SimulationConfig:
    """Tunable constants for one simulation run."""
    gravity: float = G
    dt: float = DT
    trail_capacity: int = TRAIL_CAPACITY
    min_distance_sq: float = MIN_DISTANCE_SQ
    default_mass: float = DEFAULT_MASS

    def __post_init__(self):
        if not math.isfinite(self.gravity):
            raise ValueError(f"gravity must be finite, got {self.gravity!r}")
        if not (math.isfinite(self.dt) and self.dt > 0):
            raise ValueError(f"dt must be positive, got {self.dt!r}")
        if int(self.trail_capacity) < 1:
            raise ValueError(f"trail_capacity must be at least 1, got {self.trail_capacity!r}")
        self.trail_capacity = int(self.trail_capacity)
        if not (math.isfinite(self.min_distance_sq) and self.min_distance_sq > 0):
            raise ValueError(f"min_distance_sq must be positive, got {self.min_distance_sq!r}")
        self.default_mass = validate_mass(self.default_mass, "default_mass")


def body_color(index: int) -> Tuple[int, int, int]:
    return BODY_COLORS[index % len(BODY_COLORS)]


class BodyRegistry:
    """
    Owns the current ordered set of bodies and their trails.

    The optional teardown hook is called with the outgoing bodies whenever
    they are replaced, so a renderer can drop their visuals.
    """

    def __init__(self, trail_capacity: int = TRAIL_CAPACITY, teardown: Optional[TeardownHook] = None):
        self.trail_capacity = int(trail_capacity)
        self.teardown = teardown
        self._bodies: List[Body] = []

    def initialize(self, body_specs: Iterable[BodySpec]) -> Tuple[Body, ...]:
        """
        Replace the current bodies with one new body per spec.

        Every spec is validated before anything is replaced, so an
        InvalidMassError leaves the previous bodies in place.
        """
        new_bodies = []
        for i, spec in enumerate(body_specs):
            name = spec.name or f"Body {i + 1}"
            new_bodies.append(Body(
                name=name,
                mass=spec.mass,
                position=spec.position,
                velocity=spec.velocity,
                color=spec.color or body_color(i),
                trail=TrailBuffer(self.trail_capacity),
            ))
        if self._bodies and self.teardown is not None:
            self.teardown(tuple(self._bodies))
        self._bodies = new_bodies
        logger.debug("Registry initialized with %d bodies", len(new_bodies))
        return self.bodies()

    def bodies(self) -> Tuple[Body, ...]:
        return tuple(self._bodies)

    def __len__(self) -> int:
        return len(self._bodies)

    def __iter__(self) -> Iterator[Body]:
        return iter(tuple(self._bodies))


class SimulationContext:
    """Configuration, registry and integrator for one simulator instance."""

    def __init__(self, config: Optional[SimulationConfig] = None, teardown: Optional[TeardownHook] = None):
        self.config = config or SimulationConfig()
        self.registry = BodyRegistry(self.config.trail_capacity, teardown=teardown)
        self.integrator = GravityIntegrator(
            gravity=self.config.gravity,
            dt=self.config.dt,
            min_distance_sq=self.config.min_distance_sq,
        )
        self.step_count = 0

    @property
    def time_elapsed(self) -> float:
        return self.step_count * self.config.dt

    def initialize(self, body_specs: Iterable[BodySpec]) -> Tuple[Body, ...]:
        bodies = self.registry.initialize(body_specs)
        self.step_count = 0
        return bodies

    def step(self) -> None:
        bodies = self.registry.bodies()
        if not bodies:
            return
        self.integrator.step(bodies)
        self.step_count += 1

    def bodies(self) -> Tuple[Body, ...]:
        return self.registry.bodies()


def initialize(context: SimulationContext, body_specs: Iterable[BodySpec]) -> Tuple[Body, ...]:
    return context.initialize(body_specs)


def step(context: SimulationContext) -> None:
    context.step()
