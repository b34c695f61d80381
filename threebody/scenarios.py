#!/usr/bin/env python3
"""
Scenario construction for the Three-Body Simulator.

- Randomized initial conditions: each body sits near an anchor point with a
  small random offset and moves in a random direction at a random speed.
- Operator input: each field of the control form is taken as typed when it
  parses to a finite number, and defaulted independently otherwise.
- Built-in presets: a few named, deterministic configurations.

All randomness comes from a random.Random instance so scenarios can be
reproduced from a seed.
"""
import math
import random
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from .constants import (
    ANCHOR_POSITIONS,
    BODY_COUNT,
    DEFAULT_MASS,
    DEFAULT_SPEED_MULTIPLIER,
    G,
    MIN_RANDOM_SPEED,
    RANDOM_OFFSET_SPAN,
)
from .data_models import BodySpec
from .utils import try_float
from .vector_utils import Vec3, vec_norm, vec_scale

FIELD_NAMES = ("pos_x", "pos_y", "pos_z", "vel_x", "vel_y", "vel_z", "mass")


def _rng(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else random.Random()


def random_offset(rng: Optional[random.Random] = None) -> float:
    return (_rng(rng).random() - 0.5) * RANDOM_OFFSET_SPAN


def random_speed(rng: Optional[random.Random] = None) -> float:
    return _rng(rng).random() * DEFAULT_SPEED_MULTIPLIER + MIN_RANDOM_SPEED


def random_direction(rng: Optional[random.Random] = None) -> Vec3:
    """Uniformly distributed unit vector (azimuth theta, polar angle phi)."""
    r = _rng(rng)
    theta = r.random() * math.pi * 2
    phi = math.acos(r.random() * 2 - 1)
    return (
        math.sin(phi) * math.cos(theta),
        math.sin(phi) * math.sin(theta),
        math.cos(phi),
    )


def anchor_position(index: int) -> Vec3:
    """Anchor for body `index` (0-based); bodies past the table sit at the origin."""
    if 0 <= index < len(ANCHOR_POSITIONS):
        return ANCHOR_POSITIONS[index]
    return (0.0, 0.0, 0.0)


def resolve_body_spec(index: int, fields: Mapping[str, object],
                      rng: Optional[random.Random] = None,
                      default_mass: float = DEFAULT_MASS) -> BodySpec:
    """
    Build the spec for body `index` from raw form values.

    Every field is resolved on its own: a finite number is used as typed,
    anything else falls back to the randomized default for that field. A mass
    that is not positive falls back to default_mass.
    """
    r = _rng(rng)
    anchor = anchor_position(index)
    direction = random_direction(r)

    position = []
    for axis, key in enumerate(("pos_x", "pos_y", "pos_z")):
        value = try_float(fields.get(key))
        if value is None:
            value = anchor[axis] + random_offset(r)
        position.append(value)

    velocity = []
    for axis, key in enumerate(("vel_x", "vel_y", "vel_z")):
        value = try_float(fields.get(key))
        if value is None:
            value = direction[axis] * random_speed(r)
        velocity.append(value)

    mass = try_float(fields.get("mass"))
    if mass is None or mass <= 0:
        mass = default_mass

    return BodySpec(position=tuple(position), velocity=tuple(velocity), mass=mass)


def random_body_specs(count: int = BODY_COUNT, rng: Optional[random.Random] = None,
                      default_mass: float = DEFAULT_MASS) -> List[BodySpec]:
    """Fully randomized scenario, as produced by Reset."""
    r = _rng(rng)
    return [resolve_body_spec(i, {}, r, default_mass) for i in range(count)]


def spec_to_fields(spec: BodySpec) -> Dict[str, str]:
    """Format a spec as form strings, keyed like FIELD_NAMES; float() reads back the exact values."""
    values = tuple(spec.position) + tuple(spec.velocity) + (spec.mass,)
    return {key: repr(float(value)) for key, value in zip(FIELD_NAMES, values)}


# ============================================================
# Presets
# ============================================================

def template_random(rng: Optional[random.Random] = None) -> List[BodySpec]:
    return random_body_specs(BODY_COUNT, rng)


def template_symmetric_pair(rng: Optional[random.Random] = None) -> List[BodySpec]:
    """Two equal masses at rest, 100 units apart on the x-axis."""
    return [
        BodySpec(position=(-50.0, 0.0, 0.0), velocity=(0.0, 0.0, 0.0), mass=DEFAULT_MASS),
        BodySpec(position=(50.0, 0.0, 0.0), velocity=(0.0, 0.0, 0.0), mass=DEFAULT_MASS),
    ]


def template_lagrange_triangle(rng: Optional[random.Random] = None) -> List[BodySpec]:
    """
    Equal masses on an equilateral triangle rotating rigidly about the centre of mass.

    With side s = R*sqrt(3), the angular velocity is omega^2 = G*(3m)/s^3.
    """
    m = DEFAULT_MASS
    R = 60.0
    omega = math.sqrt(G * 3 * m / (R * math.sqrt(3)) ** 3)
    v = omega * R

    specs = []
    for k in range(3):
        angle = k * 2 * math.pi / 3
        pos = (R * math.cos(angle), R * math.sin(angle), 0.0)
        tangent = vec_norm((-pos[1], pos[0], 0.0))
        specs.append(BodySpec(position=pos, velocity=vec_scale(tangent, v), mass=m))
    return specs


def template_figure_eight(rng: Optional[random.Random] = None) -> List[BodySpec]:
    """Equal-mass figure-eight periodic solution (Chenciner-Montgomery).

    Dimensionless initial conditions (G=1, m=1) are scaled by length L and mass m,
    giving velocity scale V = sqrt(G*m/L).
    """
    m = DEFAULT_MASS
    L = 100.0
    V = math.sqrt(G * m / L)

    r1 = (-0.97000436, 0.24308753)
    r2 = (0.97000436, -0.24308753)
    r3 = (0.0, 0.0)
    v1 = (0.4662036850, 0.4323657300)
    v2 = (0.4662036850, 0.4323657300)
    v3 = (-0.93240737, -0.86473146)

    return [
        BodySpec(position=(r[0] * L, r[1] * L, 0.0), velocity=(v[0] * V, v[1] * V, 0.0), mass=m)
        for r, v in ((r1, v1), (r2, v2), (r3, v3))
    ]


PRESETS: Dict[str, Tuple[str, Callable[[Optional[random.Random]], List[BodySpec]]]] = {
    "random": ("Random three-body", template_random),
    "symmetric_pair": ("Symmetric pair", template_symmetric_pair),
    "lagrange_triangle": ("Lagrange triangle", template_lagrange_triangle),
    "figure_eight": ("Figure-eight", template_figure_eight),
}


def list_presets() -> List[Tuple[str, str]]:
    """Return list of (key, display_name) for the built-in presets."""
    return [(key, display) for key, (display, _) in PRESETS.items()]


def build_preset(name: str, rng: Optional[random.Random] = None) -> List[BodySpec]:
    if name not in PRESETS:
        raise KeyError(f"Unknown preset '{name}'")
    _, factory = PRESETS[name]
    return factory(rng)
