#!/usr/bin/env python3
"""
Core Physics Engine for the Three-Body Simulator

Responsibilities
- Compute pairwise Newtonian gravitational forces by direct summation.
- Advance body states by one fixed step with a semi-implicit Euler integrator.
- Record each body's new position into its trail ring.
- Provide small diagnostics (momentum, energy, centre of mass) for readouts and tests.

Units and conventions
- Positions, velocities and masses are in abstract simulation units.
- G defaults to 9.8, tuned for visual stability rather than physical accuracy.

Numerical notes
- Close pairs: when the squared separation is below min_distance_sq the pair is
  skipped entirely. This avoids the singular force at zero separation; it is not
  a collision model.
- Integration order: every velocity is updated from forces evaluated on the
  positions at the start of the step, then every position is advanced with the
  new velocity (semi-implicit Euler). Energy is not conserved exactly.
- Complexity: O(N^2) per step. Intended for a handful of bodies.

Threading
- This module is pure compute. The app's controller guards shared data with a lock.
"""

import math
from typing import List, Sequence

from .constants import DT, G, MIN_DISTANCE_SQ
from .data_models import Body
from .vector_utils import (
    ZERO,
    Vec3,
    vec_add,
    vec_div,
    vec_len,
    vec_len_sq,
    vec_norm,
    vec_scale,
    vec_sub,
)


class GravityIntegrator:
    """
    Direct-summation N-body integrator.

    The force on body a from body b is:
    F = G * m_a * m_b / |r|^2 * r_hat,  r = x_b - x_a

    Pairs with |r|^2 < min_distance_sq contribute nothing.
    """

    def __init__(self, gravity: float = G, dt: float = DT, min_distance_sq: float = MIN_DISTANCE_SQ):
        """
        Initialize the integrator.

        Args:
            gravity: Gravitational constant
            dt: Fixed time step advanced by each call to step()
            min_distance_sq: Squared separation below which a pair is skipped (must be > 0)
        """
        self.gravity = float(gravity)
        self.dt = float(dt)
        self.min_distance_sq = float(min_distance_sq)
        if not (math.isfinite(self.min_distance_sq) and self.min_distance_sq > 0):
            raise ValueError(f"min_distance_sq must be positive, got {min_distance_sq!r}")

    def compute_forces(self, bodies: Sequence[Body]) -> List[Vec3]:
        """
        Compute the net gravitational force on every body.

        All forces are evaluated from the bodies' current positions; nothing is
        modified. Both directions of each pair are computed independently.

        Args:
            bodies: Bodies in registry order.

        Returns:
            List of (fx, fy, fz) forces, same order as inputs.
        """
        forces = []
        for i, body_a in enumerate(bodies):
            total_force = ZERO
            for j, body_b in enumerate(bodies):
                if i == j:
                    continue

                diff = vec_sub(body_b.position, body_a.position)
                distance_sq = vec_len_sq(diff)
                if distance_sq < self.min_distance_sq:
                    continue

                force_magnitude = (self.gravity * body_a.mass * body_b.mass) / distance_sq
                force_direction = vec_norm(diff)
                total_force = vec_add(total_force, vec_scale(force_direction, force_magnitude))

            forces.append(total_force)
        return forces

    def step(self, bodies: Sequence[Body]) -> None:
        """
        Advance all bodies by one time step (modified in place).

        Workflow:
        1) forces from the positions at the start of the step
        2) v += F / m * dt for every body
        3) x += v * dt for every body, using the updated velocity
        4) append the new position to each trail
        """
        dt = self.dt
        forces = self.compute_forces(bodies)

        for body, force in zip(bodies, forces):
            acceleration = vec_div(force, body.mass)
            body.velocity = vec_add(body.velocity, vec_scale(acceleration, dt))

        for body in bodies:
            body.position = vec_add(body.position, vec_scale(body.velocity, dt))
            body.add_trail_point()


def total_momentum(bodies: Sequence[Body]) -> Vec3:
    """Sum of mass * velocity over all bodies."""
    p = ZERO
    for b in bodies:
        p = vec_add(p, vec_scale(b.velocity, b.mass))
    return p


def kinetic_energy(bodies: Sequence[Body]) -> float:
    return sum(0.5 * b.mass * vec_len_sq(b.velocity) for b in bodies)


def potential_energy(bodies: Sequence[Body], gravity: float = G,
                     min_distance_sq: float = MIN_DISTANCE_SQ) -> float:
    """
    Gravitational potential energy, -G * m_i * m_j / r summed over unordered pairs.

    Pairs the force law skips are skipped here too, so the value stays finite
    for coincident bodies.
    """
    energy = 0.0
    n = len(bodies)
    for i in range(n):
        for j in range(i + 1, n):
            r_vec = vec_sub(bodies[j].position, bodies[i].position)
            if vec_len_sq(r_vec) < min_distance_sq:
                continue
            energy -= gravity * bodies[i].mass * bodies[j].mass / vec_len(r_vec)
    return energy


def center_of_mass(bodies: Sequence[Body]) -> Vec3:
    total_mass = math.fsum(b.mass for b in bodies)
    if total_mass <= 0:
        return ZERO
    weighted = ZERO
    for b in bodies:
        weighted = vec_add(weighted, vec_scale(b.position, b.mass))
    return vec_div(weighted, total_mass)
