import math

import pytest

from threebody.data_models import Body
from threebody.physics import (
    GravityIntegrator,
    center_of_mass,
    kinetic_energy,
    potential_energy,
    total_momentum,
)


def make_bodies(specs):
    return [
        Body(name=f"B{i}", mass=m, position=p, velocity=v)
        for i, (p, v, m) in enumerate(specs)
    ]


THREE_BODIES = [
    ((-48.3, 2.1, -4.7), (1.2, -0.4, 3.3), 300.0),
    ((51.9, -6.2, 8.8), (-2.5, 1.1, 0.2), 250.0),
    ((3.4, 47.5, -1.9), (0.7, -3.6, -1.4), 410.0),
]


def reference_step(state, gravity=9.8, dt=0.1):
    """Independent semi-implicit Euler step on [(pos, vel, mass), ...] lists."""
    new_vel = []
    for i, (pa, va, ma) in enumerate(state):
        fx = fy = fz = 0.0
        for j, (pb, _, mb) in enumerate(state):
            if i == j:
                continue
            dx, dy, dz = pb[0] - pa[0], pb[1] - pa[1], pb[2] - pa[2]
            d2 = dx * dx + dy * dy + dz * dz
            if d2 < 1:
                continue
            mag = (gravity * ma * mb) / d2
            inv = 1.0 / math.sqrt(d2)
            fx += dx * inv * mag
            fy += dy * inv * mag
            fz += dz * inv * mag
        inv_m = 1.0 / ma
        new_vel.append((va[0] + fx * inv_m * dt, va[1] + fy * inv_m * dt, va[2] + fz * inv_m * dt))
    out = []
    for (p, _, m), v in zip(state, new_vel):
        out.append(((p[0] + v[0] * dt, p[1] + v[1] * dt, p[2] + v[2] * dt), v, m))
    return out


def test_step_matches_reference_implementation_exactly():
    bodies = make_bodies(THREE_BODIES)
    integrator = GravityIntegrator()
    state = [(tuple(map(float, p)), tuple(map(float, v)), m) for p, v, m in THREE_BODIES]
    for _ in range(25):
        integrator.step(bodies)
        state = reference_step(state)
        for body, (p, v, _) in zip(bodies, state):
            assert body.velocity == v
            assert body.position == p


def test_momentum_conserved_up_to_rounding():
    bodies = make_bodies(THREE_BODIES)
    before = total_momentum(bodies)
    GravityIntegrator().step(bodies)
    after = total_momentum(bodies)
    for a, b in zip(before, after):
        assert b == pytest.approx(a, abs=1e-9)


def test_symmetric_pair_moves_toward_each_other():
    bodies = make_bodies([
        ((-50.0, 0.0, 0.0), (0.0, 0.0, 0.0), 300.0),
        ((50.0, 0.0, 0.0), (0.0, 0.0, 0.0), 300.0),
    ])
    GravityIntegrator(gravity=9.8, dt=0.1).step(bodies)
    a, b = bodies

    # F = 9.8 * 300 * 300 / 100^2 = 88.2; a = F / 300 = 0.294; v = a * dt
    expected_speed = 9.8 * 300 / 10000 * 0.1
    assert a.velocity[0] == pytest.approx(expected_speed)
    assert b.velocity[0] == pytest.approx(-expected_speed)
    assert a.velocity[1:] == (0.0, 0.0)
    assert b.velocity[1:] == (0.0, 0.0)
    assert a.velocity[0] == -b.velocity[0]

    # Position moves with the new velocity
    assert a.position[0] == pytest.approx(-50.0 + expected_speed * 0.1)
    assert b.position[0] == pytest.approx(50.0 - expected_speed * 0.1)
    assert a.position[1:] == (0.0, 0.0)


def test_coincident_bodies_exert_no_force():
    bodies = make_bodies([
        ((5.0, 5.0, 5.0), (0.0, 0.0, 0.0), 300.0),
        ((5.0, 5.0, 5.0), (0.0, 0.0, 0.0), 300.0),
    ])
    integrator = GravityIntegrator()
    assert integrator.compute_forces(bodies) == [(0.0, 0.0, 0.0), (0.0, 0.0, 0.0)]
    integrator.step(bodies)
    for b in bodies:
        assert b.velocity == (0.0, 0.0, 0.0)
        assert b.position == (5.0, 5.0, 5.0)


def test_coincident_pair_with_third_body_stays_finite():
    bodies = make_bodies([
        ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), 300.0),
        ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), 300.0),
        ((0.0, 80.0, 0.0), (0.0, 0.0, 0.0), 300.0),
    ])
    GravityIntegrator().step(bodies)
    for b in bodies:
        assert all(math.isfinite(c) for c in b.velocity + b.position)
    assert bodies[0].velocity == bodies[1].velocity
    assert bodies[0].velocity[1] > 0


def test_pairs_closer_than_one_unit_are_skipped():
    bodies = make_bodies([
        ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), 300.0),
        ((0.9, 0.0, 0.0), (0.0, 0.0, 0.0), 300.0),
    ])
    assert GravityIntegrator().compute_forces(bodies) == [(0.0, 0.0, 0.0), (0.0, 0.0, 0.0)]


def test_pair_at_exactly_one_unit_interacts():
    bodies = make_bodies([
        ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), 1.0),
        ((1.0, 0.0, 0.0), (0.0, 0.0, 0.0), 1.0),
    ])
    forces = GravityIntegrator(gravity=2.0).compute_forces(bodies)
    assert forces[0] == pytest.approx((2.0, 0.0, 0.0))
    assert forces[1] == pytest.approx((-2.0, 0.0, 0.0))


def test_compute_forces_does_not_mutate():
    bodies = make_bodies(THREE_BODIES)
    positions = [b.position for b in bodies]
    velocities = [b.velocity for b in bodies]
    GravityIntegrator().compute_forces(bodies)
    assert [b.position for b in bodies] == positions
    assert [b.velocity for b in bodies] == velocities
    assert all(len(b.trail) == 0 for b in bodies)


def test_step_appends_new_position_to_trail():
    bodies = make_bodies(THREE_BODIES)
    GravityIntegrator().step(bodies)
    for b in bodies:
        assert b.trail.read() == [b.position]


def test_step_on_empty_sequence_is_noop():
    GravityIntegrator().step([])


def test_energy_diagnostics():
    bodies = make_bodies([
        ((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), 2.0),
        ((10.0, 0.0, 0.0), (0.0, 2.0, 0.0), 3.0),
    ])
    assert kinetic_energy(bodies) == pytest.approx(0.5 * 2 * 1 + 0.5 * 3 * 4)
    assert potential_energy(bodies, gravity=9.8) == pytest.approx(-9.8 * 2 * 3 / 10)


def test_potential_energy_skips_coincident_pairs():
    bodies = make_bodies([
        ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), 2.0),
        ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), 3.0),
    ])
    assert potential_energy(bodies) == 0.0


def test_center_of_mass():
    bodies = make_bodies([
        ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), 1.0),
        ((4.0, 0.0, 8.0), (0.0, 0.0, 0.0), 3.0),
    ])
    assert center_of_mass(bodies) == pytest.approx((3.0, 0.0, 6.0))
    assert center_of_mass([]) == (0.0, 0.0, 0.0)


@pytest.mark.parametrize("min_distance_sq", [0.0, -1.0, float("nan")])
def test_integrator_rejects_non_positive_cutoff(min_distance_sq):
    with pytest.raises(ValueError):
        GravityIntegrator(min_distance_sq=min_distance_sq)
