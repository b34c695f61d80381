#!/usr/bin/env python3
"""
Shared simulation state between the UI thread (Dear PyGui) and the rendering
thread (pygame).

SimulationController wraps a SimulationContext and guards every access with a
re-entrant lock. The renderer calls step_frame() once per frame and reads a
snapshot() for drawing; the UI calls start/reset/preset methods and polls
last_status_msg for its status line.
"""
import logging
import random
import threading
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .constants import BODY_COUNT
from .data_models import InvalidMassError
from .physics import center_of_mass, kinetic_energy, potential_energy, total_momentum
from .scenarios import build_preset, random_body_specs, resolve_body_spec, spec_to_fields
from .simulation import SimulationConfig, SimulationContext, TeardownHook
from .vector_utils import Vec3

logger = logging.getLogger(__name__)


@dataclass
class BodyView:
    """Copy of one body's drawable state, safe to use outside the lock."""
    name: str
    color: Tuple[int, int, int]
    radius: float
    position: Vec3
    velocity: Vec3
    trail: List[Vec3]


class SimulationController:
    """
    Thread-safe front for one SimulationContext.
    """

    def __init__(self, config: Optional[SimulationConfig] = None, seed: Optional[int] = None,
                 teardown: Optional[TeardownHook] = None):
        self.lock = threading.RLock()
        self.context = SimulationContext(config, teardown=teardown)
        self.rng = random.Random(seed)
        self.running = True  # app running
        self.playing = False  # simulation running
        self.show_trails = True
        self.steps_per_frame = 1
        self.last_status_msg: Optional[str] = None

    @property
    def config(self) -> SimulationConfig:
        return self.context.config

    def _set_status(self, msg: str) -> None:
        self.last_status_msg = msg

    def pop_status(self) -> Optional[str]:
        with self.lock:
            msg = self.last_status_msg
            self.last_status_msg = None
            return msg

    def start_from_fields(self, rows: Sequence[Mapping[str, object]]) -> bool:
        """
        (Re)start from raw form values, one mapping per body.

        Returns False and keeps the running scenario when a spec is rejected.
        """
        with self.lock:
            specs = [
                resolve_body_spec(i, row, self.rng, self.config.default_mass)
                for i, row in enumerate(rows)
            ]
            return self._start(specs, "Simulation started.")

    def reset_random(self, count: int = BODY_COUNT) -> List[Dict[str, str]]:
        """Start a randomized scenario and return its values formatted for the form."""
        with self.lock:
            specs = random_body_specs(count, self.rng, self.config.default_mass)
            self._start(specs, "Randomized scenario.")
            return [spec_to_fields(s) for s in specs]

    def load_preset(self, name: str) -> List[Dict[str, str]]:
        with self.lock:
            specs = build_preset(name, self.rng)
            self._start(specs, f"Loaded preset '{name}'.")
            logger.info("Loaded preset %s with %d bodies", name, len(specs))
            return [spec_to_fields(s) for s in specs]

    def _start(self, specs, msg: str) -> bool:
        try:
            self.context.initialize(specs)
        except InvalidMassError as e:
            logger.warning("Rejected scenario: %s", e)
            self._set_status(f"Error: {e}")
            return False
        self.playing = True
        self._set_status(msg)
        return True

    def step_frame(self) -> None:
        """Advance steps_per_frame steps if playing."""
        with self.lock:
            if not self.playing:
                return
            for _ in range(self.steps_per_frame):
                self.context.step()

    def step_once(self) -> None:
        with self.lock:
            self.context.step()

    def toggle_play(self) -> bool:
        with self.lock:
            self.playing = not self.playing
            self._set_status(f"Simulation {'Playing' if self.playing else 'Paused'}.")
            return self.playing

    def set_steps_per_frame(self, n: int) -> None:
        n = int(n)
        if n < 1:
            raise ValueError(f"steps_per_frame must be at least 1, got {n}")
        with self.lock:
            self.steps_per_frame = n

    def set_show_trails(self, value: bool) -> None:
        with self.lock:
            self.show_trails = bool(value)
        if not value:
            self.clear_trails()

    def clear_trails(self) -> None:
        with self.lock:
            for b in self.context.bodies():
                b.trail.clear()

    def snapshot(self) -> List[BodyView]:
        with self.lock:
            return [
                BodyView(
                    name=b.name,
                    color=b.color,
                    radius=b.radius,
                    position=b.position,
                    velocity=b.velocity,
                    trail=b.trail.read() if self.show_trails else [],
                )
                for b in self.context.bodies()
            ]

    def diagnostics(self) -> Dict[str, object]:
        with self.lock:
            bodies = self.context.bodies()
            ke = kinetic_energy(bodies)
            pe = potential_energy(bodies, self.config.gravity, self.config.min_distance_sq)
            return {
                "time": self.context.time_elapsed,
                "steps": self.context.step_count,
                "momentum": total_momentum(bodies),
                "center_of_mass": center_of_mass(bodies),
                "kinetic": ke,
                "potential": pe,
                "total": ke + pe,
            }
