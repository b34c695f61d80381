#!/usr/bin/env python3
"""
Three-Body Simulator application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a pygame rendering thread (3D viewport) and the Dear PyGui UI
  (running on the main thread).
- Shares a SimulationController that owns the bodies and simulation settings;
  all access is guarded by a re-entrant lock for thread-safety.
- Provides a control window for entering each body's initial position, velocity
  and mass, starting, randomizing, pausing and stepping the simulation.

Threading model
- PygameRenderer runs in a background thread and performs: input handling (for the viewport),
  stepping physics once per frame, and drawing. It copies a snapshot of the bodies under the lock.
- The UI class runs in the main thread via Dear PyGui. It polls the controller on a periodic
  frame callback and invokes controller methods as needed; these are lock-protected.

Running
1) Install dependencies: `pip install -e .`
2) Run this module: `python three_body_sim.py` (see --help for options)
"""

import argparse
import logging
import threading
from typing import Dict, List, Optional

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from threebody.camera import OrbitCamera
from threebody.constants import (
    BACKGROUND_COLOR,
    BODY_COUNT,
    DEFAULT_MASS,
    HUD_TEXT_COLOR,
    SAFE_COORD_LIMIT,
    TARGET_FPS,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from threebody.controller import SimulationController
from threebody.scenarios import FIELD_NAMES, list_presets
from threebody.simulation import SimulationConfig
from threebody.vector_utils import vec_len

logger = logging.getLogger("three_body_sim")

FIELD_LABELS = {
    "pos_x": "Pos X", "pos_y": "Pos Y", "pos_z": "Pos Z",
    "vel_x": "Vel X", "vel_y": "Vel Y", "vel_z": "Vel Z",
    "mass": "Mass",
}

ORBIT_SPEED = 0.01  # radians per dragged pixel

# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: steps the simulation, draws bodies and trails in perspective.
    Left-drag orbits the camera, right/middle-drag pans, wheel zooms.
    """
    def __init__(self, sim: SimulationController):
        super().__init__(daemon=True)
        self.sim = sim
        self.camera = OrbitCamera()
        self.surface = None
        self.clock = None
        self.font = None
        self.dragging_orbit = False
        self.dragging_pan = False
        self.running = True

    def run(self):
        pygame.init()
        pygame.display.set_caption("Three-Body Simulator - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("consolas", 16)

        while self.running and self.sim.running:
            self.handle_events()
            self.camera.update()
            self.sim.step_frame()
            self.draw()
            self.clock.tick(TARGET_FPS)

        pygame.quit()

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.sim.running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.MOUSEWHEEL:
                self.camera.zoom(1.1 if event.y > 0 else 1.0 / 1.1)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    self.dragging_orbit = True
                elif event.button in (2, 3):
                    self.dragging_pan = True

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button == 1:
                    self.dragging_orbit = False
                elif event.button in (2, 3):
                    self.dragging_pan = False

            elif event.type == pygame.MOUSEMOTION:
                dx, dy = event.rel
                if self.dragging_orbit:
                    self.camera.orbit(-dx * ORBIT_SPEED, dy * ORBIT_SPEED)
                elif self.dragging_pan:
                    units_per_pixel = self.camera.distance / self.camera.focal_length
                    self.camera.pan(-dx * units_per_pixel, dy * units_per_pixel)

            elif event.type == pygame.KEYDOWN and event.key == pygame.K_SPACE:
                self.sim.toggle_play()

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        bodies = self.sim.snapshot()

        # Trails
        for b in bodies:
            pts = []
            for p in b.trail:
                sp = _safe_point(self.camera.world_to_screen(p))
                if sp:
                    pts.append(sp)
            if len(pts) > 1:
                pygame.draw.aalines(surf, b.color, False, pts)

        # Bodies, far to near
        projected = []
        for b in bodies:
            proj = self.camera.world_to_screen(b.position)
            if proj is not None:
                projected.append((proj[2], b, proj))
        projected.sort(key=lambda item: item[0], reverse=True)
        for depth, b, proj in projected:
            sp = _safe_point(proj)
            if not sp:
                continue
            vis_r = int(min(max(self.camera.projected_radius(b.radius, depth), 2), 200))
            gfxdraw.filled_circle(surf, sp[0], sp[1], vis_r, b.color)
            gfxdraw.aacircle(surf, sp[0], sp[1], vis_r, b.color)

        # HUD text
        diag = self.sim.diagnostics()
        with self.sim.lock:
            playing = self.sim.playing
            spf = self.sim.steps_per_frame
        self.draw_text("Left-drag: orbit | Right/Middle-drag: pan | Wheel: zoom | Space: Pause/Play", 10, 10)
        self.draw_text(
            f"t = {diag['time']:.1f}  steps/frame: {spf}  [{'Playing' if playing else 'Paused'}]", 10, 30)
        self.draw_text(
            f"E = {diag['total']:.4e}  |p| = {vec_len(diag['momentum']):.4e}", 10, 50)
        cx, cy, cz = diag["center_of_mass"]
        self.draw_text(f"CoM = ({cx:.2f}, {cy:.2f}, {cz:.2f})", 10, 70)

        pygame.display.flip()

    def draw_text(self, text, x, y, color=HUD_TEXT_COLOR):
        img = self.font.render(text, True, color)
        self.surface.blit(img, (x, y))


def _safe_point(pt):
    if pt is None:
        return None
    try:
        x, y = int(pt[0]), int(pt[1])
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None

# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui interface: per-body initial conditions, presets, simulation controls.
    """
    def __init__(self, sim: SimulationController, body_count: int = BODY_COUNT):
        self.sim = sim
        self.body_count = body_count
        # field ids per body: [{"pos_x": id, ...}, ...]
        self.field_ids: List[Dict[str, int]] = []
        self.status_msg_id = None
        self._preset_map = {display: key for key, display in list_presets()}

        self._build_ui()

        dpg.set_frame_callback(1, self._post_setup)
        self._schedule_sync()

    def _post_setup(self):
        self.reset_simulation()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback (~10Hz at 60 FPS)."""
        dpg.set_frame_callback(dpg.get_frame_count() + 6, self._sync_ui_with_sim)

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Three-Body Simulator - Controls', width=560, height=640)

        with dpg.window(label="Controls", width=540, height=620, pos=(10, 10), tag="main_window"):
            for i in range(self.body_count):
                dpg.add_text(f"Body {i + 1}")
                ids = {}
                with dpg.group(horizontal=True):
                    for key in ("pos_x", "pos_y", "pos_z"):
                        ids[key] = dpg.add_input_text(label=FIELD_LABELS[key], width=100)
                with dpg.group(horizontal=True):
                    for key in ("vel_x", "vel_y", "vel_z"):
                        ids[key] = dpg.add_input_text(label=FIELD_LABELS[key], width=100)
                ids["mass"] = dpg.add_input_text(label=FIELD_LABELS["mass"], width=100,
                                                 default_value=f"{DEFAULT_MASS:g}")
                self.field_ids.append(ids)
                dpg.add_separator()

            with dpg.group(horizontal=True):
                dpg.add_button(label="Start", callback=self.start_simulation)
                dpg.add_button(label="Reset", callback=self.reset_simulation)
                dpg.add_button(label="Play/Pause", callback=lambda: self.sim.toggle_play())
                dpg.add_button(label="Step", callback=self._step_once)

            with dpg.group(horizontal=True):
                dpg.add_text("Preset:")
                dpg.add_combo(list(self._preset_map.keys()), default_value=next(iter(self._preset_map)),
                              width=200, tag="preset_combo")
                dpg.add_button(label="Load", callback=self._load_preset)

            with dpg.group(horizontal=True):
                dpg.add_checkbox(label="Trails", default_value=True,
                                 callback=lambda s, a, u: self.sim.set_show_trails(a))
                dpg.add_input_int(label="Steps per frame", default_value=1, min_value=1, max_value=100,
                                  min_clamped=True, max_clamped=True, width=100,
                                  callback=self._on_steps_per_frame)

            self.status_msg_id = dpg.add_text("")

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(255, 120, 120))

    def _read_fields(self) -> List[Dict[str, str]]:
        return [{key: dpg.get_value(ids[key]) for key in FIELD_NAMES} for ids in self.field_ids]

    def _write_fields(self, rows: List[Dict[str, str]]):
        for ids, row in zip(self.field_ids, rows):
            for key in FIELD_NAMES:
                dpg.set_value(ids[key], row.get(key, ""))
        # Bodies beyond the scenario keep no stale values
        for ids in self.field_ids[len(rows):]:
            for key in FIELD_NAMES:
                dpg.set_value(ids[key], "")

    def start_simulation(self):
        self.sim.start_from_fields(self._read_fields())

    def reset_simulation(self):
        self._write_fields(self.sim.reset_random(self.body_count))

    def _load_preset(self):
        key = self._preset_map.get(dpg.get_value("preset_combo"))
        try:
            rows = self.sim.load_preset(key)
        except KeyError as e:
            self._set_error(str(e))
            return
        self._write_fields(rows)

    def _step_once(self):
        with self.sim.lock:
            self.sim.playing = False
        self.sim.step_once()
        self._set_status("Stepped one frame.")

    def _on_steps_per_frame(self, sender, app_data, user_data=None):
        try:
            self.sim.set_steps_per_frame(app_data)
        except ValueError as e:
            self._set_error(str(e))

    def _sync_ui_with_sim(self):
        msg = self.sim.pop_status()
        if msg:
            if msg.startswith("Error"):
                self._set_error(msg)
            else:
                self._set_status(msg)
        self._schedule_sync()

# ============================================================
# Application Entry
# ============================================================

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Real-time three-body gravity simulator")
    parser.add_argument("--gravity", type=float, default=SimulationConfig.gravity,
                        help="gravitational constant (default: %(default)s)")
    parser.add_argument("--dt", type=float, default=SimulationConfig.dt,
                        help="time step per physics step (default: %(default)s)")
    parser.add_argument("--trail-length", type=int, default=SimulationConfig.trail_capacity,
                        help="positions kept per trail (default: %(default)s)")
    parser.add_argument("--steps-per-frame", type=int, default=1,
                        help="physics steps per rendered frame (default: %(default)s)")
    parser.add_argument("--seed", type=int, default=None, help="random seed for scenarios")
    parser.add_argument("--preset", choices=[key for key, _ in list_presets()], default=None,
                        help="preset to load at startup instead of a random scenario")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SimulationConfig(gravity=args.gravity, dt=args.dt, trail_capacity=args.trail_length)
    except ValueError as e:
        raise SystemExit(f"Invalid configuration: {e}")

    sim = SimulationController(config, seed=args.seed)
    sim.set_steps_per_frame(max(1, args.steps_per_frame))
    logger.info("Starting with G=%s dt=%s trail=%d", config.gravity, config.dt, config.trail_capacity)

    renderer = PygameRenderer(sim)
    renderer.start()

    ui = UI(sim)
    if args.preset:
        dpg.set_frame_callback(2, lambda: ui._write_fields(sim.load_preset(args.preset)))

    with dpg.handler_registry():
        def key_down(sender, app_data):
            if app_data == dpg.mvKey_Spacebar:
                sim.toggle_play()
        dpg.add_key_press_handler(callback=key_down)

    # Run Dear PyGui event loop
    try:
        dpg.start_dearpygui()
    finally:
        sim.running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()


if __name__ == "__main__":
    main()
