"""Pygame 2D visualization for the Pixel Garden simulation.

Renders the sky, soil moisture, plants and weather in a window and
forwards mouse/keyboard input to the engine.  The simulation steps at a
configurable tick rate while the display refreshes at the Pygame frame
rate.  Nothing in the simulation core imports this module.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

import pygame

from pixelgarden.plants.types import PlantType, Stage
from pixelgarden.storage.persistence import load_from_file, save_to_file
from pixelgarden.world.environment import sunlight_description

if TYPE_CHECKING:
    from pixelgarden.plants.plant import Plant
    from pixelgarden.simulation.engine import SimulationEngine

logger = logging.getLogger(__name__)

Colour = tuple[int, int, int]

# Colour palette
_DEAD = (141, 110, 99)
_GRID_LINE = (0, 0, 0)
_PANEL_BG = (30, 30, 30)
_TEXT = (200, 200, 200)
_RAIN = (200, 220, 255)
_CLOUD = (255, 255, 255)
_SKY_DAWN = (26, 35, 126)
_SKY_NOON = (33, 150, 243)

_SEED_KEYS: dict[int, PlantType] = {
    pygame.K_1: PlantType.FLOWER,
    pygame.K_2: PlantType.TREE,
    pygame.K_3: PlantType.GRASS,
    pygame.K_4: PlantType.MUSHROOM,
}


def soil_colour(moisture: float) -> Colour:
    """Return the soil colour for a moisture level: wetter is darker."""
    lightness = max(20.0, 60.0 - moisture * 0.4)
    colour = pygame.Color(0, 0, 0)
    colour.hsla = (30, 70, lightness, 100)
    return (colour.r, colour.g, colour.b)


def _scale(colour: Colour, factor: float) -> Colour:
    r, g, b = colour
    factor = max(0.0, min(1.0, factor))
    return (int(r * factor), int(g * factor), int(b * factor))


# -- Per-type drawing --------------------------------------------------------


def _draw_flower(surface: pygame.Surface, plant: Plant, rect: pygame.Rect) -> None:
    colours = plant.colours()
    cs = rect.width
    cx, cy = rect.center
    if plant.stage is Stage.SEED:
        pygame.draw.circle(surface, colours["seed"], (cx, cy), max(1, cs // 4))
        return
    pygame.draw.rect(
        surface,
        colours["stem"],
        (cx - cs // 8, rect.top + cs // 3, max(1, cs // 4), cs - cs // 3),
    )
    if plant.stage is Stage.SPROUT:
        pygame.draw.ellipse(
            surface, colours["leaf"], (cx - cs // 4, cy - cs // 6, cs // 2, cs // 3)
        )
        return
    bloom = cs / 2 if plant.stage is Stage.MATURE else cs / 3
    radius = max(1, int(bloom * plant.health / 100))
    pygame.draw.circle(surface, colours["bloom"], (cx, rect.top + cs // 3), radius)
    pygame.draw.circle(
        surface, colours["center"], (cx, rect.top + cs // 3), max(1, radius // 3)
    )


def _draw_tree(surface: pygame.Surface, plant: Plant, rect: pygame.Rect) -> None:
    colours = plant.colours()
    cs = rect.width
    cx, _ = rect.center
    if plant.stage is Stage.SEED:
        pygame.draw.circle(surface, colours["seed"], rect.center, max(1, cs // 4))
        return
    trunk_w = {Stage.SPROUT: cs // 3, Stage.GROWING: int(cs / 2.5)}.get(
        plant.stage, cs // 2
    )
    pygame.draw.rect(
        surface,
        colours["trunk"],
        (cx - trunk_w // 2, rect.top + cs // 4, max(1, trunk_w), cs - cs // 4),
    )
    crown = {Stage.SPROUT: cs / 3, Stage.GROWING: cs / 2}.get(plant.stage, cs / 1.5)
    radius = max(1, int(crown * plant.health / 100))
    pygame.draw.circle(surface, colours["leaves"], (cx, rect.top + cs // 4), radius)


def _draw_grass(surface: pygame.Surface, plant: Plant, rect: pygame.Rect) -> None:
    colours = plant.colours()
    cs = rect.width
    if plant.stage is Stage.SEED:
        pygame.draw.circle(surface, colours["seed"], rect.center, max(1, cs // 5))
        return
    height = {Stage.SPROUT: 0.4, Stage.GROWING: 0.7}.get(plant.stage, 0.9) * cs
    for frac in (0.25, 0.5, 0.75):
        base_x = rect.left + int(cs * frac)
        pygame.draw.polygon(
            surface,
            colours["blade"],
            [
                (base_x - cs // 10, rect.bottom),
                (base_x, rect.bottom - int(height)),
                (base_x + cs // 10, rect.bottom),
            ],
        )


def _draw_mushroom(surface: pygame.Surface, plant: Plant, rect: pygame.Rect) -> None:
    colours = plant.colours()
    cs = rect.width
    cx, _ = rect.center
    if plant.stage is Stage.SEED:
        pygame.draw.circle(surface, colours["spore"], rect.center, max(1, cs // 5))
        return
    pygame.draw.rect(
        surface,
        colours["stem"],
        (cx - cs // 8, rect.top + cs // 2, max(1, cs // 4), cs // 2),
    )
    width = {Stage.SPROUT: 0.5, Stage.GROWING: 0.6}.get(plant.stage, 0.8) * cs
    height = {Stage.SPROUT: 0.3, Stage.GROWING: 0.3}.get(plant.stage, 0.4) * cs
    factor = plant.health / 100
    cap = pygame.Rect(0, 0, max(1, int(width * factor)), max(1, int(height * factor)))
    cap.midbottom = (cx, rect.top + cs // 2)
    pygame.draw.ellipse(surface, colours["cap"], cap)
    if plant.stage is Stage.MATURE:
        pygame.draw.circle(surface, colours["spots"], cap.center, max(1, cs // 10))


_RENDERERS: dict[PlantType, Callable[[pygame.Surface, Plant, pygame.Rect], None]] = {
    PlantType.FLOWER: _draw_flower,
    PlantType.TREE: _draw_tree,
    PlantType.GRASS: _draw_grass,
    PlantType.MUSHROOM: _draw_mushroom,
}


def _draw_dead(surface: pygame.Surface, plant: Plant, rect: pygame.Rect) -> None:
    cs = rect.width
    if plant.ptype is PlantType.MUSHROOM:
        pygame.draw.ellipse(
            surface, _DEAD, (rect.left, rect.top + int(cs * 0.6), cs, max(1, cs // 5))
        )
    else:
        pygame.draw.rect(
            surface,
            _DEAD,
            (rect.centerx - cs // 8, rect.centery, max(1, cs // 4), cs // 2),
        )


class PygameRenderer:
    """Renders a SimulationEngine state into a Pygame window.

    Attributes:
        engine: The simulation engine to visualise.
        cell_size: Pixel size of each grid cell.
        save_path: File used by the save/load keys.
        screen: The Pygame display surface.
    """

    # Speed presets: ticks per second
    _SPEED_STEPS: ClassVar[list[float]] = [
        1.0,
        5.0,
        10.0,
        15.0,
        30.0,
        60.0,
        120.0,
        300.0,
    ]

    def __init__(
        self,
        engine: SimulationEngine,
        cell_size: int = 10,
        ticks_per_second: float = 30.0,
        save_path: Path | None = None,
    ) -> None:
        """Initialise the renderer.

        Args:
            engine: The simulation engine to render.
            cell_size: Pixel width/height per grid cell.
            ticks_per_second: Simulation ticks per real-time second.
            save_path: Where F5 saves and F9 loads the garden.
        """
        self.engine = engine
        self.cell_size = cell_size
        self.ticks_per_second = ticks_per_second
        self.save_path = save_path or Path("pixel-garden.json")
        self.selected = PlantType.FLOWER
        self.show_grid = False
        self._speed_index = self._nearest_speed(ticks_per_second)
        self._tick_accumulator = 0.0

        side = engine.garden.size * cell_size
        self._panel_width = 220
        self._win_w = side + self._panel_width
        self._win_h = side

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("Pixel Garden")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True
        self.paused = False

    def _nearest_speed(self, tps: float) -> int:
        """Return the index of the closest speed preset."""
        diffs = [abs(s - tps) for s in self._SPEED_STEPS]
        return diffs.index(min(diffs))

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, step sim, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0  # seconds elapsed
            self._handle_events()
            if not self.paused:
                self._tick_accumulator += self.ticks_per_second * dt
                steps = int(self._tick_accumulator)
                self._tick_accumulator -= steps
                for _ in range(steps):
                    self.engine.step()
            self._draw()

        pygame.quit()

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                x, y = event.pos[0] // self.cell_size, event.pos[1] // self.cell_size
                self.engine.seed(x, y, self.selected)
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)

    def _handle_key(self, key: int) -> None:
        engine = self.engine
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_SPACE:
            self.paused = not self.paused
        elif key in _SEED_KEYS:
            self.selected = _SEED_KEYS[key]
        elif key == pygame.K_r:
            engine.toggle_rain()
        elif key == pygame.K_s:
            engine.toggle_sunshine()
        elif key == pygame.K_n:
            engine.advance_season()
        elif key == pygame.K_c:
            engine.clear()
        elif key == pygame.K_g:
            self.show_grid = not self.show_grid
        elif key == pygame.K_F5:
            save_to_file(engine, self.save_path)
            logger.info("garden saved to %s", self.save_path)
        elif key == pygame.K_F9:
            if load_from_file(engine, self.save_path):
                logger.info("garden loaded from %s", self.save_path)
        elif key in (pygame.K_PLUS, pygame.K_EQUALS):
            self._speed_index = min(len(self._SPEED_STEPS) - 1, self._speed_index + 1)
            self.ticks_per_second = self._SPEED_STEPS[self._speed_index]
        elif key == pygame.K_MINUS:
            self._speed_index = max(0, self._speed_index - 1)
            self.ticks_per_second = self._SPEED_STEPS[self._speed_index]

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_PANEL_BG)
        self._draw_soil()
        if self.show_grid:
            self._draw_grid()
        self._draw_plants()
        self._draw_rain()
        self._draw_clouds()
        self._draw_info_panel()
        pygame.display.flip()

    def _draw_soil(self) -> None:
        """Shade each cell by moisture, dimmed by the time of day."""
        cs = self.cell_size
        env = self.engine.environment
        light = env.sunlight_intensity / 100
        for y in range(env.size):
            for x in range(env.size):
                colour = _scale(soil_colour(float(env.moisture[y, x])), light)
                pygame.draw.rect(self.screen, colour, (x * cs, y * cs, cs, cs))

    def _draw_grid(self) -> None:
        cs = self.cell_size
        side = self.engine.garden.size * cs
        for i in range(self.engine.garden.size + 1):
            pygame.draw.line(self.screen, _GRID_LINE, (i * cs, 0), (i * cs, side))
            pygame.draw.line(self.screen, _GRID_LINE, (0, i * cs), (side, i * cs))

    def _draw_plants(self) -> None:
        cs = self.cell_size
        for plant in self.engine.garden.plants():
            rect = pygame.Rect(plant.x * cs, plant.y * cs, cs, cs)
            if plant.is_alive:
                _RENDERERS[plant.ptype](self.screen, plant, rect)
            else:
                _draw_dead(self.screen, plant, rect)

    def _draw_rain(self) -> None:
        cs = self.cell_size
        for drop in self.engine.environment.raindrops:
            top = (int(drop.x * cs), int(drop.y * cs))
            bottom = (top[0], int((drop.y + drop.length) * cs))
            pygame.draw.line(self.screen, _RAIN, top, bottom)

    def _draw_clouds(self) -> None:
        cs = self.cell_size
        side = self.engine.garden.size * cs
        self.screen.set_clip(pygame.Rect(0, 0, side, side))
        for cloud in self.engine.environment.clouds:
            w, h = int(cloud.width * cs), int(cloud.height * cs)
            layer = pygame.Surface((w, h), pygame.SRCALPHA)
            alpha = int(cloud.opacity * 255)
            pygame.draw.ellipse(layer, (*_CLOUD, alpha), layer.get_rect())
            left = int((cloud.x - cloud.width / 2) * cs)
            self.screen.blit(layer, (left, int(cloud.y * cs)))
        self.screen.set_clip(None)

    def _hovered_plant(self) -> Plant | None:
        mx, my = pygame.mouse.get_pos()
        x, y = mx // self.cell_size, my // self.cell_size
        garden = self.engine.garden
        if not garden.in_bounds(x, y):
            return None
        return garden.plant_at(x, y)

    def _sky_colour(self) -> Colour:
        light = (self.engine.environment.sunlight_intensity - 50) / 50
        return tuple(
            int(a + (b - a) * light) for a, b in zip(_SKY_DAWN, _SKY_NOON, strict=True)
        )

    def _draw_info_panel(self) -> None:
        """Draw a stats panel on the right side of the window."""
        panel_x = self.engine.garden.size * self.cell_size
        pygame.draw.rect(
            self.screen,
            self._sky_colour(),
            (panel_x, 0, self._panel_width, 12),
        )
        env = self.engine.environment
        stats = self.engine.environment_stats()

        lines = [
            f"Tick: {self.engine.tick}",
            f"Speed: {self.ticks_per_second:.1f} t/s",
            f"{'PAUSED' if self.paused else 'RUNNING'}",
            "",
            "--- Garden ---",
            f"Plants: {self.engine.plant_count()}",
            f"Moisture: {round(stats.average_moisture)}%",
            f"Sunlight: {sunlight_description(round(stats.average_sunlight))}",
            f"Season: {env.season.value.capitalize()}",
            f"Rain: {'on' if env.rain else 'off'}",
            f"Sun: {'on' if env.sunshine else 'off'}",
            f"Seed: {self.selected.value}",
            "",
            "--- Controls ---",
            "click: plant  1-4: seed",
            "R rain  S sun  N season",
            "C clear  G grid",
            "F5 save  F9 load",
            "SPACE: pause  +/-: speed",
            "ESC: quit",
        ]

        hovered = self._hovered_plant()
        if hovered is not None:
            lines += ["", "--- Plant ---"]
            lines += [
                f"{key.capitalize()}: {value}"
                for key, value in hovered.tooltip_info().items()
            ]
            if not hovered.mutations.is_empty:
                lines.append("(mutated)")
            if not hovered.is_alive:
                lines.append("(dead)")

        y = 20
        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (panel_x + 10, y))
            y += 18
