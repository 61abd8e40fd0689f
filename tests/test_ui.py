"""Smoke tests for the UI module and CLI (no display required)."""

from __future__ import annotations

import pathlib

from pixelgarden.plants.types import PlantType
from pixelgarden.ui.pygame_client import _RENDERERS, PygameRenderer, soil_colour


def test_pygame_renderer_importable() -> None:
    """PygameRenderer class is importable without initialising pygame."""
    assert PygameRenderer is not None


def test_main_module_importable() -> None:
    """The __main__ module is importable and exposes main()."""
    from pixelgarden.__main__ import main

    assert callable(main)


def test_parser_defaults() -> None:
    from pixelgarden.__main__ import build_parser

    args = build_parser().parse_args([])
    assert args.config.name == "default.yaml"
    assert args.cell_size == 12
    assert args.load is None
    assert args.share is None


def test_parser_load_path() -> None:
    from pixelgarden.__main__ import build_parser

    args = build_parser().parse_args(["--load", "garden.json", "--speed", "5"])
    assert args.load == pathlib.Path("garden.json")
    assert args.speed == 5.0


def test_wetter_soil_is_darker() -> None:
    assert sum(soil_colour(90.0)) < sum(soil_colour(10.0))
    assert soil_colour(100.0) == soil_colour(150.0)


def test_every_plant_type_has_renderer() -> None:
    assert set(_RENDERERS) == set(PlantType)
