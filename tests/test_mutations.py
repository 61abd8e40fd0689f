"""Tests for pixelgarden.plants.mutations."""

import pytest
from numpy.random import Generator

from pixelgarden.plants.mutations import Mutations, generate_mutations
from pixelgarden.plants.types import PlantType


class _FixedRng:
    """Stand-in generator returning fixed draws."""

    def __init__(self, draw: float, pick_high: bool = True) -> None:
        self.draw = draw
        self.pick_high = pick_high

    def random(self) -> float:
        return self.draw

    def uniform(self, low: float, high: float) -> float:
        return high if self.pick_high else low


class TestMutations:
    """Tests for the Mutations override record."""

    def test_empty_by_default(self) -> None:
        m = Mutations()
        assert m.is_empty
        assert m.to_dict() == {}

    def test_to_dict_only_overrides(self) -> None:
        m = Mutations(water_need=55.0)
        assert m.to_dict() == {"water_need": 55.0}

    def test_from_dict(self) -> None:
        m = Mutations.from_dict(
            {"growth_rate": 1, "colour_shift": -0.25, "unknown": "ignored"},
        )
        assert m.growth_rate == 1.0
        assert m.colour_shift == -0.25
        assert m.water_need is None

    def test_from_dict_none(self) -> None:
        assert Mutations.from_dict(None) == Mutations()

    def test_from_dict_rejects_non_numeric(self) -> None:
        with pytest.raises(TypeError):
            Mutations.from_dict({"water_need": "wet"})

    def test_from_dict_rejects_non_mapping(self) -> None:
        with pytest.raises(TypeError):
            Mutations.from_dict([1, 2])

    @pytest.mark.parametrize(
        "overrides",
        [
            {"water_need": 0},
            {"sunlight_need": -1.0},
            {"growth_rate": float("nan")},
            {"colour_shift": float("-inf")},
        ],
    )
    def test_rejects_unusable_values(self, overrides: dict) -> None:
        with pytest.raises(ValueError):
            Mutations.from_dict(overrides)
        with pytest.raises(ValueError):
            Mutations(**overrides)


class TestGenerateMutations:
    """Tests for offspring trait drift."""

    def test_every_trait_mutates_when_lucky(self, make_plant) -> None:
        parent = make_plant(
            PlantType.FLOWER,
            growth_rate=1.0,
            mutations=Mutations(colour_shift=1.0),
        )
        child = generate_mutations(parent, _FixedRng(0.0))
        assert child.growth_rate == pytest.approx(1.1)
        assert child.water_need == pytest.approx(66.0)
        assert child.sunlight_need == pytest.approx(77.0)
        assert child.colour_shift == pytest.approx(1.5)

    def test_nothing_mutates_when_unlucky(self, make_plant) -> None:
        inherited = Mutations(water_need=48.0, colour_shift=-2.0)
        parent = make_plant(water_need=48.0, mutations=inherited)
        child = generate_mutations(parent, _FixedRng(0.99))
        assert child == inherited

    def test_colour_shift_starts_from_zero(self, make_plant) -> None:
        parent = make_plant()
        child = generate_mutations(parent, _FixedRng(0.0, pick_high=False))
        assert child.colour_shift == pytest.approx(-0.5)

    def test_drift_stays_within_bounds(self, make_plant, rng: Generator) -> None:
        parent = make_plant(PlantType.TREE, growth_rate=1.0)
        mutated = 0
        for _ in range(500):
            child = generate_mutations(parent, rng)
            if child.growth_rate is not None:
                mutated += 1
                assert 0.9 <= child.growth_rate <= 1.1
            if child.water_need is not None:
                assert 45.0 <= child.water_need <= 55.0
            if child.colour_shift is not None:
                assert -0.5 <= child.colour_shift <= 0.5
        # Roughly 20% of draws should mutate the growth rate
        assert 50 < mutated < 150
