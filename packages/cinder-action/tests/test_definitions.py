"""Tests for cinder_action.types, formulas and registry."""
from __future__ import annotations

import pytest

from cinder import ConfigurationError, GameState, StatePath

from cinder_action.formulas import Formulas
from cinder_action.registry import ActionRegistry
from cinder_action.types import ActionDef, Chance, Computed, Narrative, RandomRange, SetTo


class TestActionDef:
    def test_flat_tables_become_level_one(self) -> None:
        defn = ActionDef(
            id="chop",
            show_when={"flags.fire_lit": True},
            cost={"resources.wood": 2},
            effects={"resources.stone": 1},
        )
        wood = StatePath.parse("resources.wood")
        assert defn.cost == {1: {wood: 2}}
        assert defn.levels == frozenset({1})
        assert defn.max_level == 1
        assert defn.has_level(1)
        assert not defn.has_level(2)

    def test_empty_tables_still_have_level_one(self) -> None:
        defn = ActionDef(id="noop")
        assert defn.levels == frozenset({1})
        assert defn.cost == {}

    def test_levelled_building(self) -> None:
        defn = ActionDef(
            id="build_hut",
            building="hut",
            cost={1: {"resources.wood": 100}, 2: {"resources.wood": 200}},
            effects={1: {"buildings.hut": 1}, 2: {"buildings.hut": 1}},
        )
        assert defn.levels == frozenset({1, 2})
        assert defn.max_level == 2

    def test_unknown_path_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ActionDef(id="bad", cost={"resources.mana": 1})

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ActionDef(id="")

    def test_negative_cooldown_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ActionDef(id="bad", cooldown=-1)

    def test_negative_cost_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ActionDef(id="bad", cost={"resources.wood": -5})

    def test_cost_on_boolean_path_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ActionDef(id="bad", cost={"tools.stone_axe": 1})

    def test_boolean_effect_on_numeric_path_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ActionDef(id="bad", effects={"resources.wood": True})

    def test_numeric_effect_on_boolean_path_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ActionDef(id="bad", effects={"tools.stone_axe": 3})

    def test_set_to_kind_must_match(self) -> None:
        ActionDef(id="ok", effects={"resources.wood": SetTo(0)})
        with pytest.raises(ConfigurationError):
            ActionDef(id="bad", effects={"resources.wood": SetTo(True)})

    def test_chance_value_kind_must_match(self) -> None:
        ActionDef(id="ok", effects={"resources.iron": Chance(0.5, RandomRange(1, 2))})
        with pytest.raises(ConfigurationError):
            ActionDef(id="bad", effects={"tools.iron_axe": Chance(0.5, 1)})

    def test_level_gap_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ActionDef(
                id="bad",
                building="hut",
                cost={1: {"resources.wood": 1}, 3: {"resources.wood": 3}},
            )

    def test_levels_above_one_require_building(self) -> None:
        with pytest.raises(ConfigurationError):
            ActionDef(id="bad", cost={1: {"resources.wood": 1}, 2: {"resources.wood": 2}})

    def test_missing_level_in_one_table_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ActionDef(
                id="bad",
                building="hut",
                cost={1: {"resources.wood": 1}, 2: {"resources.wood": 2}},
                effects={1: {"buildings.hut": 1}},
            )

    def test_mixed_level_and_path_keys_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ActionDef(id="bad", cost={1: {"resources.wood": 1}, "resources.stone": 2})

    def test_building_must_be_numeric_field(self) -> None:
        with pytest.raises(ConfigurationError):
            ActionDef(id="bad", building="castle")

    def test_computed_refs(self) -> None:
        defn = ActionDef(
            id="x",
            label=Computed("label_fn"),
            cost={"resources.bone_totem": Computed("cost_fn")},
        )
        assert sorted(defn.computed_refs()) == ["cost_fn", "label_fn"]


class TestTaggedValues:
    def test_random_range_bounds(self) -> None:
        with pytest.raises(ConfigurationError):
            RandomRange(5, 1)

    def test_chance_probability_bounds(self) -> None:
        with pytest.raises(ConfigurationError):
            Chance(1.5, 1)
        with pytest.raises(ConfigurationError):
            Chance(-0.1, 1)

    def test_narrative_path(self) -> None:
        note = Narrative("fire_lit", "Warm.")
        assert str(note.path) == "story.seen.fire_lit"

    def test_narrative_key_must_be_identifier(self) -> None:
        with pytest.raises(ConfigurationError):
            Narrative("not valid", "x")


class TestFormulas:
    def test_register_and_evaluate(self) -> None:
        formulas = Formulas()
        formulas.register("double_wood", lambda s: s.resources.wood * 2)
        state = GameState()
        state.resources.wood = 4
        assert formulas.evaluate("double_wood", state) == 8
        assert formulas.resolve(Computed("double_wood"), state) == 8
        assert formulas.resolve(7, state) == 7
        assert formulas.has("double_wood")
        assert formulas.names() == ["double_wood"]

    def test_unknown_formula_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            Formulas().evaluate("missing", GameState())


class TestActionRegistry:
    def test_define_get_has(self) -> None:
        registry = ActionRegistry()
        registry.define(ActionDef(id="a"))
        registry.define(ActionDef(id="b"))
        assert registry.has("a")
        assert "b" in registry
        assert registry.get("a").id == "a"
        assert registry.ids() == ["a", "b"]
        assert len(registry) == 2

    def test_get_unknown_raises(self) -> None:
        with pytest.raises(KeyError):
            ActionRegistry().get("nope")

    def test_duplicate_rejected(self) -> None:
        registry = ActionRegistry()
        registry.define(ActionDef(id="a"))
        with pytest.raises(ConfigurationError):
            registry.define(ActionDef(id="a"))

    def test_validate_unknown_unlock(self) -> None:
        with pytest.raises(ConfigurationError, match="unlocks unknown action"):
            ActionRegistry.load([ActionDef(id="a", unlocks=("ghost",))])

    def test_validate_unknown_formula(self) -> None:
        with pytest.raises(ConfigurationError, match="unknown formula"):
            ActionRegistry.load([ActionDef(id="a", cost={"resources.wood": Computed("nope")})])

    def test_validate_collects_every_error(self) -> None:
        with pytest.raises(ConfigurationError) as info:
            ActionRegistry.load([
                ActionDef(id="a", unlocks=("ghost",)),
                ActionDef(id="b", label=Computed("nope")),
            ])
        assert "ghost" in str(info.value)
        assert "nope" in str(info.value)

    def test_load_with_formulas(self) -> None:
        formulas = Formulas()
        formulas.register("cost", lambda s: 3)
        registry = ActionRegistry.load(
            [ActionDef(id="a", cost={"resources.wood": Computed("cost")}, unlocks=("b",)), ActionDef(id="b")],
            formulas,
        )
        assert registry.formulas is formulas
        assert registry.ids() == ["a", "b"]
