"""Built-in action catalog: the early game from first fire to the bastion."""
from __future__ import annotations

from typing import TYPE_CHECKING

from cinder import get_value

from cinder_action.formulas import Formulas
from cinder_action.registry import ActionRegistry
from cinder_action.types import ActionDef, Chance, Computed, Narrative, RandomRange

if TYPE_CHECKING:
    from cinder import GameState

BONE_TOTEMS_BASE_COST = 5


def bone_totems_cost(state: GameState) -> int:
    """Each sacrifice costs one more totem than the last."""
    return BONE_TOTEMS_BASE_COST + int(get_value(state, "counters.bone_totems_used"))


def default_formulas() -> Formulas:
    formulas = Formulas()
    formulas.register("bone_totems_cost", bone_totems_cost)
    return formulas


# --- Basic ---

LIGHT_FIRE = ActionDef(
    id="light_fire",
    label="Light Fire",
    show_when={"flags.fire_lit": False},
    effects={"flags.fire_lit": True},
    unlocks=("gather_wood",),
    cooldown=1,
    narrative=(Narrative("fire_lit", "The fire crackles to life. The dark recedes a little."),),
)

GATHER_WOOD = ActionDef(
    id="gather_wood",
    label="Gather Wood",
    show_when={"flags.fire_lit": True},
    effects={"resources.wood": RandomRange(1, 3), "story.seen.has_wood": True},
    unlocks=("build_torch",),
    cooldown=3,
)

BUILD_TORCH = ActionDef(
    id="build_torch",
    label="Torch",
    show_when={"story.seen.has_wood": True},
    cost={"resources.wood": 10},
    effects={"resources.torch": 1, "story.seen.built_torch": True},
    unlocks=("explore_cave",),
    cooldown=2.5,
)

EXPLORE_CAVE = ActionDef(
    id="explore_cave",
    label="Explore Cave",
    show_when={"flags.fire_lit": True, "story.seen.built_torch": True},
    cost={"resources.torch": 5},
    effects={
        "resources.stone": RandomRange(2, 5),
        "resources.coal": Chance(0.1, RandomRange(1, 4)),
        "resources.iron": Chance(0.1, RandomRange(1, 4)),
        "resources.bones": Chance(0.05, RandomRange(1, 4)),
        "flags.cave_explored": True,
        "story.seen.has_stone": True,
    },
    unlocks=("craft_stone_axe",),
    cooldown=10,
)

MINE_IRON = ActionDef(
    id="mine_iron",
    label="Mine Iron",
    show_when={"tools.stone_pickaxe": True},
    cost={"resources.torch": 10, "resources.food": 5},
    effects={"resources.iron": RandomRange(2, 5), "story.seen.has_iron": True},
    cooldown=8,
)

MINE_COAL = ActionDef(
    id="mine_coal",
    label="Mine Coal",
    show_when={"tools.stone_pickaxe": True},
    cost={"resources.torch": 10, "resources.food": 5},
    effects={"resources.coal": RandomRange(2, 5), "story.seen.has_coal": True},
    cooldown=8,
)

MINE_SULFUR = ActionDef(
    id="mine_sulfur",
    label="Mine Sulfur",
    show_when={"tools.iron_pickaxe": True, "buildings.foundry": 1},
    cost={"resources.food": 15, "resources.torch": 2},
    effects={"resources.sulfur": RandomRange(4, 8), "story.seen.has_sulfur": True},
    cooldown=20,
)

FORGE_STEEL = ActionDef(
    id="forge_steel",
    label="Forge Steel",
    show_when={"buildings.foundry": 1},
    cost={"resources.iron": 10, "resources.coal": 10},
    effects={"resources.steel": 1, "story.seen.has_steel": True},
    cooldown=15,
)

HUNT = ActionDef(
    id="hunt",
    label="Hunt",
    show_when={"flags.forest_unlocked": True},
    effects={
        "resources.food": RandomRange(5, 10),
        "resources.fur": RandomRange(1, 3),
        "resources.bones": RandomRange(1, 3),
    },
    cooldown=10,
)

# --- Tools ---

CRAFT_STONE_AXE = ActionDef(
    id="craft_stone_axe",
    label="Stone Axe",
    show_when={"flags.cave_explored": True, "tools.stone_axe": False},
    cost={"resources.wood": 10, "resources.stone": 10},
    effects={"tools.stone_axe": True, "flags.village_unlocked": True},
    unlocks=("build_hut",),
    cooldown=1,
    narrative=(
        Narrative("has_stone_axe", "The crude axe feels solid in your hand. The woods beyond the cave await."),
    ),
)

CRAFT_STONE_PICKAXE = ActionDef(
    id="craft_stone_pickaxe",
    label="Stone Pickaxe",
    show_when={"buildings.blacksmith": 1, "tools.stone_pickaxe": False},
    cost={"resources.wood": 50, "resources.stone": 100},
    effects={"tools.stone_pickaxe": True},
    unlocks=("mine_iron", "mine_coal"),
    cooldown=5,
)

CRAFT_IRON_AXE = ActionDef(
    id="craft_iron_axe",
    label="Iron Axe",
    show_when={
        "buildings.blacksmith": 1,
        "tools.stone_axe": True,
        "tools.iron_axe": False,
        "story.seen.has_iron": True,
        "story.seen.has_coal": True,
    },
    cost={"resources.wood": 100, "resources.iron": 50},
    effects={"tools.iron_axe": True},
    cooldown=10,
)

CRAFT_IRON_PICKAXE = ActionDef(
    id="craft_iron_pickaxe",
    label="Iron Pickaxe",
    show_when={
        "buildings.blacksmith": 1,
        "tools.stone_pickaxe": True,
        "tools.iron_pickaxe": False,
        "story.seen.has_iron": True,
        "story.seen.has_coal": True,
    },
    cost={"resources.wood": 150, "resources.iron": 75},
    effects={"tools.iron_pickaxe": True},
    cooldown=10,
)

CRAFT_CRUDE_BOW = ActionDef(
    id="craft_crude_bow",
    label="Crude Bow",
    show_when={"buildings.blacksmith": 1, "weapons.crude_bow": False},
    cost={"resources.wood": 200},
    effects={"weapons.crude_bow": True, "flags.forest_unlocked": True},
    unlocks=("hunt",),
    cooldown=10,
)

# --- Combat items ---

CRAFT_EMBER_BOMB = ActionDef(
    id="craft_ember_bomb",
    label="Ember Bomb",
    show_when={"buildings.blacksmith": 1, "story.seen.has_coal": True},
    cost={"resources.iron": 20, "resources.coal": 20},
    effects={"resources.ember_bomb": 1},
    cooldown=20,
    narrative=(
        Narrative("has_ember_bomb", "You pack coal and iron shavings into a clay shell. It is warm to the touch."),
    ),
)

CRAFT_ASHFIRE_BOMB = ActionDef(
    id="craft_ashfire_bomb",
    label="Ashfire Bomb",
    show_when={"buildings.foundry": 1, "resources.sulfur": 1},
    cost={"resources.sulfur": 10, "resources.coal": 30},
    effects={"resources.ashfire_bomb": 1},
    cooldown=30,
)

CRAFT_POISON_ARROWS = ActionDef(
    id="craft_poison_arrows",
    label="Poison Arrows",
    show_when={"weapons.crude_bow": True, "buildings.tannery": 1},
    cost={"resources.wood": 20, "resources.bones": 5},
    effects={"resources.poison_arrows": 1},
    cooldown=15,
)

# --- Forest ---

CRAFT_BONE_TOTEM = ActionDef(
    id="craft_bone_totem",
    label="Bone Totem",
    show_when={"buildings.altar": 1},
    cost={"resources.bones": 10},
    effects={"resources.bone_totem": 1},
    cooldown=5,
)

BONE_TOTEMS = ActionDef(
    id="bone_totems",
    label="Bone Totems",
    show_when={"buildings.altar": 1},
    cost={"resources.bone_totem": Computed("bone_totems_cost")},
    effects={
        "resources.gold": RandomRange(10, 20),
        "counters.bone_totems_used": 1,
        "stats.luck": Chance(0.05, 1, "The bones settle into a pattern you almost understand."),
    },
    cooldown=60,
)

# --- Buildings ---

BUILD_HUT = ActionDef(
    id="build_hut",
    label="Wooden Hut",
    building="hut",
    show_when={
        1: {"flags.village_unlocked": True},
        2: {"buildings.cabin": 1},
        3: {"buildings.blacksmith": 1},
    },
    cost={
        1: {"resources.wood": 100},
        2: {"resources.wood": 200},
        3: {"resources.wood": 400},
    },
    effects={
        1: {"buildings.hut": 1, "villagers.free": 2},
        2: {"buildings.hut": 1, "villagers.free": 2},
        3: {"buildings.hut": 1, "villagers.free": 2},
    },
    cooldown=10,
)

BUILD_CABIN = ActionDef(
    id="build_cabin",
    label="Cabin",
    building="cabin",
    show_when={1: {"buildings.hut": 1}},
    cost={1: {"resources.wood": 200, "resources.stone": 20}},
    effects={1: {"buildings.cabin": 1, "flags.forest_unlocked": True}},
    cooldown=15,
)

BUILD_BLACKSMITH = ActionDef(
    id="build_blacksmith",
    label="Blacksmith",
    building="blacksmith",
    show_when={1: {"buildings.cabin": 1}},
    cost={1: {"resources.wood": 100, "resources.stone": 25}},
    effects={1: {"buildings.blacksmith": 1}},
    cooldown=20,
)

BUILD_TIMBER_MILL = ActionDef(
    id="build_timber_mill",
    label="Timber Mill",
    building="timber_mill",
    show_when={1: {"buildings.hut": 2, "tools.iron_axe": True}},
    cost={1: {"resources.wood": 300, "resources.stone": 100, "resources.iron": 20}},
    effects={1: {"buildings.timber_mill": 1}},
    cooldown=30,
)

BUILD_ALTAR = ActionDef(
    id="build_altar",
    label="Altar",
    building="altar",
    show_when={1: {"flags.forest_unlocked": True, "resources.bones": 1}},
    cost={1: {"resources.stone": 100, "resources.bones": 50}},
    effects={1: {"buildings.altar": 1}},
    unlocks=("craft_bone_totem", "bone_totems"),
    cooldown=30,
)

BUILD_TANNERY = ActionDef(
    id="build_tannery",
    label="Tannery",
    building="tannery",
    show_when={1: {"buildings.cabin": 1, "flags.forest_unlocked": True}},
    cost={1: {"resources.wood": 250, "resources.stone": 50}},
    effects={1: {"buildings.tannery": 1}},
    cooldown=20,
)

BUILD_FOUNDRY = ActionDef(
    id="build_foundry",
    label="Foundry",
    building="foundry",
    show_when={1: {"buildings.blacksmith": 1, "tools.iron_pickaxe": True}},
    cost={1: {"resources.wood": 300, "resources.stone": 300, "resources.iron": 100}},
    effects={1: {"buildings.foundry": 1}},
    unlocks=("mine_sulfur", "forge_steel", "craft_ashfire_bomb"),
    cooldown=30,
)

BUILD_BASTION = ActionDef(
    id="build_bastion",
    label="Bastion",
    building="bastion",
    show_when={1: {"buildings.blacksmith": 1, "buildings.hut": 3}},
    cost={1: {"resources.wood": 500, "resources.stone": 500, "resources.iron": 100}},
    effects={1: {"buildings.bastion": 1}},
    unlocks=("build_watchtower", "build_palisades"),
    cooldown=60,
    narrative=(
        Narrative("bastion_built", "Stone walls rise around the village. Whatever comes from the dark will have to break them first."),
    ),
)

BUILD_WATCHTOWER = ActionDef(
    id="build_watchtower",
    label="Watchtower",
    building="watchtower",
    show_when={
        1: {"buildings.bastion": 1},
        2: {"buildings.bastion": 1, "tools.iron_pickaxe": True},
        3: {"buildings.foundry": 1},
        4: {"buildings.foundry": 1, "resources.steel": 1},
    },
    cost={
        1: {"resources.wood": 200, "resources.stone": 100},
        2: {"resources.wood": 300, "resources.stone": 200, "resources.iron": 50},
        3: {"resources.wood": 400, "resources.stone": 300, "resources.iron": 100},
        4: {"resources.stone": 400, "resources.steel": 100},
    },
    effects={
        1: {"buildings.watchtower": 1},
        2: {"buildings.watchtower": 1},
        3: {"buildings.watchtower": 1},
        4: {"buildings.watchtower": 1},
    },
    cooldown=30,
)

BUILD_PALISADES = ActionDef(
    id="build_palisades",
    label="Palisades",
    building="palisades",
    show_when={
        1: {"buildings.bastion": 1},
        2: {"buildings.bastion": 1, "buildings.watchtower": 1},
        3: {"buildings.foundry": 1},
        4: {"buildings.foundry": 1, "resources.steel": 1},
    },
    cost={
        1: {"resources.wood": 300},
        2: {"resources.wood": 400, "resources.stone": 200},
        3: {"resources.wood": 500, "resources.stone": 400, "resources.iron": 100},
        4: {"resources.stone": 600, "resources.steel": 150},
    },
    effects={
        1: {"buildings.palisades": 1},
        2: {"buildings.palisades": 1},
        3: {"buildings.palisades": 1},
        4: {"buildings.palisades": 1},
    },
    cooldown=30,
)

DEFAULT_ACTIONS: tuple[ActionDef, ...] = (
    LIGHT_FIRE,
    GATHER_WOOD,
    BUILD_TORCH,
    EXPLORE_CAVE,
    MINE_IRON,
    MINE_COAL,
    MINE_SULFUR,
    FORGE_STEEL,
    HUNT,
    CRAFT_STONE_AXE,
    CRAFT_STONE_PICKAXE,
    CRAFT_IRON_AXE,
    CRAFT_IRON_PICKAXE,
    CRAFT_CRUDE_BOW,
    CRAFT_EMBER_BOMB,
    CRAFT_ASHFIRE_BOMB,
    CRAFT_POISON_ARROWS,
    CRAFT_BONE_TOTEM,
    BONE_TOTEMS,
    BUILD_HUT,
    BUILD_CABIN,
    BUILD_BLACKSMITH,
    BUILD_TIMBER_MILL,
    BUILD_ALTAR,
    BUILD_TANNERY,
    BUILD_FOUNDRY,
    BUILD_BASTION,
    BUILD_WATCHTOWER,
    BUILD_PALISADES,
)


def default_registry() -> ActionRegistry:
    """Fresh registry loaded with the built-in catalog."""
    return ActionRegistry.load(DEFAULT_ACTIONS, default_formulas())
