"""Item, Equipment, and Inventory system for the Cleric."""

from __future__ import annotations

from dataclasses import dataclass, field

from idle_combat.core.enums import ItemType, Rarity


# ---------------------------------------------------------------------------
# Item template
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ItemTemplate:
    """Immutable blueprint for an item.  Instances are referenced by item_id."""

    item_id: str
    name: str
    item_type: ItemType
    rarity: Rarity
    # Equipment stat bonuses
    damage_bonus: int = 0
    armor_bonus: int = 0
    mana_regen_bonus: float = 0.0
    max_mana_bonus: int = 0


# ---------------------------------------------------------------------------
# Item registry: all item definitions live here
# ---------------------------------------------------------------------------

ITEM_REGISTRY: dict[str, ItemTemplate] = {}


def _reg(t: ItemTemplate) -> ItemTemplate:
    ITEM_REGISTRY[t.item_id] = t
    return t


# ---- Weapons ----
_reg(ItemTemplate("rusty_mace",        "Rusty Mace",          ItemType.WEAPON, Rarity.COMMON,   damage_bonus=2))
_reg(ItemTemplate("iron_mace",         "Iron Mace",           ItemType.WEAPON, Rarity.COMMON,   damage_bonus=4))
_reg(ItemTemplate("blessed_hammer",    "Blessed Hammer",      ItemType.WEAPON, Rarity.UNCOMMON, damage_bonus=7, mana_regen_bonus=0.25))
_reg(ItemTemplate("lightbringer",      "Lightbringer",        ItemType.WEAPON, Rarity.RARE,     damage_bonus=12, max_mana_bonus=10))

# ---- Armor ----
_reg(ItemTemplate("cloth_vestments",   "Cloth Vestments",     ItemType.ARMOR, Rarity.COMMON,   armor_bonus=1))
_reg(ItemTemplate("chain_vestments",   "Chain Vestments",     ItemType.ARMOR, Rarity.UNCOMMON, armor_bonus=3))
_reg(ItemTemplate("templar_plate",     "Templar Plate",       ItemType.ARMOR, Rarity.RARE,     armor_bonus=6))

# ---- Accessories ----
_reg(ItemTemplate("prayer_beads",      "Prayer Beads",        ItemType.ACCESSORY, Rarity.COMMON,   mana_regen_bonus=0.5))
_reg(ItemTemplate("mana_pendant",      "Mana Pendant",        ItemType.ACCESSORY, Rarity.UNCOMMON, max_mana_bonus=20))
_reg(ItemTemplate("saints_reliquary",  "Saint's Reliquary",   ItemType.ACCESSORY, Rarity.RARE,     mana_regen_bonus=1.0, max_mana_bonus=25, armor_bonus=1))


# ---------------------------------------------------------------------------
# Loot tables: (item_id, weight) per enemy type
# ---------------------------------------------------------------------------

LOOT_TABLES: dict[str, list[tuple[str, int]]] = {
    "skeleton": [
        ("rusty_mace", 30),
        ("cloth_vestments", 30),
        ("prayer_beads", 20),
        ("iron_mace", 12),
        ("chain_vestments", 6),
        ("mana_pendant", 2),
    ],
    "zombie": [
        ("iron_mace", 25),
        ("chain_vestments", 25),
        ("mana_pendant", 20),
        ("blessed_hammer", 15),
        ("templar_plate", 8),
        ("saints_reliquary", 5),
        ("lightbringer", 2),
    ],
}


def get_item(item_id: str) -> ItemTemplate | None:
    return ITEM_REGISTRY.get(item_id)


def pick_weighted(table: list[tuple[str, int]], roll: float) -> str | None:
    """Select an item id from a weighted table using a roll in [0, 1)."""
    total = sum(w for _, w in table)
    if total <= 0:
        return None
    threshold = roll * total
    acc = 0
    for item_id, weight in table:
        acc += weight
        if threshold < acc:
            return item_id
    return table[-1][0]


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------

_SLOT_BY_TYPE: dict[ItemType, str] = {
    ItemType.WEAPON: "weapon",
    ItemType.ARMOR: "armor",
    ItemType.ACCESSORY: "accessory",
}

EQUIPMENT_SLOTS: tuple[str, ...] = ("weapon", "armor", "accessory")


@dataclass(slots=True)
class Inventory:
    """The Cleric's bag plus three equipment slots."""

    items: list[str] = field(default_factory=list)
    weapon: str | None = None
    armor: str | None = None
    accessory: str | None = None

    def add_item(self, item_id: str) -> bool:
        if item_id not in ITEM_REGISTRY:
            return False
        self.items.append(item_id)
        return True

    def equip(self, item_id: str) -> bool:
        """Move *item_id* from the bag into its slot, swapping out the old piece."""
        tmpl = ITEM_REGISTRY.get(item_id)
        if tmpl is None or item_id not in self.items:
            return False
        slot = _SLOT_BY_TYPE[tmpl.item_type]
        self.items.remove(item_id)
        old = getattr(self, slot)
        if old is not None:
            self.items.append(old)
        setattr(self, slot, item_id)
        return True

    def unequip(self, slot: str) -> bool:
        if slot not in EQUIPMENT_SLOTS:
            return False
        old = getattr(self, slot)
        if old is None:
            return False
        setattr(self, slot, None)
        self.items.append(old)
        return True

    def equipped(self) -> list[str]:
        return [i for i in (self.weapon, self.armor, self.accessory) if i is not None]

    def equipment_bonus(self, stat: str) -> int | float:
        """Sum a bonus field across all equipped items."""
        total: int | float = 0
        for item_id in self.equipped():
            tmpl = ITEM_REGISTRY.get(item_id)
            if tmpl:
                total += getattr(tmpl, stat, 0)
        return total
