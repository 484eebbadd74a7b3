"""
Hero records and the derived-view engine.

Everything in this module is pure: functions take the hero collection and the
current view controls and return new values. Nothing here talks to the network
or to Gradio, so the presentation layer and the CLI share the same rules for
grouping, filtering and sorting.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

# Sentinel filter value meaning "no power filter".
ALL_POWERS: str = "all"

VIEW_CARD: str = "card"
VIEW_LIST: str = "list"

MIN_HUMILITY: float = 1.0
MAX_HUMILITY: float = 10.0

STANDARD_SUPERPOWERS: List[str] = [
    "Flying",
    "Super Strength",
    "Invisibility",
    "Telekinesis",
    "Time Travel",
    "Healing",
    "Mind Reading",
    "Teleportation",
    "Energy Manipulation",
    "Shape Shifting",
]

HUMILITY_HELP: str = (
    "A measure of how humble the superhero is. Higher scores indicate greater "
    "humility and self-awareness, while lower scores suggest more ego-driven behavior."
)


class HeroValidationError(ValueError):
    """Raised when a hero draft is missing a required field or has a bad score."""

    pass


@dataclass(frozen=True)
class Hero:
    """A registered superhero as returned by the directory service."""

    name: str
    superpower: str
    humility_score: float
    id: Optional[Any] = None

    @property
    def power_key(self) -> str:
        # Grouping/filtering key; case-insensitive by contract.
        return self.superpower.lower()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Hero":
        """
        Build a Hero from a service record (camelCase keys).

        The service may send humilityScore as a number or a numeric string;
        both are coerced to float. Missing keys raise KeyError, bad scores
        raise ValueError/TypeError; callers map those to their own errors.
        """
        return cls(
            name=str(data["name"]),
            superpower=str(data["superpower"]),
            humility_score=float(data["humilityScore"]),
            id=data.get("id", data.get("_id")),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "superpower": self.superpower,
            "humilityScore": self.humility_score,
        }


@dataclass
class HeroDraft:
    """Raw form input before submission. Values are whatever the form produced."""

    name: Optional[str] = None
    superpower: Optional[str] = None
    humility_score: Optional[Any] = None

    def validate(self) -> Hero:
        """
        Check required fields and return the Hero to post.

        Raises HeroValidationError naming the first offending field.
        """
        name = (self.name or "").strip()
        superpower = (self.superpower or "").strip()
        if not name:
            raise HeroValidationError("Name is required")
        if not superpower:
            raise HeroValidationError("Superpower is required")

        raw = self.humility_score
        if raw is None or (isinstance(raw, str) and raw.strip() == ""):
            raise HeroValidationError("Humility Score is required")
        try:
            score = round(float(raw), 1)
        except (TypeError, ValueError) as e:
            raise HeroValidationError(
                f"Humility Score must be a number, got {raw!r}"
            ) from e
        if not (MIN_HUMILITY <= score <= MAX_HUMILITY):
            raise HeroValidationError(
                f"Humility Score must be between {MIN_HUMILITY:g} and {MAX_HUMILITY:g}, got {score:g}"
            )
        return Hero(name=name, superpower=superpower, humility_score=score)


# -------------------------
# Derived view engine
# -------------------------
def unique_powers(heroes: Sequence[Hero]) -> List[str]:
    """Distinct lower-cased superpowers in first-seen order, prefixed with "all"."""
    seen: Dict[str, None] = {}
    for hero in heroes:
        seen.setdefault(hero.power_key, None)
    return [ALL_POWERS, *seen.keys()]


def group_by_power(heroes: Sequence[Hero]) -> Dict[str, List[Hero]]:
    """Map lower-cased superpower -> heroes with that power, in collection order."""
    groups: Dict[str, List[Hero]] = {}
    for hero in heroes:
        groups.setdefault(hero.power_key, []).append(hero)
    return groups


def filter_and_sort(
    heroes: Sequence[Hero],
    selected_power: str = ALL_POWERS,
    sort_ascending: bool = False,
) -> List[Hero]:
    """
    Heroes to render for the given controls.

    Restricts to `selected_power` unless it is "all", then sorts by humility
    score (descending unless `sort_ascending`). Python's sort is stable and
    `reverse=True` keeps equal elements in their original order, so ties keep
    collection order in both directions. The input is never mutated.
    """
    if selected_power == ALL_POWERS:
        subset = list(heroes)
    else:
        subset = [h for h in heroes if h.power_key == selected_power]
    return sorted(subset, key=lambda h: h.humility_score, reverse=not sort_ascending)


def power_label(power: str) -> str:
    """Dropdown label for a power key."""
    if power == ALL_POWERS:
        return "All Powers"
    return power[:1].upper() + power[1:]


def group_heading(power: str, count: int) -> str:
    return f"{count} which can {power}!"


def collection_title(heroes: Sequence[Hero]) -> str:
    return f"{len(heroes)} Superheroes in our Town 🔥"


def suggest_powers(text: Optional[str]) -> List[str]:
    """Standard superpowers containing `text` (case-insensitive). Blank -> []."""
    if text is None or not text.strip():
        return []
    needle = text.strip().lower()
    return [p for p in STANDARD_SUPERPOWERS if needle in p.lower()]


# -------------------------
# View state
# -------------------------
@dataclass(frozen=True)
class ViewState:
    """
    Everything the results panel needs besides the collection itself.

    Frozen so that each control produces a new record; the UI keeps one per
    browser session in gr.State.
    """

    view_mode: str = VIEW_CARD
    sort_ascending: bool = False
    panel_open: bool = True
    selected_power: str = ALL_POWERS

    def toggle_view_mode(self) -> "ViewState":
        return replace(
            self, view_mode=VIEW_LIST if self.view_mode == VIEW_CARD else VIEW_CARD
        )

    def toggle_sort(self) -> "ViewState":
        return replace(self, sort_ascending=not self.sort_ascending)

    def toggle_panel(self) -> "ViewState":
        return replace(self, panel_open=not self.panel_open)

    def select_power(self, power: Optional[str]) -> "ViewState":
        return replace(self, selected_power=power or ALL_POWERS)

    def reconcile(self, heroes: Sequence[Hero]) -> "ViewState":
        """Fall back to "all" when the selected power no longer exists after a refresh."""
        if self.selected_power in unique_powers(heroes):
            return self
        logger.debug(
            f"Selected power {self.selected_power!r} not in collection; resetting to all"
        )
        return replace(self, selected_power=ALL_POWERS)


@dataclass
class DerivedView:
    """What the results panel renders: a title, optional group heading, heroes."""

    title: str
    heroes: List[Hero] = field(default_factory=list)
    heading: Optional[str] = None
    view_mode: str = VIEW_CARD


def derive_view(heroes: Sequence[Hero], state: ViewState) -> DerivedView:
    """
    Combine the engine operations for one render.

    With a power selected, the heroes come from that power's group and carry
    the "N which can <power>!" heading; they are sorted the same way as the
    unfiltered view.
    """
    title = collection_title(heroes)
    if state.selected_power == ALL_POWERS:
        return DerivedView(
            title=title,
            heroes=filter_and_sort(heroes, ALL_POWERS, state.sort_ascending),
            view_mode=state.view_mode,
        )
    group = group_by_power(heroes).get(state.selected_power, [])
    return DerivedView(
        title=title,
        heroes=filter_and_sort(group, state.selected_power, state.sort_ascending),
        heading=group_heading(state.selected_power, len(group)),
        view_mode=state.view_mode,
    )
