"""HTML and table rendering for the results panel."""

from html import escape
from typing import List, Sequence

import pandas as pd

try:
    from .heroes import VIEW_CARD, DerivedView, Hero
except ImportError:
    from heroes import VIEW_CARD, DerivedView, Hero  # type: ignore

TABLE_COLUMNS: List[str] = ["Name", "Superpower", "Humility Score"]

RESULTS_CSS = """
<style>
  .hero-grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(240px, 1fr)); gap: 1.5rem; }
  .hero-card { background: #fff; padding: 1.5rem; border-radius: 0.75rem; box-shadow: 0 1px 2px rgba(0,0,0,0.06); }
  .hero-card:hover { box-shadow: 0 4px 8px rgba(0,0,0,0.1); transform: translateY(-4px); transition: all 0.2s; }
  .hero-card h3 { font-weight: 700; font-size: 1.1rem; margin: 0 0 0.5rem; color: #1f2937; }
  .hero-card p { color: #4b5563; margin: 0 0 0.75rem; }
  .hero-list { background: #fff; border-radius: 0.75rem; overflow: hidden; }
  .hero-row { display: flex; justify-content: space-between; align-items: center; padding: 1rem; border-bottom: 1px solid #e5e7eb; }
  .hero-row:hover { background: #f9fafb; }
  .hero-row h3 { font-weight: 700; margin: 0; color: #1f2937; }
  .hero-row p { font-size: 0.875rem; margin: 0; color: #4b5563; }
  .hero-score { color: #7c3aed; font-weight: 500; }
  .hero-heading { font-size: 1.25rem; font-weight: 600; color: #374151; text-transform: capitalize; margin-bottom: 1rem; }
</style>
"""


def format_score(score: float) -> str:
    return f"{score:.1f}"


def hero_card_html(hero: Hero) -> str:
    return (
        '<div class="hero-card">'
        f"<h3>{escape(hero.name)}</h3>"
        f"<p>{escape(hero.superpower)}</p>"
        '<div><span style="color:#6b7280;font-size:0.875rem">Humility Score:</span> '
        f'<span class="hero-score">{format_score(hero.humility_score)}</span></div>'
        "</div>"
    )


def hero_row_html(hero: Hero) -> str:
    return (
        '<div class="hero-row"><div>'
        f"<h3>{escape(hero.name)}</h3>"
        f"<p>{escape(hero.superpower)}</p>"
        "</div>"
        f'<div class="hero-score">Score: {format_score(hero.humility_score)}</div>'
        "</div>"
    )


def heroes_html(heroes: Sequence[Hero], view_mode: str) -> str:
    if view_mode == VIEW_CARD:
        cards = "".join(hero_card_html(h) for h in heroes)
        return f'<div class="hero-grid">{cards}</div>'
    rows = "".join(hero_row_html(h) for h in heroes)
    return f'<div class="hero-list">{rows}</div>'


def results_html(view: DerivedView) -> str:
    """Full results panel body: optional group heading followed by cards or rows."""
    parts = []
    if view.heading is not None:
        parts.append(f'<h3 class="hero-heading">{escape(view.heading)}</h3>')
    parts.append(heroes_html(view.heroes, view.view_mode))
    return "\n".join(parts)


def heroes_frame(heroes: Sequence[Hero]) -> pd.DataFrame:
    """Tabular form of `heroes`, preserving their order (used by the CLI listing)."""
    return pd.DataFrame(
        [[h.name, h.superpower, h.humility_score] for h in heroes],
        columns=TABLE_COLUMNS,
    )


def format_table(heroes: Sequence[Hero]) -> str:
    df = heroes_frame(heroes)
    if df.empty:
        return "(no heroes)"
    return df.to_string(index=False, float_format=format_score)
