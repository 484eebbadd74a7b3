"""Gradio UI for Hero Town.

One screen: a collapsible form panel for registering heroes and a results panel
with power filter, sort toggle and card/list toggle. The directory service base
URL comes from AppSettings, so the same screen serves the hosted and local
backends.

Handlers are module-level functions taking explicit session values so they can
be exercised without a running server; _build_ui only wires them to components.
"""

import atexit
import logging
from typing import List, Optional, Tuple

import gradio as gr

try:
    from .directory_client import (
        HeroDirectory,
        HeroDirectoryClient,
        HeroDirectoryError,
        ScoreSuggestionClient,
        SuggestionSequencer,
    )
    from .heroes import (
        HUMILITY_HELP,
        STANDARD_SUPERPOWERS,
        VIEW_CARD,
        Hero,
        HeroDraft,
        HeroValidationError,
        ViewState,
        derive_view,
        power_label,
        suggest_powers,
        unique_powers,
    )
    from .main import AppSettings, get_default_settings
    from .render import RESULTS_CSS, results_html
except ImportError:
    from directory_client import (  # type: ignore
        HeroDirectory,
        HeroDirectoryClient,
        HeroDirectoryError,
        ScoreSuggestionClient,
        SuggestionSequencer,
    )
    from heroes import (  # type: ignore
        HUMILITY_HELP,
        STANDARD_SUPERPOWERS,
        VIEW_CARD,
        Hero,
        HeroDraft,
        HeroValidationError,
        ViewState,
        derive_view,
        power_label,
        suggest_powers,
        unique_powers,
    )
    from main import AppSettings, get_default_settings  # type: ignore
    from render import RESULTS_CSS, results_html  # type: ignore

logger = logging.getLogger(__name__)

PANEL_OPEN_LABEL = "◀ Hide form"
PANEL_CLOSED_LABEL = "▶ Add a hero"


def _status_md(message: Optional[str]) -> str:
    return f"⚠️ {message}" if message else ""


def power_choices(heroes: List[Hero]) -> List[Tuple[str, str]]:
    """(label, value) pairs for the power filter dropdown."""
    return [(power_label(p), p) for p in unique_powers(heroes)]


def sort_button_label(state: ViewState) -> str:
    return "⇅ Humility: low → high" if state.sort_ascending else "⇅ Humility: high → low"


def view_button_label(state: ViewState) -> str:
    # Names the view the button switches to.
    return "☰ List view" if state.view_mode == VIEW_CARD else "▦ Card view"


def render_results(heroes: List[Hero], state: ViewState, status: Optional[str] = None):
    """
    Outputs shared by every handler that touches the results panel:
    (heroes, state, title_md, power_dropdown, results_html, sort_btn, view_btn, status_md)
    """
    state = state.reconcile(heroes)
    view = derive_view(heroes, state)
    return (
        heroes,
        state,
        f"## {view.title}",
        gr.update(choices=power_choices(heroes), value=state.selected_power),
        results_html(view),
        gr.update(value=sort_button_label(state)),
        gr.update(value=view_button_label(state)),
        _status_md(status),
    )


def load_heroes(client: HeroDirectoryClient, heroes: List[Hero], state: ViewState):
    """Initial fetch. On failure the (empty or stale) collection is kept."""
    directory = HeroDirectory(client, heroes)
    directory.refresh()
    return render_results(directory.heroes, state, directory.last_error)


def submit_hero(
    client: HeroDirectoryClient,
    name: Optional[str],
    superpower: Optional[str],
    humility_score,
    heroes: List[Hero],
    state: ViewState,
):
    """
    Validate the form, post it, refresh the collection.

    Returns (name, superpower, humility_score, suggestions) followed by the
    render_results outputs. Form fields are cleared only after a successful
    create; on any failure they keep what the user typed.
    """
    keep_form = (gr.update(), gr.update(), gr.update(), gr.update())
    try:
        hero = HeroDraft(name, superpower, humility_score).validate()
    except HeroValidationError as e:
        logger.info(f"Rejected hero form: {e}")
        return keep_form + render_results(heroes, state, str(e))

    directory = HeroDirectory(client, heroes)
    if not directory.add(hero):
        return keep_form + render_results(directory.heroes, state, directory.last_error)

    cleared = (
        gr.update(value=""),
        gr.update(value=""),
        gr.update(value=None),
        gr.update(choices=[], value=None, visible=False),
    )
    return cleared + render_results(directory.heroes, state, directory.last_error)


def suggest_for_superpower(
    suggester: ScoreSuggestionClient,
    sequencer: SuggestionSequencer,
    text: Optional[str],
):
    """
    Live assist while typing the superpower.

    Returns (suggestions_update, humility_score_update). A blank field sends no
    request. The score is applied only if no newer keystroke has dispatched a
    request in the meantime; otherwise the field is left alone.
    """
    matches = suggest_powers(text)
    suggestions = gr.update(choices=matches, value=None, visible=bool(matches))
    if text is None or not text.strip():
        return suggestions, gr.update()

    ticket = sequencer.dispatch()
    try:
        score = suggester.suggest_score(text)
    except HeroDirectoryError as e:
        logger.error(f"Error getting suggested score: {e}")
        return suggestions, gr.update()

    if not sequencer.is_current(ticket):
        logger.debug(
            f"Discarding stale score suggestion for {text!r} (ticket {ticket} < {sequencer.latest})"
        )
        return suggestions, gr.update()
    return suggestions, gr.update(value=score)


def pick_suggestion(
    suggester: ScoreSuggestionClient, sequencer: SuggestionSequencer, choice: Optional[str]
):
    """Fill the superpower field from a clicked suggestion and fetch its score."""
    if not choice:
        return gr.update(), gr.update(), gr.update()
    _, score_update = suggest_for_superpower(suggester, sequencer, choice)
    return (
        gr.update(value=choice),
        gr.update(choices=[], value=None, visible=False),
        score_update,
    )


def toggle_panel(state: ViewState):
    state = state.toggle_panel()
    return (
        state,
        gr.update(visible=state.panel_open),
        gr.update(value=PANEL_OPEN_LABEL if state.panel_open else PANEL_CLOSED_LABEL),
    )


def _build_ui(settings: Optional[AppSettings] = None):
    if settings is None:
        settings = get_default_settings()
    directory_client = HeroDirectoryClient(settings.base_url, timeout=settings.timeout)
    suggester = ScoreSuggestionClient(settings.base_url, timeout=settings.timeout)
    # Shared by every session for the life of the process.
    atexit.register(directory_client.close)
    atexit.register(suggester.close)
    logger.info(f"Building Hero Town UI for {settings.base_url}")

    with gr.Blocks(title="Hero Town") as demo:
        gr.HTML(RESULTS_CSS)
        heroes_state = gr.State([])
        view_state = gr.State(ViewState())
        sequencer_state = gr.State(SuggestionSequencer())

        with gr.Row():
            panel_btn = gr.Button(PANEL_OPEN_LABEL, size="sm", scale=0)
        with gr.Row():
            with gr.Column(scale=1, min_width=320) as form_panel:
                gr.Markdown("### Add New Superhero 🦸🏼")
                name_in = gr.Textbox(label="Name", max_lines=1)
                superpower_in = gr.Textbox(label="Superpower", max_lines=1)
                suggestions = gr.Radio(
                    label="Suggestions", choices=[], visible=False, interactive=True
                )
                with gr.Accordion("Common Superpowers", open=False):
                    gr.Markdown("\n".join(f"- {p}" for p in STANDARD_SUPERPOWERS))
                score_in = gr.Number(
                    label="Humility Score (1-10)",
                    info=HUMILITY_HELP,
                    minimum=1,
                    maximum=10,
                    step=0.1,
                    value=None,
                )
                submit_btn = gr.Button("Add Superhero!", variant="primary")

            with gr.Column(scale=3):
                with gr.Row():
                    title_md = gr.Markdown("## 0 Superheroes in our Town 🔥")
                    power_dd = gr.Dropdown(
                        label="Power",
                        choices=power_choices([]),
                        value="all",
                        interactive=True,
                        scale=0,
                        min_width=200,
                    )
                    sort_btn = gr.Button(sort_button_label(ViewState()), scale=0)
                    view_btn = gr.Button(view_button_label(ViewState()), scale=0)
                status_md = gr.Markdown("")
                results = gr.HTML()

        render_outputs = [
            heroes_state,
            view_state,
            title_md,
            power_dd,
            results,
            sort_btn,
            view_btn,
            status_md,
        ]

        demo.load(
            lambda heroes, state: load_heroes(directory_client, heroes, state),
            inputs=[heroes_state, view_state],
            outputs=render_outputs,
            concurrency_limit=None,
        )

        panel_btn.click(
            toggle_panel,
            inputs=[view_state],
            outputs=[view_state, form_panel, panel_btn],
            concurrency_limit=None,
        )

        superpower_in.input(
            lambda seq, text: suggest_for_superpower(suggester, seq, text),
            inputs=[sequencer_state, superpower_in],
            outputs=[suggestions, score_in],
            trigger_mode="always_last",
            concurrency_limit=None,
        )
        suggestions.input(
            lambda seq, choice: pick_suggestion(suggester, seq, choice),
            inputs=[sequencer_state, suggestions],
            outputs=[superpower_in, suggestions, score_in],
            concurrency_limit=None,
        )

        submit_btn.click(
            lambda n, p, s, heroes, state: submit_hero(
                directory_client, n, p, s, heroes, state
            ),
            inputs=[name_in, superpower_in, score_in, heroes_state, view_state],
            outputs=[name_in, superpower_in, score_in, suggestions] + render_outputs,
            concurrency_limit=None,
        )

        power_dd.input(
            lambda heroes, state, power: render_results(
                heroes, state.select_power(power)
            ),
            inputs=[heroes_state, view_state, power_dd],
            outputs=render_outputs,
            concurrency_limit=None,
        )
        sort_btn.click(
            lambda heroes, state: render_results(heroes, state.toggle_sort()),
            inputs=[heroes_state, view_state],
            outputs=render_outputs,
            concurrency_limit=None,
        )
        view_btn.click(
            lambda heroes, state: render_results(heroes, state.toggle_view_mode()),
            inputs=[heroes_state, view_state],
            outputs=render_outputs,
            concurrency_limit=None,
        )

    return demo


if __name__ == "__main__":
    demo = _build_ui()
    demo.launch()
