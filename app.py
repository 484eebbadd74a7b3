#!/usr/bin/env python3
"""
app.py - Hugging Face Spaces entrypoint for the Hero Town Gradio app.

Spaces expects a top-level variable referencing the Gradio app. This file
imports the builder from hero_town/gradio_ui.py and exposes it as `demo` so the
platform can serve it. Point it at another backend with HERO_TOWN_BASE_URL.
Do NOT call demo.launch() here.
"""

from hero_town.gradio_ui import _build_ui

# Build and expose the Gradio demo for Hugging Face Spaces
demo = _build_ui()
