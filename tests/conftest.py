"""Shared test configuration."""

import os

# Widgets are created headless
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
