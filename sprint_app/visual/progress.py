"""Progress reporting for the sprint closing run."""

from __future__ import annotations

import streamlit as st


class ProgressReporter:
    """Banner + progress bar fed by integer percentages (0-100)."""

    def __init__(self, title: str):
        self._container = st.container()
        self._title_placeholder = self._container.info(title)
        self._message_placeholder = self._container.empty()
        self._progress_placeholder = self._container.progress(0)
        self._percentage: int = 0
        self._finalized: bool = False

    def callback(self, percentage: int) -> None:
        """Signature compatible with SprintProcessor progress callbacks."""
        self.update(percentage)

    def update(self, percentage: int, message: str | None = None) -> None:
        if self._finalized:
            return
        # Never move backwards within one run
        self._percentage = max(self._percentage, min(max(int(percentage), 0), 100))
        if message:
            self._message_placeholder.write(message)
        self._progress_placeholder.progress(self._percentage, text=f"{self._percentage}%")

    def complete(self, message: str) -> None:
        if self._finalized:
            return
        self._progress_placeholder.progress(100)
        self._container.success(message)
        self._finalized = True

    def warning(self, message: str) -> None:
        if self._finalized:
            return
        self._container.warning(message)
        self._finalized = True

    def error(self, message: str) -> None:
        if self._finalized:
            return
        self._container.error(message)
        self._finalized = True
