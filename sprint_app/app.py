"""Application entry point: page registry and router."""

from __future__ import annotations

import streamlit as st

PAGES = {}

SETUP_PAGE = "Setup / Connection"
PAGE_ORDER = ("Close Sprint", "Error Log", SETUP_PAGE)


def register_page(label):
    def decorator(func):
        PAGES[label] = func
        return func

    return decorator


def _sidebar_pages() -> list[str]:
    known = [name for name in PAGE_ORDER if name in PAGES]
    return known + sorted(name for name in PAGES if name not in PAGE_ORDER)


def main():
    st.sidebar.title("Sprint Closer")
    pages = _sidebar_pages()
    if not pages:
        st.write("No pages registered yet.")
        return
    # Nothing can be closed before a connection exists
    connected = "sprint_service" in st.session_state
    default = pages.index(SETUP_PAGE) if SETUP_PAGE in pages and not connected else 0
    page = st.sidebar.selectbox("Page", pages, index=default)
    PAGES[page]()


if __name__ == "__main__":
    main()
