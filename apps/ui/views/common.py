from __future__ import annotations

import streamlit as st

from apps.ui.context import navigate
from core.config import settings
from services.dashboards.notices import NoticeBoard

# notices are re-checked this often so they disappear close to their expiry
NOTICE_REFRESH_S = settings.NOTICE_TTL_S / 5


def go(path: str) -> None:
    navigate(path)
    st.rerun()


@st.fragment(run_every=NOTICE_REFRESH_S)
def show_notices(board: NoticeBoard) -> None:
    for notice in board.active():
        if notice.kind == "success":
            st.success(notice.text)
        else:
            st.error(notice.text)


def money(amount: float | None) -> str:
    return "N/A" if amount is None else f"₹{amount:,.0f}"


def show_field_errors(errors: dict[str, str]) -> None:
    for field, message in errors.items():
        st.caption(f":red[{field}: {message}]")


FLASH_KEY = "flash"


def flash(text: str, icon: str | None = None) -> None:
    """Toast shown on the next run (survives st.rerun)."""
    st.session_state[FLASH_KEY] = (text, icon)


def show_flash() -> None:
    if FLASH_KEY in st.session_state:
        text, icon = st.session_state.pop(FLASH_KEY)
        st.toast(text, icon=icon)
