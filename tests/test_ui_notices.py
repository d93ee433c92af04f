from streamlit.testing.v1 import AppTest

from apps.ui.views.common import NOTICE_REFRESH_S
from core.config import settings


def _notice_page():
    import streamlit as st

    from apps.ui.views.common import show_notices
    from services.dashboards.notices import NoticeBoard

    if "board" not in st.session_state:
        st.session_state.board = NoticeBoard(ttl_s=5, clock=lambda: st.session_state.now)
        st.session_state.board.success("Loan #L1 has been approved successfully.")
    show_notices(st.session_state.board)


def test_notice_banner_disappears_once_expired():
    at = AppTest.from_function(_notice_page)
    at.session_state["now"] = 0.0
    at.run()
    assert [s.value for s in at.success] == ["Loan #L1 has been approved successfully."]

    at.session_state["now"] = 4.9
    at.run()
    assert len(at.success) == 1

    at.session_state["now"] = 5.0
    at.run()
    assert len(at.success) == 0


def test_notices_rerender_within_their_lifetime():
    assert 0 < NOTICE_REFRESH_S < settings.NOTICE_TTL_S
