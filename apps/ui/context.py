from __future__ import annotations

import logging
from dataclasses import dataclass

import streamlit as st

from core.config import Settings, settings
from services.api.client import ApiClient
from services.auth.session import SessionStore
from services.auth.token_store import FileTokenStore

logger = logging.getLogger(__name__)

ROUTE_KEY = "route"
VIEW_PREFIX = "view:"


def current_route() -> str:
    if ROUTE_KEY not in st.session_state:
        st.session_state[ROUTE_KEY] = st.query_params.get("path", "/")
    return st.session_state[ROUTE_KEY]


def navigate(path: str) -> None:
    """Record the target route; the caller reruns the script."""
    st.session_state[ROUTE_KEY] = path
    st.query_params["path"] = path


@dataclass
class AppContext:
    settings: Settings
    token_store: FileTokenStore
    client: ApiClient
    session: SessionStore


def get_context() -> AppContext:
    """One context per browser session, built on first access."""
    if "ctx" not in st.session_state:
        token_store = FileTokenStore(settings.SESSION_FILE)
        client = ApiClient(token_store)
        session = SessionStore(client, token_store, navigate)
        st.session_state["ctx"] = AppContext(settings, token_store, client, session)
        logger.info("app context created (backend %s)", client.base_url)
    return st.session_state["ctx"]


def mounted(key: str, factory):
    """View-model for the current page; created and loaded once per visit."""
    full_key = VIEW_PREFIX + key
    if full_key not in st.session_state:
        view = factory()
        with st.spinner("Loading..."):
            view.load()
        st.session_state[full_key] = view
    return st.session_state[full_key]


def unmount_all() -> None:
    for key in [k for k in st.session_state.keys() if str(k).startswith(VIEW_PREFIX)]:
        del st.session_state[key]
