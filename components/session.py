"""
Per-session service objects.

Settings, the API client, the response cache and one TableState per
collection are created once and kept in session state for fast reruns.
"""
import logging

import streamlit as st

from config.settings import Settings, load_settings
from core.api_client import APIClient
from core.resources import Collection, CollectionDefinition
from core.response_cache import ResponseCache
from core.storage import FirebaseStorage
from core.table_state import TableState

logger = logging.getLogger(__name__)


def get_settings() -> Settings:
    if "settings" not in st.session_state:
        st.session_state.settings = load_settings()
    return st.session_state.settings


def get_api_client() -> APIClient:
    if "api_client" not in st.session_state:
        settings = get_settings()
        st.session_state.api_client = APIClient(
            settings.api_base_url,
            token=settings.api_token,
            timeout=settings.api_timeout,
        )
        logger.info("API client initialised for %s", settings.api_base_url)
    return st.session_state.api_client


def get_response_cache() -> ResponseCache:
    if "response_cache" not in st.session_state:
        st.session_state.response_cache = ResponseCache(get_settings().cache_ttl_seconds)
    return st.session_state.response_cache


def get_storage() -> FirebaseStorage:
    if "storage" not in st.session_state:
        st.session_state.storage = FirebaseStorage.from_settings(get_settings())
    return st.session_state.storage


def get_collection(definition: CollectionDefinition) -> Collection:
    key = f"_collection_{definition.key}"
    if key not in st.session_state:
        st.session_state[key] = Collection(get_api_client(), definition, get_response_cache())
    return st.session_state[key]


def get_table_state(state_key: str, definition: CollectionDefinition) -> TableState:
    """TableState stored under state_key, created with the collection's defaults."""
    if state_key not in st.session_state:
        st.session_state[state_key] = TableState(
            page_size=definition.page_size_or(get_settings().table_page_size),
            default_sort=definition.default_sort,
        )
    return st.session_state[state_key]
