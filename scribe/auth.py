"""Supabase email/password authentication for the Streamlit app."""

import logging

import streamlit as st
from supabase import Client

from scribe.config import SessionKey, Settings
from scribe.database import create_supabase_client, sign_in
from scribe.errors import SessionExpired

logger = logging.getLogger(__name__)


def get_client(settings: Settings) -> Client:
    """The signed-in user's Supabase client, created once per browser session."""
    if st.session_state.get(SessionKey.SUPABASE_CLIENT) is None:
        st.session_state[SessionKey.SUPABASE_CLIENT] = create_supabase_client(settings)
    return st.session_state[SessionKey.SUPABASE_CLIENT]


def check_login(settings: Settings) -> bool:
    """Returns True if the user is signed in, otherwise renders the sign-in form."""
    if st.session_state.get(SessionKey.USER_ID):
        return True

    st.title("Meeting Scribe")
    st.caption("Sign in to record and transcribe meetings")

    with st.form("sign_in"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", type="primary")

    if submitted:
        if not email or not password:
            st.error("Enter your email and password")
            return False
        try:
            user_id, access_token = sign_in(get_client(settings), email, password)
        except SessionExpired as e:
            logger.warning("Sign-in failed", extra={"email": email})
            st.error(str(e))
            return False
        st.session_state[SessionKey.USER_ID] = user_id
        st.session_state[SessionKey.USER_EMAIL] = email
        st.session_state[SessionKey.ACCESS_TOKEN] = access_token
        logger.info("User signed in", extra={"user_id": user_id})
        st.rerun()

    return False


def logout():
    """Sign out and clear authentication state."""
    client = st.session_state.get(SessionKey.SUPABASE_CLIENT)
    if client is not None:
        try:
            client.auth.sign_out()
        except Exception:
            logger.warning("Sign-out request failed", exc_info=True)
    for key in (SessionKey.USER_ID, SessionKey.USER_EMAIL, SessionKey.ACCESS_TOKEN, SessionKey.SUPABASE_CLIENT):
        st.session_state.pop(key, None)
