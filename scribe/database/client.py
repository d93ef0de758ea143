"""Supabase client construction, sign-in and retry logic."""

import time
import functools

from supabase import Client, ClientOptions, create_client

from scribe.config import Settings
from scribe.errors import SessionExpired


def create_supabase_client(settings: Settings, access_token: str | None = None) -> Client:
    """Create a Supabase client.

    With an access token, every request carries the caller's credentials so
    row-level security and storage policies apply to that user.
    """
    if access_token:
        options = ClientOptions(headers={"Authorization": f"Bearer {access_token}"})
        return create_client(settings.supabase_url, settings.supabase_anon_key, options=options)
    return create_client(settings.supabase_url, settings.supabase_anon_key)


def sign_in(client: Client, email: str, password: str) -> tuple[str, str]:
    """Sign in with email and password. Returns (user_id, access_token)."""
    try:
        response = client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:
        raise SessionExpired(f"Sign-in failed: {e}", e) from e
    if not response.user or not response.session:
        raise SessionExpired("Sign-in failed: no session returned")
    return response.user.id, response.session.access_token


def get_access_token(client: Client) -> str:
    """Return the current session's access token, or raise SessionExpired."""
    session = client.auth.get_session()
    if not session or not session.access_token:
        raise SessionExpired("Your session has expired. Please sign in again before processing recordings")
    return session.access_token


def with_retry(max_retries: int = 3, delay: float = 0.5):
    """Decorator to retry database reads on transient network errors.

    Catches httpx.ReadError and similar connection issues, retrying with
    exponential backoff.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            last_error = None
            for attempt in range(max_retries):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    error_type = type(e).__name__
                    # Retry on network/connection errors
                    if "ReadError" in error_type or "ConnectError" in error_type or "TimeoutException" in error_type:
                        last_error = e
                        if attempt < max_retries - 1:
                            time.sleep(delay * (2 ** attempt))  # Exponential backoff
                            continue
                    raise
            raise last_error
        return wrapper
    return decorator
