"""
Device fingerprint for the client session agent.

The fingerprint only tells browser installs apart. Every input is chosen
by the client, so it is not a security boundary; the session token is
the credential.
"""

import hashlib
import platform
import secrets
import shutil
import time
from typing import Optional


def default_user_agent() -> str:
    return f"chatweet-client ({platform.system()} {platform.release()}; {platform.machine()})"


def default_screen() -> str:
    size = shutil.get_terminal_size(fallback=(80, 24))
    return f"{size.columns}x{size.lines}"


def generate_device_id(
    user_agent: Optional[str] = None,
    screen: Optional[str] = None,
    now_ms: Optional[int] = None,
    nonce: Optional[str] = None,
) -> str:
    """
    Derive a device id from environment signals.

    Args:
        user_agent: Client user agent string
        screen: Screen dimensions as "WIDTHxHEIGHT"
        now_ms: Epoch milliseconds, defaults to the current time
        nonce: Random suffix, defaults to 12 random hex chars

    Returns:
        12-char digest of the combined signals followed by the nonce
    """
    user_agent = user_agent if user_agent is not None else default_user_agent()
    screen = screen if screen is not None else default_screen()
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    nonce = nonce if nonce is not None else secrets.token_hex(6)

    combined = f"{user_agent}-{screen}-{now_ms}-{nonce}"
    digest = hashlib.blake2b(combined.encode("utf-8"), digest_size=6).hexdigest()
    return digest + nonce
