"""
Request signing for the Last.fm API.
"""

import hashlib
from collections.abc import Mapping


def sign(params: Mapping[str, str], shared_secret: str) -> str:
    """
    Computes the `api_sig` for a set of request parameters.

    Parameters are ordered by name, each name is immediately followed by its
    value, the shared secret is appended and the whole string is MD5 hashed.
    `format` and `api_sig` itself must not be part of `params`.

    Args:
        params: The request parameters to sign.
        shared_secret: The API account's shared secret.

    Returns:
        The signature as a lowercase hex string.
    """
    sig_str = "".join(f"{key}{params[key]}" for key in sorted(params)) + shared_secret
    return hashlib.md5(sig_str.encode("utf-8")).hexdigest()  # noqa: S324
