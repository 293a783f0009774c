"""Visitor identity derivation (source address) and pseudonymous hashing."""

from __future__ import annotations

import hashlib
from typing import Mapping


FALLBACK_IDENTITY = '127.0.0.1'


def _normalize_candidate(value: str | None) -> str | None:
    if not value:
        return None
    candidate = str(value).strip().strip('"').strip("'").strip()
    if not candidate or candidate.lower() == 'unknown':
        return None
    return candidate


def _first_forwarded_for(header_value: str | None) -> str | None:
    if not header_value:
        return None
    return _normalize_candidate(header_value.split(',', 1)[0])


def resolve_client_identity(
    headers: Mapping[str, str] | None,
    remote_addr: str | None,
    *,
    trust_proxy_headers: bool = True,
) -> str:
    """Pick the raw identity string for a request.

    Order: first ``X-Forwarded-For`` entry, ``X-Real-IP``, transport peer
    address, then ``127.0.0.1``. Proxy headers are skipped entirely when
    ``trust_proxy_headers`` is off.
    """
    if headers is None:
        headers = {}

    if trust_proxy_headers:
        chosen = _first_forwarded_for(headers.get('X-Forwarded-For'))
        if chosen:
            return chosen
        chosen = _normalize_candidate(headers.get('X-Real-IP'))
        if chosen:
            return chosen

    return _normalize_candidate(remote_addr) or FALLBACK_IDENTITY


def hash_identity(raw_identity: str) -> str:
    """SHA-256 hex digest of the raw identity."""
    return hashlib.sha256(raw_identity.encode('utf-8')).hexdigest()
