from integrations.identity.client import (
    EMPTY_IDENTITY,
    IdentityClient,
    IdentityInfo,
    fetch_identity,
    read_identity_file,
)

__all__ = [
    'EMPTY_IDENTITY',
    'IdentityClient',
    'IdentityInfo',
    'fetch_identity',
    'read_identity_file',
]
