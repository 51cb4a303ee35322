"""
Humanity Notary — signed attestations of human-authored content.

Issues short-lived RSA-signed certificates binding a content hash, a claimed
humanity score and a pseudonymous signer identity, and admits re-validated
submissions to an append-only public feed.
"""

__version__ = "0.1.0"
