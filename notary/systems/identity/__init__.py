"""
Humanity Notary — Identity & Certificates

The signing keypair, pseudonymous signer identities, and the signed
content certificate that binds them to a piece of text.
"""

from notary.systems.identity.certificate import Certificate
from notary.systems.identity.keys import Keypair, KeyProvider
from notary.systems.identity.signer import IdentityDeriver

__all__ = ["Certificate", "IdentityDeriver", "KeyProvider", "Keypair"]
