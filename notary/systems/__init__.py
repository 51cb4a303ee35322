"""
Humanity Notary — Systems

identity  signing keypair, signer identities, certificates
notary    certificate issuance and redemption
feed      durable append-only feed of published posts
"""
