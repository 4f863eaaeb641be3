"""Wallet - signers backed by a local private key or a node-managed account."""
