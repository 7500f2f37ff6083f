"""
Asset Gateway - REST facade over a Hyperledger Fabric network

Exposes asset CRUD endpoints and turns them into chaincode submissions
and queries through a single, lazily established ledger session.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- gateway: Ledger session lifecycle, profiles, wallet, client adapter
- assets: Asset transactions and payload handling
- api: Request/response models
"""

__version__ = "1.0.0"
