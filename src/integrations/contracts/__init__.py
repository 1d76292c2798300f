"""
Contracts (data models).

This folder defines the request/response shapes and collaborator interfaces
for everything the checkout core talks to:
- Payment initiation request/response formats
- Cart, token, navigation and notification interfaces

Both mock and real HTTP clients use these contracts.
"""
