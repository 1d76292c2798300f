"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any external API.
They are used when:
- the storefront backend is not available
- we want to test the checkout end-to-end without external dependencies

Important:
- Mock clients must follow the SAME interface as real HTTP clients.
- Mock clients should return data shaped according to src/integrations/contracts/*
"""
