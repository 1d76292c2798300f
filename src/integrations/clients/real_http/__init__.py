"""
Real HTTP integration clients.

These clients communicate with the storefront backend via HTTP:
- the generic authenticated request client
- the payment-initiation binding (M-Pesa)

Important:
- Must implement the same interfaces as the mock clients
- Must return data shaped according to src/integrations/contracts/*

Switching:
The selection of mock vs real clients happens in select_payment_gateway only.
"""
