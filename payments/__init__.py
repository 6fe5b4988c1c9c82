"""
Payments app.

Wraps the FedaPay API, sells subscription plans and reconciles processor
webhooks against ticket orders and subscription transactions.
"""
