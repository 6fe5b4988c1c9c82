"""Events app: events, their price tiers and the seat ledger."""
