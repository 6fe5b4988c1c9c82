"""Orders app: ticket orders, intake and confirmation fan-out."""
