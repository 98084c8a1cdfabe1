"""Domain layer: claim model, ports and reconciliation."""
