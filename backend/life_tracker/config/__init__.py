"""Core settings (defaults; runtime values are injected by the infrastructure layer)."""
