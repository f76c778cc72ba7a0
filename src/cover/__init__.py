"""Coverage profile reading and per-function coverage status."""
