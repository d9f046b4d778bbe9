"""Public sharing of single assistant answers."""
