"""Terminal client wiring and display."""
