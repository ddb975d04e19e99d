"""Terminal UI (Typer commands + Rich components)."""
