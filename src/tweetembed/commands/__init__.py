"""Built-in sub-command groups registered on the root Typer app."""
