"""CLI subcommands for modcatalog."""
