"""SnipDesk: editing sessions over a snippet store."""
