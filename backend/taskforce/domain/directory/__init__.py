"""Directory search domain: entity tables, parsing and filter composition."""
