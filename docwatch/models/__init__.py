"""Entity kinds, change events and classified actions."""
