"""watchdog integration: the event bridge and the watcher loop."""
