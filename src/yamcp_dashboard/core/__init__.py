"""Core components: models, configuration store, managers and log viewer."""
