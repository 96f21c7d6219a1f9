"""Command groups of the ketplan CLI."""
