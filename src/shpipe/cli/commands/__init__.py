"""shpipe CLI commands."""
