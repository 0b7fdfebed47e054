"""CLI subcommand implementations; each module exposes `run(...) -> int`."""
