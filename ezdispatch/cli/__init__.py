"""Command-line interface for ezdispatch."""
