"""
Entry point for running ezdispatch as a module: python -m ezdispatch
"""

from ezdispatch.cli.commands import app

if __name__ == "__main__":
    app()
