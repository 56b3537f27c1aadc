"""Command-line interface for mediaxid.

The Typer application lives in :mod:`mediaxid.cli.commands`; the ``mediaxid``
console script points at :func:`mediaxid.cli.commands.main`.
"""
