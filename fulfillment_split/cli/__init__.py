"""Command-line interface (run with ``python -m fulfillment_split.cli``)."""
