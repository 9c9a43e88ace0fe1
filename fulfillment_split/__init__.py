"""Detect orders fulfilled from more than one location in order-fulfillment report exports."""

__version__ = "0.1.0"
