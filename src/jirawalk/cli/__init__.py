"""Command line interface for jirawalk."""
