"""Command line interface for the clinic calendar."""
