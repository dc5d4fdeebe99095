"""Command line interface for savenotes."""
