"""Command-line interface for validate-options."""
