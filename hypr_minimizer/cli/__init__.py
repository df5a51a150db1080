"""Command line interface for hypr-minimizer."""
