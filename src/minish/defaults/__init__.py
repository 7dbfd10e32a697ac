"""Packaged YAML defaults for minish."""
