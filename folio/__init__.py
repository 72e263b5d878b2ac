"""Folio content collection loader.

This package loads a site's markdown content files (YAML front matter plus
a markdown body) into typed, validated documents that an external static
site generator can consume.

The main entry points are ``folio.store.load_all`` for library use and the
``folio`` CLI for checking and listing content.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
