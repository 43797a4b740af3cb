"""Building blocks of an Acme-style text editor: Edit command parsing, dump files,
file name completion, scroll sizing, a rune block store, file server identifiers
and external command bookkeeping."""

__version__ = "0.1.0"