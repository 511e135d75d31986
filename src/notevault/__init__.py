"""notevault — notes backend with cookie sessions and shareable links.

Accounts, credential login, per-user notes, and public read-only
sharing of single notes through unguessable tokens.
"""

__version__ = "0.1.0"
