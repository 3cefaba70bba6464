"""envkeep — environment-variable profiles kept in the OS keyring.

Profiles are stored through the ``keyring`` library and injected into
child processes on demand, so secrets never live in plaintext ``.env``
files.
"""

from envkeep.version import __version__

__all__: list[str] = ["__version__"]
