"""homereap - reclaim encrypted home volumes of logged-out users.

One pass over the mounted home volumes: select the ones whose owner has
logged out, unmount them with an escalating ladder of actions, and unload
their encryption keys.
"""

__version__ = "0.1.0"
