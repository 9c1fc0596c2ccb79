"""Radio submission settlement service.

Turns an accepted "submit song to radio station" request into a consistent set
of side effects across submissions, playlists, play logs, songs, bands and the
band earnings ledger, all inside one database transaction.
"""

__all__: list[str] = []
