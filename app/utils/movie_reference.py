"""
Movie identity across the two catalogs.

A movie is either an OMDb title (external) or an admin-curated row in the
``movies`` table (local). Both live in one namespace on the wire:

    tt0111161   -> external, OMDb id used verbatim
    custom_42   -> local, primary key 42

Only ``encode``/``decode`` deal with the textual form; everything else passes
``MovieReference`` values around.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

LOCAL_PREFIX = "custom_"


class MovieSource(str, Enum):
    """Which catalog owns a movie's data (stored in ``movie_source`` columns)"""
    EXTERNAL = "omdb"
    LOCAL = "custom"


@dataclass(frozen=True)
class MovieReference:
    source: MovieSource
    movie_id: str

    def __post_init__(self):
        if self.source == MovieSource.EXTERNAL and self.movie_id.startswith(LOCAL_PREFIX):
            raise ValueError(
                f"External id {self.movie_id!r} collides with the local prefix {LOCAL_PREFIX!r}"
            )

    @classmethod
    def external(cls, imdb_id: str) -> "MovieReference":
        return cls(MovieSource.EXTERNAL, imdb_id)

    @classmethod
    def local(cls, pk) -> "MovieReference":
        return cls(MovieSource.LOCAL, str(pk))

    @property
    def is_local(self) -> bool:
        return self.source == MovieSource.LOCAL

    @property
    def local_pk(self) -> Optional[int]:
        """Primary key of a local movie, or None if the suffix is not numeric"""
        if not self.is_local or not self.movie_id.isdigit():
            return None
        return int(self.movie_id)

    def encode(self) -> str:
        return encode(self.source, self.movie_id)

    def __str__(self) -> str:
        return self.encode()


def encode(source: MovieSource, raw_id) -> str:
    """Render a (source, id) pair as its single-string reference."""
    source = MovieSource(source)
    raw_id = str(raw_id)
    if source == MovieSource.LOCAL:
        return f"{LOCAL_PREFIX}{raw_id}"
    if raw_id.startswith(LOCAL_PREFIX):
        raise ValueError(f"External id {raw_id!r} cannot be encoded unambiguously")
    return raw_id


def decode(value: str) -> MovieReference:
    """
    Parse a reference string. Never fails.

    Anything that does not carry the local prefix is taken as an OMDb id, so a
    malformed local id ends up as a lookup that finds nothing rather than an
    error.
    """
    value = value or ""
    if value.startswith(LOCAL_PREFIX):
        return MovieReference(MovieSource.LOCAL, value[len(LOCAL_PREFIX):])
    return MovieReference(MovieSource.EXTERNAL, value)
