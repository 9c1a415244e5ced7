"""
Movie catalog repository.

Holds the movie id -> title lookup used by the recommender recipe. The
catalog is an explicit object: construct it, load it once, pass it to
whoever needs it.
"""

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from ..config.exceptions import DatasetError, DatasetFormatError, DatasetNotFoundError, MovieNotFoundError
from ..config.logging import get_logger
from ..models.movie import Movie

logger = get_logger(__name__)


def parse_movie_line(line: str) -> Movie:
    """
    Parse one ``id,title...,genres`` line.

    Titles may contain commas, so everything between the first and the last
    field is the title. Leading zeros of the id are ignored.

    Raises:
        DatasetFormatError: If the line has fewer than three fields or a non-numeric id
    """
    fields = line.rstrip("\r\n").split(",")
    if len(fields) < 3:
        raise DatasetFormatError(f"Expected at least 3 fields, got {len(fields)}: {line!r}")

    raw_id = fields[0].strip().lstrip("0") or "0"
    try:
        movie_id = int(raw_id)
    except ValueError as e:
        raise DatasetFormatError(f"Invalid movie id {fields[0]!r}") from e

    title = ",".join(fields[1:-1]).strip()
    if len(title) >= 2 and title.startswith('"') and title.endswith('"'):
        title = title[1:-1]
    return Movie(id=movie_id, title=title)


class MovieCatalog:
    """In-memory movie list with lookup by id."""

    def __init__(self):
        self._movies: Optional[Dict[int, Movie]] = None

    @classmethod
    def from_csv(cls, path: Union[str, Path]) -> "MovieCatalog":
        catalog = cls()
        catalog.load(path)
        return catalog

    def load(self, path: Union[str, Path]) -> "MovieCatalog":
        """
        Load the whole movie file into memory, replacing any previous contents.

        Raises:
            DatasetNotFoundError: If the file does not exist
            DatasetFormatError: If a line cannot be parsed
        """
        path = Path(path)
        if not path.is_file():
            raise DatasetNotFoundError(f"Movie file not found: {path}")

        movies: Dict[int, Movie] = {}
        with path.open("r", encoding="utf-8") as reader:
            next(reader, None)  # header
            for line_number, line in enumerate(reader, start=2):
                if not line.strip():
                    continue
                try:
                    movie = parse_movie_line(line)
                except DatasetFormatError as e:
                    raise DatasetFormatError(f"{path}:{line_number}: {e}") from e
                movies[movie.id] = movie

        self._movies = movies
        logger.info("Loaded movie catalog", path=str(path), movie_count=len(movies))
        return self

    @property
    def is_loaded(self) -> bool:
        return self._movies is not None

    def _require_loaded(self) -> Dict[int, Movie]:
        if self._movies is None:
            raise DatasetError("Movie catalog has not been loaded")
        return self._movies

    def get(self, movie_id: int) -> Movie:
        movies = self._require_loaded()
        try:
            return movies[movie_id]
        except KeyError:
            raise MovieNotFoundError(f"Movie not found: {movie_id}") from None

    def all(self) -> List[Movie]:
        return list(self._require_loaded().values())

    def __len__(self) -> int:
        return len(self._require_loaded())

    def __iter__(self) -> Iterator[Movie]:
        return iter(self.all())

    def __contains__(self, movie_id: object) -> bool:
        return movie_id in self._require_loaded()
