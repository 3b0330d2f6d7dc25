from cineconnect.extensions import api
from cineconnect.models import Movie, Room, Showtime
from cineconnect.utils.errors import ServiceUnavailableError

from tests.conftest import FakeShowtimes


class FakeMovies:
    def __init__(self, movies=(), genres_error=None):
        self.movies = list(movies)
        self.genres_error = genres_error
        self.queries = []

    def list_movies(self, **params):
        self.queries.append(params)
        return list(self.movies), {}

    def get_movie(self, movie_id):
        return self.movies[0]

    def genres(self):
        if self.genres_error:
            raise self.genres_error
        return ["Drama", "Sci-Fi"]


class FakeRooms:
    def __init__(self, rooms):
        self.rooms = rooms

    def list_rooms(self, **params):
        return list(self.rooms)

    def locations(self):
        return sorted({r.location for r in self.rooms})


MOVIES = [
    Movie(id="m1", title="Dune", genre="Sci-Fi", showtimes=("2030-05-10 19:30 • Sala 1 (Centro)",)),
    Movie(id="m2", title="Old Film", genre="Drama", status="inactive",
          showtimes=("2030-05-10 19:30 • Sala 1 (Centro)",)),
    Movie(id="m3", title="No Shows", genre="Drama"),
]


def test_home_lists_active_movies_with_showtimes(client, monkeypatch):
    movies = FakeMovies(MOVIES)
    monkeypatch.setattr(api, "movies", movies)

    resp = client.get("/cartelera?genre=Sci-Fi&search=du")

    assert resp.status_code == 200
    assert b"Dune" in resp.data
    assert b"Old Film" not in resp.data
    assert b"No Shows" not in resp.data
    assert movies.queries == [{"search": "du", "genre": "Sci-Fi"}]


def test_home_falls_back_to_genres_from_movies(client, monkeypatch):
    monkeypatch.setattr(api, "movies", FakeMovies(MOVIES, genres_error=ServiceUnavailableError("x")))
    resp = client.get("/")
    assert resp.status_code == 200
    assert b'<option value="Drama"' in resp.data


def test_movie_detail_shows_upcoming_showtimes_in_active_rooms(client, monkeypatch):
    rooms = [Room(id="r1", name="Sala 1", type="IMAX", location="Centro"),
             Room(id="r2", name="Sala 2", type="VIP", location="Norte", status="maintenance")]
    fake = FakeShowtimes()
    fake.showtimes = [
        Showtime(id="s1", room_id="r1", date="2030-05-10", time="19:30:00"),
        Showtime(id="s2", room_id="r2", date="2030-05-11", time="20:00:00"),
        Showtime(id="s0", room_id="r1", date="2020-01-01", time="10:00:00"),
    ]
    monkeypatch.setattr(api, "movies", FakeMovies(MOVIES))
    monkeypatch.setattr(api, "rooms", FakeRooms(rooms))
    monkeypatch.setattr(api, "showtimes", fake)

    resp = client.get("/movie/m1")

    assert resp.status_code == 200
    assert b"/booking/s1" in resp.data
    assert b"/booking/s2" not in resp.data
    assert b"/booking/s0" not in resp.data
    assert b"Norte" in resp.data
