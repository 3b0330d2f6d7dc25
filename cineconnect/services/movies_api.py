from cineconnect.models import Movie


class MoviesApi:
    def __init__(self, client):
        self.client = client

    def list_movies(self, search=None, genre=None, page=None, limit=None, status=None):
        data = self.client.get("/movies", params={
            "search": search,
            "genre": genre,
            "page": page,
            "limit": limit,
            "status": status,
        })
        movies = [Movie.from_api(m) for m in data.get("movies") or []]
        return movies, data.get("pagination") or {}

    def get_movie(self, movie_id):
        data = self.client.get(f"/movies/{movie_id}")
        return Movie.from_api(data.get("movie") or data)

    def genres(self):
        return list(self.client.get("/movies/genres").get("genres") or [])

    def create_movie(self, payload):
        data = self.client.post("/movies", payload)
        return Movie.from_api(data.get("movie") or data)

    def update_movie(self, movie_id, payload):
        data = self.client.put(f"/movies/{movie_id}", payload)
        return Movie.from_api(data.get("movie") or data)

    def delete_movie(self, movie_id):
        self.client.delete(f"/movies/{movie_id}")
