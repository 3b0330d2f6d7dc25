from cineconnect.models import Room


class RoomsApi:
    def __init__(self, client):
        self.client = client

    def list_rooms(self, search=None, status=None, type=None, location=None):
        data = self.client.get("/rooms", params={
            "search": search,
            "status": status,
            "type": type,
            "location": location,
        })
        return [Room.from_api(r) for r in data.get("rooms") or []]

    def get_room(self, room_id):
        data = self.client.get(f"/rooms/{room_id}")
        return Room.from_api(data.get("room") or data)

    def locations(self):
        data = self.client.get("/rooms/locations")
        if isinstance(data, list):
            return data
        return list(data.get("locations") or [])

    def create_room(self, payload):
        data = self.client.post("/rooms", payload)
        return Room.from_api(data.get("room") or data)

    def update_room(self, room_id, payload):
        data = self.client.put(f"/rooms/{room_id}", payload)
        return Room.from_api(data.get("room") or data)

    def delete_room(self, room_id):
        self.client.delete(f"/rooms/{room_id}")
