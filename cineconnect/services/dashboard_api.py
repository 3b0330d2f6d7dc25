PERIODS = ("today", "week", "month", "year")
EXPORT_FORMATS = {"excel": "xlsx", "pdf": "pdf"}


class DashboardApi:
    def __init__(self, client):
        self.client = client

    def stats(self, period="week"):
        return self.client.get("/dashboard/stats", params={"period": period}).get("stats") or {}

    def sales_by_movie(self, period="week"):
        data = self.client.get("/dashboard/sales-by-movie", params={"period": period})
        return list(data.get("salesByMovie") or [])

    def daily_trends(self, period="week"):
        data = self.client.get("/dashboard/daily-trends", params={"period": period})
        return list(data.get("dailyTrends") or [])

    def genre_distribution(self, period="month"):
        data = self.client.get("/dashboard/genre-distribution", params={"period": period})
        return list(data.get("genreDistribution") or [])

    def room_occupancy(self, location=None, period=None, custom_date=None):
        return self.client.get("/dashboard/room-occupancy", params={
            "location": location,
            "period": period,
            "customDate": custom_date,
        })

    def locations(self):
        return list(self.client.get("/dashboard/locations").get("locations") or [])

    def export_report(self, period="week", fmt="excel"):
        """Returns (content, filename, mimetype) of the sales report."""
        fmt = fmt if fmt in EXPORT_FORMATS else "excel"
        content, mimetype, filename = self.client.download(
            "/dashboard/export-report", params={"period": period, "format": fmt}
        )
        return content, filename or f"sales-report-{period}.{EXPORT_FORMATS[fmt]}", mimetype
