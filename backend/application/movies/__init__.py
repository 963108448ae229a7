from application.movies.tracker_service import MovieTrackerService
from application.movies.views import ViewMode, render_view

__all__ = ["MovieTrackerService", "ViewMode", "render_view"]
