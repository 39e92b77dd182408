"""Campus Feed API: school-scoped social feed with ranked views and async moderation."""

__version__ = "1.0.0"
