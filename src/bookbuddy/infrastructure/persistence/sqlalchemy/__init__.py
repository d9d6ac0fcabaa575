"""SQLAlchemy persistence for the bookbuddy application."""
