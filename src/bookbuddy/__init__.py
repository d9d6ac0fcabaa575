"""BookBuddy - personal book library backend."""
