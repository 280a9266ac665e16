"""Application services for Pomodoro CLI."""
