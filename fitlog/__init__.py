"""FitLog: photo-based workout and meal logging with streak tracking."""
