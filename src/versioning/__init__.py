"""Version descriptor models, input parsing and resolution."""
