"""posts/ -- Community posts with likes and comments."""
