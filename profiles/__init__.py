"""profiles/ -- Developer profiles with experience and education history."""
