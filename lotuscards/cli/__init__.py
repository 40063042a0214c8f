"""Terminal front end for lotuscards."""
