"""Single render passes and the watch loop that repeats them."""
