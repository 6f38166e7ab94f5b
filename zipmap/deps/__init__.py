# Marks `zipmap.deps` as a real Python package so imports like
# `from zipmap.deps.lookups import get_weather_client` work reliably.
