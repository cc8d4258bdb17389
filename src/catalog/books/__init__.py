"""Book records: storage, writes and hydrated search."""
