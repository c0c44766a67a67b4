"""
Core scrobbling engine.

The `Scrobbler` acts as the high-level session coordinator, delegating the
construction of time-stamped batches to the queue builder and their submission
to the API client.
"""
