import time


def current_timestamp():
    """Epoch milliseconds, the unit every history and reward record uses."""
    return int(time.time() * 1000)


def generate_character_id(rng, timestamp=None):
    """Generate a unique character ID from the creation time and a random suffix."""
    if timestamp is None:
        timestamp = current_timestamp()
    return f"char_{timestamp}_{rng.getrandbits(36):09x}"


def generate_event_id(rng, prefix="evt"):
    """Generate an ID for a freshly built decision point."""
    return f"{prefix}_{rng.getrandbits(32):08x}"
