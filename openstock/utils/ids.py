import uuid


def generate_id(prefix: str) -> str:
    """Collision-free string id carrying a short category prefix, e.g. ``emp_3f2a...``."""
    return f"{prefix}_{uuid.uuid4().hex}"
