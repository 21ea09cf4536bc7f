ADMIN = "ADMIN"
STUDENT = "STUDENT"

ALL_ROLES = (ADMIN, STUDENT)


def parse_role(raw: str) -> str | None:
    """Map user input like 'admin' / 'Student' to a role constant."""
    value = (raw or "").strip().upper()
    return value if value in ALL_ROLES else None
