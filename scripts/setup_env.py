"""Utility script to scaffold a local .env file."""
from __future__ import annotations

import secrets
from pathlib import Path

ENV_TEMPLATE = """# Environment configuration for Classroom Activities
DEBUG=true
DATA_DIR=./data
DEFAULT_TEACHER_PASSWORD={teacher_password}
DEFAULT_STUDENT_PASSWORD=123
MAX_UPLOAD_SIZE_MB=80
HOST=127.0.0.1
PORT=8000
"""


def main() -> None:
    env_path = Path(".env")
    if env_path.exists():
        print(".env already exists. No changes made.")
        return

    teacher_password = secrets.token_urlsafe(9)
    env_path.write_text(ENV_TEMPLATE.format(teacher_password=teacher_password), encoding="utf-8")
    print(
        "Created .env with a generated teacher password. It only applies before the "
        "first run seeds the teacher account."
    )


if __name__ == "__main__":
    main()
