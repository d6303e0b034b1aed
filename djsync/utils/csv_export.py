import csv
import io
from typing import Iterable, Iterator

USER_DETAILS_HEADER = ["Name", "Email", "Phone Number", "Gender"]


def _render_row(row) -> str:
    buffer = io.StringIO()
    csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n").writerow(row)
    return buffer.getvalue()


def iter_user_details_csv(users: Iterable) -> Iterator[str]:
    """Yield the user-details CSV one line at a time, header first."""
    yield _render_row(USER_DETAILS_HEADER)
    for user in users:
        yield _render_row(
            [
                user.name or "",
                user.email or "",
                user.phone_number or "",
                user.gender.value if user.gender else "",
            ]
        )
