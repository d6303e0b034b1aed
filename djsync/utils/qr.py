import base64
from io import BytesIO

import qrcode


def make_qr_data_url(
    data: str,
    error_correction=qrcode.constants.ERROR_CORRECT_L,
    box_size: int = 10,
    border: int = 4,
) -> str:
    """Render ``data`` as a PNG QR code and return it as a base64 data URL."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=error_correction,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    img.save(buffer, "PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def event_registration_url(client_url: str, event_id: int, dj_id: int) -> str:
    return f"{client_url.rstrip('/')}/register?eventId={event_id}&djId={dj_id}"


def make_event_qr_data_url(client_url: str, event_id: int, dj_id: int) -> str:
    return make_qr_data_url(
        event_registration_url(client_url, event_id, dj_id),
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=8,
        border=1,
    )
