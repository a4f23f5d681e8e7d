"""
QR code generation for event share links
"""

import io
import qrcode

from app.services.event_service import build_share_url

class QRService:
    """Service for generating QR codes"""

    @staticmethod
    def generate_share_qr(event_id: str, format: str = 'PNG') -> bytes:
        """Generate a QR code pointing at the event's share page"""
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(build_share_url(event_id))
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format=format)
        return buffer.getvalue()
