"""
Deployment email rendering
"""

from vrpa.core.config import settings
from vrpa.schemas.device import Device

DEFAULT_TEMPLATE = """Hello,

Your vRPA appliance is ready for deployment. Download the image from the link below
and follow the setup guide included in the package.

[Insert Link Here]

Please reply to this email once the appliance is online so we can verify connectivity.

Thanks,
The Assessment Team
"""

def render_email(template: str, device: Device, placeholder: str = None) -> str:
    """Replace every occurrence of the link placeholder with the device's share link"""
    return template.replace(placeholder or settings.email_link_placeholder, device.sharefile_link)
