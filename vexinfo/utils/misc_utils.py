# vexinfo/utils/misc_utils.py
import re
import hashlib
from urllib.parse import urlparse


def generate_canonical_id(*args: str) -> str:
    """Generates a consistent, URL-safe ID from one or more strings."""
    combined = "_".join(str(arg).lower() for arg in args if arg)
    # Remove non-alphanumeric characters (except underscore and dash)
    safe_string = re.sub(r"[^\w-]+", "", combined.replace(" ", "_"))
    if len(safe_string) > 100:
        return hashlib.sha1(safe_string.encode()).hexdigest()[:16]
    return safe_string


def sku_from_event_link(link: str) -> str:
    """Extracts the event SKU from a RobotEvents page link.

    'https://www.robotevents.com/robot-competitions/vex-robotics-competition/RE-VRC-17-3805.html'
    gives 'RE-VRC-17-3805'.
    """
    path = urlparse(link).path.rstrip("/")
    last_segment = path.rsplit("/", 1)[-1]
    if last_segment.endswith(".html"):
        last_segment = last_segment[: -len(".html")]
    if not last_segment:
        raise ValueError(f"No event SKU found in link: {link}")
    return last_segment
