import sys


def get_platform_name(platform: str | None = None) -> str:
    platform = platform or sys.platform
    if platform == "win32":
        return "Windows"
    return "Linux"
