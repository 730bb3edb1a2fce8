# 📄 File: gardenhub/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Contains the settings that tell the garden app how to reach the hosted
# database, the weather service, and how to behave in each environment.
#
# 🧪 Purpose (Technical Summary):
# Configuration package initialization exporting the settings factory.
#
# 🔗 Dependencies:
# - settings.py (application settings)
#
# 🔄 Connected Modules / Calls From:
# - gardenhub.main (application startup)
# - All modules requiring configuration

from .settings import get_settings, Settings

__all__ = [
    "get_settings",
    "Settings",
]
