# 📄 File: gardenhub/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'gardenhub' folder as our Community Garden application package
# and records its version and basic package information.
#
# 🧪 Purpose (Technical Summary):
# Package initialization with version metadata for the Community Garden Hub
# FastAPI service backed by Supabase.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - gardenhub.main (application entry point)
# - pyproject.toml (version metadata)

"""
Community Garden Hub - plot tracking, volunteer task boards, events,
rules, messaging and weather for a shared community garden.
"""

__version__ = "1.0.0"
__title__ = "Community Garden Hub API"
__description__ = "Community garden management backed by Supabase"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__title__",
    "__description__",
    "__license__",
]
