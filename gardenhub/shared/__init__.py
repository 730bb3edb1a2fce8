# 📄 File: gardenhub/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Holds the common tools every part of the garden app uses, like settings,
# error types, logging and the connection to our hosted database.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package for configuration, exceptions, logging and the
# Supabase gateway used by every feature module.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - All feature modules under gardenhub.modules

__all__ = []
