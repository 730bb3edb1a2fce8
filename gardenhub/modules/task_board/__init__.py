# 📄 File: gardenhub/modules/task_board/__init__.py
# 🧭 Purpose (Layman Explanation):
# The volunteer task board: three columns of garden chores that members drag between
# "open", "in progress" and "completed".
# 🧪 Purpose (Technical Summary):
# Package for the task board module: pure drag-and-drop state machine, reconciliation
# against the gateway, task CRUD use cases and the HTTP endpoints.
# 🔗 Dependencies:
# FastAPI, pydantic, gardenhub.shared
# 🔄 Connected Modules / Calls From:
# gardenhub.api.v1.router, gardenhub.main (repository overrides)
