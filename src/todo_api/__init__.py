"""
FastAPI Todo Backend package.

The application instance lives in todo_api.main (``todo_api.main:app``);
``todo_api.main.create_app`` builds one with explicit settings or storage.
"""
