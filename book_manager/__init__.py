"""Book Manager - REST client package

This package contains the client-side core for managing book records held by a
remote REST service:
- Book records (book.py)
- Collection store (store.py)
- Edit session / form draft (edit_session.py)
- Status notifier (status.py)
- Sync controller (controller.py)
- Client session object (client.py)
- CLI interface (main.py)
"""

__version__ = "1.0.0"
