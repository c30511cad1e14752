"""
Expose the FastAPI application instance.

Importing this module will create a FastAPI application and register
all routes.  The service can be started with Uvicorn using the typical
``-m`` invocation:

```sh
python -m pistonexec.api
```
"""

from .main import app

__all__ = ["app"]
