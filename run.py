"""Application entry point.

Runs the Zenith API with uvicorn for local development.
"""

import uvicorn

if __name__ == "__main__":
    uvicorn.run("zenith.main:app", host="localhost", port=8000, reload=True)
