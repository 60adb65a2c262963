"""
FastAPI routers grouped by concern (auth, chat, projects, admin).

Each file inside this package exposes an APIRouter that is included in the
main application (app.py).
"""
