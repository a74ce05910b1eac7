"""
FastAPI routers for the mock API.

records.build_router returns one APIRouter per registered collection; the
application factory includes one for every entry of Settings.collections.
"""
