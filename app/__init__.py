# =============================================================================
# app/ - OrderDesk HTTP Layer
# =============================================================================
# FastAPI application for order intake and administration:
# - main.py: app factory, CORS, exception handlers, router mounting
# - config.py: settings read from the environment / .env
# - auth/: Supabase JWT verification and profile lookup
# - routers/: products, orders, admin users, backfill, tasks, health
#
# Routers only translate HTTP to service calls; order and account rules
# live in core/services.
# =============================================================================
