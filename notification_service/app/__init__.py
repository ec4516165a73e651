"""FastAPI application wiring: factory, lifespan, middleware, handlers and routers."""
