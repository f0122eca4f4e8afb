"""HTTP transport: routers, dependencies and error handlers."""
