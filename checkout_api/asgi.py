"""
ASGI entrypoint: expose `app` for process managers / deployments.

- En production, un process manager (ex: gunicorn/uvicorn-workers) importe `checkout_api.asgi:app`.
- La configuration (routes, middlewares, handlers) est centralisée dans checkout_api.app.create_app().
"""

from checkout_api.app import create_app

app = create_app()

if __name__ == "__main__":
    # Exécution directe utile en développement local (uvicorn standalone).
    import os
    import uvicorn
    uvicorn.run(
        "checkout_api.asgi:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 5000)),
        reload=True,
    )
