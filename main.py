import os

from billing.main import create_app
from billing.models import db

# WSGI entry point for gunicorn/render
app = create_app()

if __name__ == '__main__':
    try:
        app.run(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
            debug=os.getenv("FLASK_DEBUG", "0") == "1",
        )
    finally:
        with app.app_context():
            db.engine.dispose()
